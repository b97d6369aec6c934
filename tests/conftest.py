"""Shared pytest fixtures for all tests."""

import httpx
import pytest
from fastapi.testclient import TestClient

from tests.fakes import FakeUploadServer
from uploader.client import UploadClient
from uploader.config import Config


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .chunkpost directory
    """
    config_dir = tmp_path / '.chunkpost'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def fake_server():
    """Fake upload server with default (successful) behaviour."""
    return FakeUploadServer()


@pytest.fixture
def make_client(temp_config):
    """
    Factory building an UploadClient whose HTTP session is served by a handler.
    """
    clients = []

    def _make(handler) -> UploadClient:
        session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')
        client = UploadClient(temp_config, session=session)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def payload():
    """1000 bytes whose content identifies each offset's position."""
    return bytes(i % 251 for i in range(1000))


@pytest.fixture
def sample_file(tmp_path, payload):
    """
    Create a sample file for testing file uploads.

    Returns:
        Path to a 1000 byte binary file
    """
    file_path = tmp_path / 'sample.bin'
    file_path.write_bytes(payload)
    return file_path


@pytest.fixture
def server_env(tmp_path, monkeypatch):
    """
    Point the upload server at a temporary database and data directory.

    Returns:
        Path to the data directory
    """
    data_dir = tmp_path / 'files'
    db_path = tmp_path / 'chunkpost.db'
    monkeypatch.setattr("server.database.DATABASE_PATH", str(db_path))
    monkeypatch.setattr("server.config.DATABASE_PATH", str(db_path))
    monkeypatch.setattr("server.config.DATA_DIR", str(data_dir))
    monkeypatch.setattr("server.config.CHUNK_SIZE", 1024)
    return data_dir


@pytest.fixture
def server_api(server_env):
    """Create FastAPI test client for the upload server, with startup run."""
    from server.main import app

    with TestClient(app) as client:
        yield client
