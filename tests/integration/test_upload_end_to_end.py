"""Integration tests running the uploader against the upload server."""

import io

import pytest

from cli.commands import handle_upload
from cli.models import UploadCommand
from cli.utils import ProgressPrinter
from server.repositories import UploadRepository
from uploader.client import UploadClient
from uploader.exceptions import TransferError
from uploader.models import UploadPhase, UploadRequestParams
from uploader.orchestrator import UploadOrchestrator


@pytest.fixture
def uploader(temp_config, server_api):
    """UploadClient whose requests are served in-process by the upload server."""
    return UploadClient(temp_config, session=server_api)


def test_file_round_trips_through_server(uploader, sample_file, payload, server_env):
    """Test a multi-chunk upload lands byte-identical on the server."""
    events = []
    orchestrator = UploadOrchestrator(uploader, chunk_size=300, progress=events.append)

    result = orchestrator.upload_file(sample_file, time=1, unit='hours', password='pw')

    assert result.ok
    assert result.chunks_sent == 4
    assert [e.label for e in events] == [f'Sending chunk {i}/4' for i in range(1, 5)]
    assert (server_env / result.token).read_bytes() == payload

    upload = UploadRepository.get_by_uuid(result.token)
    assert upload.done
    assert upload.size == 1000
    assert upload.filename == 'sample.bin'


def test_empty_upload(uploader, server_env):
    orchestrator = UploadOrchestrator(uploader, chunk_size=300)

    result = orchestrator.upload_bytes(b'', UploadRequestParams(filename='empty', time=1, unit='days'))

    assert result.ok
    assert result.chunks_sent == 0
    assert (server_env / result.token).read_bytes() == b''


def test_oversized_chunks_fail_on_first_append(uploader):
    """Test that a chunk size above the server's limit fails the attempt."""
    orchestrator = UploadOrchestrator(uploader, chunk_size=2048)
    params = UploadRequestParams(filename='big.bin', time=1, unit='days')

    result = orchestrator.upload(io.BytesIO(b'x' * 4096), 4096, params)

    assert result.phase is UploadPhase.FAILED
    assert isinstance(result.error, TransferError)
    assert result.error.status_code == 400
    assert 'CHUNK_TOO_LARGE' in str(result.error)
    assert UploadRepository.get_pending(result.token) is not None


def test_rejected_expiry_surfaces_server_detail(uploader):
    orchestrator = UploadOrchestrator(uploader, chunk_size=300)
    params = UploadRequestParams(filename='a', time=400, unit='days')

    result = orchestrator.upload_bytes(b'abc', params)

    assert result.error.status_code == 400
    assert 'EXPIRY_TOO_LONG' in str(result.error)


def test_cli_upload_command(uploader, temp_config, sample_file, server_env):
    """Test the CLI upload command end to end."""
    temp_config.set('chunk_size', 512)
    cmd = UploadCommand(path=str(sample_file), time=10, unit='minutes', filename='renamed.bin')

    printer = ProgressPrinter('renamed.bin', 1000, stream=io.StringIO())

    output = handle_upload(cmd, client=uploader, config=temp_config, printer=printer)

    assert output.startswith('Uploaded: renamed.bin')
    assert 'in 2 chunk(s)' in output
    token = output.rsplit('UUID: ', 1)[1]
    assert (server_env / token).stat().st_size == 1000
