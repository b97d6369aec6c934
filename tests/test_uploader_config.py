"""Tests for uploader configuration module."""

import json

import pytest

from uploader.config import Config


def test_config_creates_default_file(tmp_path):
    """Test that config file is created with defaults if missing."""
    config_path = tmp_path / '.chunkpost' / 'config.json'
    config = Config(config_path)

    assert config_path.exists()

    assert config.data['server_host'] == Config.DEFAULT_CONFIG['server_host']
    assert config.data['timeout'] == 30
    assert config.data['chunk_size'] == 32 * 1024 * 1024
    assert config.data['default_time'] == 1
    assert config.data['default_unit'] == 'days'


def test_config_loads_existing_file(tmp_path):
    """Test loading existing config file."""
    config_path = tmp_path / '.chunkpost' / 'config.json'
    config_path.parent.mkdir(parents=True)

    existing_data = {
        'server_host': 'example.com',
        'server_port': 9000,
        'chunk_size': 1024,
    }
    with open(config_path, 'w') as f:
        json.dump(existing_data, f)

    config = Config(config_path)

    assert config.get_base_url() == 'http://example.com:9000'
    assert config.get_chunk_size() == 1024

    assert config.get_timeout() == 30
    assert config.get_default_expiry() == (1, 'days')


def test_config_handles_corrupted_file(tmp_path):
    """Test recovery from corrupted config file."""
    config_path = tmp_path / '.chunkpost' / 'config.json'
    config_path.parent.mkdir(parents=True)

    with open(config_path, 'w') as f:
        f.write('{ invalid json content')

    config = Config(config_path)
    assert config.data == Config.DEFAULT_CONFIG

    backup_path = config_path.with_suffix('.json.bak')
    assert backup_path.exists()
    assert backup_path.read_text() == '{ invalid json content'


def test_config_set_persists(temp_config):
    """Test that set() writes the new value to disk."""
    temp_config.set('timeout', 5.0)

    assert temp_config.get_timeout() == 5.0

    with open(temp_config.config_path, 'r') as f:
        data = json.load(f)
    assert data['timeout'] == 5.0


def test_config_set_rejects_unknown_key(temp_config):
    """Test that unknown keys are refused."""
    with pytest.raises(KeyError):
        temp_config.set('api_key', 'abc')


def test_config_timeout_can_be_disabled(temp_config):
    """Test that a null timeout is passed through as None."""
    temp_config.set('timeout', None)

    assert temp_config.get_timeout() is None


def test_config_get_base_url(temp_config):
    """Test base URL construction."""
    temp_config.data['server_host'] = 'files.local'
    temp_config.data['server_port'] = 8080
    assert temp_config.get_base_url() == 'http://files.local:8080'


def test_config_default_expiry(temp_config):
    """Test default expiry reflects stored settings."""
    temp_config.set('default_time', 12)
    temp_config.set('default_unit', 'hours')

    assert temp_config.get_default_expiry() == (12, 'hours')
