"""Configuration management for the chunkpost uploader."""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Optional

from common.constants import CHUNK_SIZE_BYTES, DEFAULT_TIMEOUT_SECONDS
from common.logging_config import get_logger
from common.types import ExpiryUnit

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.chunkpost' / 'config.json'


class Config:
    """Manages uploader configuration stored in a JSON file."""

    DEFAULT_CONFIG = {
        "server_host": os.environ.get("CHUNKPOST_SERVER_HOST", "localhost"),
        "server_port": int(os.environ.get("CHUNKPOST_SERVER_PORT", "8000")),
        "timeout": DEFAULT_TIMEOUT_SECONDS,
        "chunk_size": CHUNK_SIZE_BYTES,
        "default_time": 1,
        "default_unit": ExpiryUnit.DAYS.value,
    }

    # Keys that accept "none" / "null" from the command line
    NULLABLE_KEYS = frozenset({"timeout"})

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.chunkpost/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            import tempfile
            self.config_path = Path(tempfile.gettempdir()) / '.chunkpost' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        config = self.DEFAULT_CONFIG.copy()

        if not self.config_path.exists():
            self._write(config)
            return config

        try:
            with open(self.config_path, 'r') as f:
                config.update(json.load(f))
        except (json.JSONDecodeError, IOError) as e:
            backup_path = self.config_path.with_suffix('.json.bak')
            logger.warning(f"Unreadable config {self.config_path}: {e}; backing up to {backup_path}")
            try:
                shutil.copy(self.config_path, backup_path)
            except OSError as copy_error:
                logger.warning(f"Could not back up config: {copy_error}")
            return self.DEFAULT_CONFIG.copy()
        return config

    def _write(self, data: dict) -> None:
        try:
            with open(self.config_path, 'w') as f:
                json.dump(data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not write config {self.config_path}: {e}")

    def save(self) -> None:
        """Save current configuration to file."""
        self._write(self.data)

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value and save to file.

        Args:
            key: Configuration key (must be one of DEFAULT_CONFIG)
            value: New value

        Raises:
            KeyError: If the key is unknown
        """
        if key not in self.DEFAULT_CONFIG:
            raise KeyError(f"Unknown config key: {key}")
        self.data[key] = value
        self.save()

    def get_base_url(self) -> str:
        """
        Get server base URL.

        Returns:
            Base URL string (e.g., "http://localhost:8000")
        """
        host = self.data.get('server_host', 'localhost')
        port = self.data.get('server_port', 8000)
        return f"http://{host}:{port}"

    def get_timeout(self) -> Optional[float]:
        """
        Get per-exchange timeout in seconds; None disables the timeout.
        """
        return self.data.get('timeout', DEFAULT_TIMEOUT_SECONDS)

    def get_chunk_size(self) -> int:
        return int(self.data.get('chunk_size', CHUNK_SIZE_BYTES))

    def get_default_expiry(self) -> tuple[int, str]:
        """
        Get the expiry applied when an upload does not specify one.

        Returns:
            Tuple of (time, unit)
        """
        return (
            int(self.data.get('default_time', 1)),
            self.data.get('default_unit', ExpiryUnit.DAYS.value),
        )
