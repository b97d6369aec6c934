"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.models import ConfigCommand, UploadCommand
from cli.utils import ProgressPrinter, format_result
from uploader.client import UploadClient
from uploader.config import Config
from uploader.exceptions import InvalidParamsError
from uploader.models import UploadRequestParams
from uploader.orchestrator import UploadOrchestrator

logger = get_logger(__name__)


_config: Optional[Config] = None
_client: Optional[UploadClient] = None


def get_config() -> Config:
    """
    Get or create global Config instance.

    Returns:
        Config instance backed by ~/.chunkpost/config.json
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_client() -> UploadClient:
    """
    Get or create global UploadClient instance.

    Returns:
        UploadClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new UploadClient instance")
        _client = UploadClient(get_config())
    return _client


def reset_client() -> None:
    """Drop the cached client so the next upload picks up configuration changes."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


def handle_upload(
    cmd: UploadCommand,
    client: Optional[UploadClient] = None,
    config: Optional[Config] = None,
    printer: Optional[ProgressPrinter] = None
) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with path and optional expiry/password/name
        client: Optional UploadClient for dependency injection (testing)
        config: Optional Config for dependency injection (testing)
        printer: Optional progress sink (a stdout ProgressPrinter by default)

    Returns:
        Success or error message
    """
    config = config or get_config()
    path = Path(cmd.path).expanduser()

    if not path.exists():
        return f"Error: File not found: {cmd.path}"
    if not path.is_file():
        return f"Error: Not a file: {cmd.path}"

    default_time, default_unit = config.get_default_expiry()
    try:
        params = UploadRequestParams(
            filename=cmd.filename or path.name,
            time=cmd.time if cmd.time is not None else default_time,
            unit=cmd.unit or default_unit,
            password=cmd.password,
        )
        printer = printer or ProgressPrinter(params.filename, path.stat().st_size)
        orchestrator = UploadOrchestrator(
            client or get_client(), config.get_chunk_size(), progress=printer
        )
    except InvalidParamsError as e:
        return f"Error: {e}"

    logger.info(f"Executing upload command: {path} as {params.filename}")
    try:
        result = orchestrator.upload_file(path, params)
    except OSError as e:
        logger.error(f"Cannot read {path}: {e}")
        return f"Error: {e}"
    finally:
        printer.finish()
    logger.debug(f"Upload command completed: {result.phase.value}")
    return format_result(result, params.filename)


def handle_config(cmd: ConfigCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'config' command.

    Args:
        cmd: ConfigCommand, empty to show the configuration
        config: Optional Config for dependency injection (testing)

    Returns:
        Current configuration or confirmation of the change
    """
    config = config or get_config()

    if cmd.key is None:
        lines = [f"Configuration ({config.config_path}):"]
        lines.extend(f"  {key} = {value}" for key, value in sorted(config.data.items()))
        return '\n'.join(lines)

    if cmd.key not in config.DEFAULT_CONFIG:
        return f"Error: Unknown config key: {cmd.key}"

    default = config.DEFAULT_CONFIG[cmd.key]
    try:
        if cmd.key in config.NULLABLE_KEYS and cmd.value.lower() in ("none", "null"):
            value = None
        elif isinstance(default, str):
            value = cmd.value
        else:
            value = type(default)(cmd.value)
    except ValueError:
        return f"Error: {cmd.key} expects a {type(default).__name__}, got '{cmd.value}'"

    config.set(cmd.key, value)
    reset_client()
    return f"Set {cmd.key} = {value}"
