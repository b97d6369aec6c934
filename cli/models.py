"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class UploadCommand:
    """Upload one file."""

    path: str
    password: Optional[str] = None
    time: Optional[int] = None
    unit: Optional[str] = None
    filename: Optional[str] = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ConfigCommand:
    """Show configuration, or set one key when both key and value are given."""

    key: Optional[str] = None
    value: Optional[str] = None
    command: Literal["config"] = "config"


CommandRequest = UploadCommand | ConfigCommand
