"""Command parser for CLI input."""

import shlex

from cli.constants import EXPIRY_UNITS
from cli.models import CommandRequest, ConfigCommand, UploadCommand


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (UploadCommand or ConfigCommand)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    command_name = tokens[0]

    if command_name == "upload":
        return _parse_upload(tokens[1:])
    elif command_name == "config":
        return _parse_config(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path> [--password P] [--expires N UNIT] [--name NAME]'."""
    path = None
    options: dict = {}
    i = 0

    while i < len(args):
        arg = args[i]
        if arg == "--password":
            options["password"] = _option_value(args, i, "--password")
            i += 2
        elif arg == "--name":
            options["filename"] = _option_value(args, i, "--name")
            i += 2
        elif arg == "--expires":
            if i + 2 >= len(args):
                raise ParseError("--expires requires <n> <unit>")
            options["time"], options["unit"] = _parse_expiry(args[i + 1], args[i + 2])
            i += 3
        elif arg.startswith("--"):
            raise ParseError(f"Unknown option: {arg}")
        elif path is None:
            path = arg
            i += 1
        else:
            raise ParseError("upload takes exactly one file")

    if path is None:
        raise ParseError("upload requires a file path")

    return UploadCommand(path=path, **options)


def _option_value(args: list[str], index: int, name: str) -> str:
    if index + 1 >= len(args):
        raise ParseError(f"{name} requires a value")
    return args[index + 1]


def _parse_expiry(time_str: str, unit: str) -> tuple[int, str]:
    try:
        time = int(time_str)
    except ValueError:
        raise ParseError(f"Expiry must be a whole number, got '{time_str}'")
    if time <= 0:
        raise ParseError("Expiry must be positive")
    if unit not in EXPIRY_UNITS:
        raise ParseError(f"Unknown unit '{unit}' (expected one of: {', '.join(EXPIRY_UNITS)})")
    return time, unit


def _parse_config(args: list[str]) -> ConfigCommand:
    """Parse 'config [key value]' command."""
    if not args:
        return ConfigCommand()
    if len(args) != 2:
        raise ParseError("config takes no arguments or exactly 2: <key> <value>")

    key, value = args
    return ConfigCommand(key=key, value=value)
