"""Utility functions for CLI operations."""

import sys
from typing import TextIO

from cli.constants import GREEN, RED, RESET
from uploader.models import ProgressEvent, UploadResult


class ProgressPrinter:
    """Progress sink that renders upload progress on a single terminal line."""

    def __init__(self, filename: str, total_size: int, stream: TextIO = sys.stdout):
        """
        Initialize the progress printer.

        Args:
            filename: Display name for the file
            total_size: Total size of the payload in bytes
            stream: Where to render (stdout by default)
        """
        self.filename = filename
        self.total_size = total_size
        self.stream = stream
        self._started = False

    def __call__(self, event: ProgressEvent) -> None:
        """Render one progress event."""
        self._started = True
        sent_str = format_file_size(int(event.fraction * self.total_size))
        total_str = format_file_size(self.total_size)
        self.stream.write(
            f"\r{event.label} of {self.filename}: {sent_str} / {total_str} ({GREEN}{event.percent:.1f}%{RESET})"
        )
        self.stream.flush()

    def finish(self) -> None:
        """Terminate the progress line if anything was rendered."""
        if self._started:
            self.stream.write('\n')
            self.stream.flush()
            self._started = False


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.
    
    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).
    
    Args:
        size_bytes: File size in bytes
        
    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    
    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0
    
    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    
    return f"{size:.2f} PiB"


def format_result(result: UploadResult, filename: str) -> str:
    """
    Describe the outcome of an upload attempt.

    Args:
        result: Terminal result returned by the orchestrator
        filename: Display name for the file

    Returns:
        One or two line summary
    """
    if result.ok:
        return (
            f"Uploaded: {filename} ({format_file_size(result.bytes_sent)} in {result.chunks_sent} chunk(s))\n"
            f"UUID: {result.token}"
        )

    error = result.error
    lines = [f"{RED}Upload failed during {error.phase}:{RESET} {error}"]
    if result.chunks_sent:
        lines.append(
            f"{result.chunks_sent} chunk(s) ({format_file_size(result.bytes_sent)}) had been accepted; "
            f"the upload must be restarted."
        )
    return '\n'.join(lines)
