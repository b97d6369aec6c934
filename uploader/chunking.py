"""Partitioning of a payload into sequential chunks."""

from typing import Iterator

from uploader.exceptions import InvalidParamsError
from uploader.models import Chunk


def _validate(total_size: int, chunk_size: int) -> None:
    if chunk_size <= 0:
        raise InvalidParamsError(f"chunk size must be positive, got {chunk_size}")
    if total_size < 0:
        raise InvalidParamsError(f"total size must not be negative, got {total_size}")


def chunk_count(total_size: int, chunk_size: int) -> int:
    """
    Number of chunks needed to cover ``total_size`` bytes.

    Args:
        total_size: Payload size in bytes
        chunk_size: Maximum chunk size in bytes

    Returns:
        ceil(total_size / chunk_size), zero for an empty payload
    """
    _validate(total_size, chunk_size)
    return -(-total_size // chunk_size)


def plan_chunks(total_size: int, chunk_size: int) -> Iterator[Chunk]:
    """
    Iterate over the chunks partitioning ``[0, total_size)`` in increasing offset order.

    Every chunk but the last has exactly ``chunk_size`` bytes.

    Args:
        total_size: Payload size in bytes
        chunk_size: Maximum chunk size in bytes

    Raises:
        InvalidParamsError: If chunk_size is not positive or total_size is negative
    """
    _validate(total_size, chunk_size)
    return (
        Chunk(index=index, start=start, size=min(chunk_size, total_size - start))
        for index, start in enumerate(range(0, total_size, chunk_size))
    )


def progress_label(index: int, count: int) -> str:
    """Human readable label for the chunk about to be sent."""
    return f"Sending chunk {index + 1}/{count}"
