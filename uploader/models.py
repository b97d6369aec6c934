"""Data types for chunked upload attempts."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from common.types import ExpiryUnit
from uploader.exceptions import InvalidParamsError, InvalidTransitionError, UploadError


@dataclass(frozen=True)
class UploadRequestParams:
    """Parameters negotiated once per attempt by the prepare exchange."""

    filename: str
    time: int
    unit: ExpiryUnit
    password: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.filename, str) or not self.filename:
            raise InvalidParamsError("filename must be a non-empty string")
        if isinstance(self.time, bool) or not isinstance(self.time, int) or self.time <= 0:
            raise InvalidParamsError(f"expiry time must be a positive integer, got {self.time!r}")
        try:
            unit = ExpiryUnit(self.unit)
        except ValueError:
            raise InvalidParamsError(
                f"unknown expiry unit {self.unit!r}, expected one of {', '.join(ExpiryUnit.names())}"
            ) from None
        object.__setattr__(self, "unit", unit)
        if self.password == "":
            object.__setattr__(self, "password", None)

    def to_payload(self) -> dict:
        """Build the JSON body of the prepare exchange."""
        return {
            "password": self.password,
            "time": self.time,
            "unit": self.unit.value,
            "filename": self.filename,
        }


@dataclass(frozen=True)
class Chunk:
    """Half-open byte range ``[start, start + size)`` of the source payload."""

    index: int
    start: int
    size: int

    @property
    def end(self) -> int:
        return self.start + self.size


@dataclass
class UploadState:
    """Client-side view of one session: the token and how far transmission got."""

    token: str
    total_size: int
    chunk_size: int
    offset: int = 0

    @property
    def remaining(self) -> int:
        return self.total_size - self.offset

    @property
    def complete(self) -> bool:
        return self.offset == self.total_size

    def advance(self, chunk: Chunk) -> None:
        """
        Record an acknowledged chunk.

        Args:
            chunk: Chunk that the server just accepted

        Raises:
            InvalidTransitionError: If the chunk does not start at the current
                offset or would move past the end of the payload
        """
        if chunk.start != self.offset:
            raise InvalidTransitionError(
                f"chunk {chunk.index} starts at {chunk.start}, expected {self.offset}"
            )
        if chunk.end > self.total_size:
            raise InvalidTransitionError(
                f"chunk {chunk.index} ends at {chunk.end}, past total size {self.total_size}"
            )
        self.offset = chunk.end


class UploadPhase(str, Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    TRANSMITTING = "transmitting"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (UploadPhase.DONE, UploadPhase.FAILED)

    def can_move_to(self, target: "UploadPhase") -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS = {
    UploadPhase.IDLE: {UploadPhase.PREPARING},
    UploadPhase.PREPARING: {UploadPhase.TRANSMITTING, UploadPhase.FINALIZING, UploadPhase.FAILED},
    UploadPhase.TRANSMITTING: {UploadPhase.TRANSMITTING, UploadPhase.FINALIZING, UploadPhase.FAILED},
    UploadPhase.FINALIZING: {UploadPhase.DONE, UploadPhase.FAILED},
    UploadPhase.DONE: set(),
    UploadPhase.FAILED: set(),
}


@dataclass(frozen=True)
class ProgressEvent:
    """Progress notification emitted before each chunk is sent."""

    fraction: float
    label: str
    chunk_index: int
    chunk_count: int

    @property
    def percent(self) -> float:
        return self.fraction * 100


@dataclass
class UploadResult:
    """Terminal outcome of one upload attempt."""

    phase: UploadPhase
    token: Optional[str] = None
    bytes_sent: int = 0
    chunks_sent: int = 0
    confirmation: Any = None
    error: Optional[UploadError] = None
    history: list[UploadPhase] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.phase is UploadPhase.DONE

    def raise_for_error(self) -> "UploadResult":
        """
        Re-raise the error that ended the attempt, if any.

        Returns:
            The result itself when the attempt succeeded
        """
        if self.error is not None:
            raise self.error
        return self
