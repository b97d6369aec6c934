"""Exception hierarchy for upload attempts."""

from typing import Optional


class UploadError(Exception):
    """
    Base exception class for every failure of an upload attempt.
    """

    phase: str = "upload"


class InvalidParamsError(UploadError, ValueError):
    """
    Raised when upload parameters or chunking arguments are invalid.

    Detected before any network exchange takes place.
    """

    phase = "validate"


class InvalidTransitionError(UploadError):
    """
    Raised when the attempt state machine is asked for a transition it does not allow.
    """

    phase = "state"


class ServerError(UploadError):
    """
    Raised when the server answers a prepare or finish exchange with a non-success status.

    ``status_code`` is None when the server could not be reached or timed out.
    """

    def __init__(self, phase: str, status_code: Optional[int], detail: str = ""):
        self.phase = phase
        self.status_code = status_code
        self.detail = detail
        if status_code is None:
            message = f"{phase} failed: {detail or 'server unreachable'}"
        else:
            message = f"{phase} failed: server responded with code {status_code}"
            if detail:
                message = f"{message} ({detail})"
        super().__init__(message)


class ProtocolError(UploadError):
    """
    Raised when a prepare exchange succeeds but its body carries no string ``uuid``.
    """

    phase = "prepare"


class TransferError(UploadError):
    """
    Raised when an append exchange fails; the remaining chunks are abandoned.
    """

    phase = "append"

    def __init__(self, chunk_index: int, start: int, status_code: Optional[int], detail: str = ""):
        self.chunk_index = chunk_index
        self.start = start
        self.status_code = status_code
        self.detail = detail
        reason = f"code {status_code}" if status_code is not None else (detail or "no response")
        message = f"Chunk {chunk_index} at offset {start} was not accepted: {reason}"
        if status_code is not None and detail:
            message = f"{message} ({detail})"
        super().__init__(message)
