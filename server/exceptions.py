"""Custom exception classes for the upload server."""


class ChunkpostServerError(Exception):
    """
    Base exception class for all server-side upload errors.
    """
    pass


class InvalidExpiryError(ChunkpostServerError):
    """
    Raised when the requested lifetime uses an unknown unit or is not positive.
    """
    pass


class ExpiryTooLongError(ChunkpostServerError):
    """
    Raised when the requested lifetime exceeds the configured maximum.
    """
    pass


class UploadNotFoundError(ChunkpostServerError):
    """
    Raised when a uuid does not name a pending upload (unknown, finished or timed out).
    """
    pass


class ChunkTooLargeError(ChunkpostServerError):
    """
    Raised when an appended chunk exceeds the server's chunk size.
    """
    pass


class DownloadForbiddenError(ChunkpostServerError):
    """
    Raised when a password-protected upload is requested without the right password.
    """
    pass
