"""Project-wide constants (chunk size, timeouts, expiry limits)."""

CHUNK_SIZE_BYTES: int = 32 * 1024 * 1024  # 32 MiB default chunk size

DEFAULT_TIMEOUT_SECONDS: float = 30.0

SESSION_TIMEOUT_SECONDS: int = 60

MAX_EXPIRY_DAYS: int = 365

CHUNK_FIELD_NAME = "chunk"
