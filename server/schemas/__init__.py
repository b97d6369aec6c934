"""Pydantic schemas for API requests and responses."""

from server.schemas.uploads import (
    PrepareRequest,
    PrepareResponse,
    AppendResponse
)
from server.schemas.common import ErrorResponse

__all__ = [
    "PrepareRequest",
    "PrepareResponse",
    "AppendResponse",
    "ErrorResponse"
]
