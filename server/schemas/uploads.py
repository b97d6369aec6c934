"""Pydantic schemas for the upload endpoints."""

from typing import Optional
from pydantic import BaseModel, Field


class PrepareRequest(BaseModel):
    """Request model for negotiating an upload session."""
    password: Optional[str] = None
    time: int
    unit: str
    filename: str = Field(..., min_length=1)


class PrepareResponse(BaseModel):
    """Response model carrying the session token."""
    uuid: str


class AppendResponse(BaseModel):
    """Response model for an accepted chunk."""
    size: int
