"""Repository layer for database access."""

from server.repositories.upload_repository import Upload, UploadRepository

__all__ = ["Upload", "UploadRepository"]
