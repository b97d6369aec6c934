"""Upload service: business logic behind prepare, append, finish and download."""

import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import BinaryIO, Optional

from common.logging_config import get_logger
from common.types import ExpiryUnit
from server import config
from server.exceptions import (
    ChunkTooLargeError,
    DownloadForbiddenError,
    ExpiryTooLongError,
    InvalidExpiryError,
    UploadNotFoundError,
)
from server.passwords import hash_password, verify_password
from server.repositories.upload_repository import Upload, UploadRepository

logger = get_logger(__name__)

COPY_BUFFER_SIZE = 1024 * 1024


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UploadService:
    def __init__(
        self,
        data_dir: Optional[str] = None,
        chunk_size: Optional[int] = None,
        session_timeout: Optional[int] = None,
    ):
        self.data_dir = Path(data_dir or config.DATA_DIR)
        self.chunk_size = chunk_size or config.CHUNK_SIZE
        self.session_timeout = timedelta(
            seconds=session_timeout if session_timeout is not None else config.SESSION_TIMEOUT
        )
        self.upload_repo = UploadRepository()

    def data_path(self, upload_uuid: str) -> Path:
        return self.data_dir / upload_uuid

    def prepare(self, filename: str, time: int, unit: str, password: Optional[str] = None) -> Upload:
        """
        Register a pending upload.

        Raises:
            InvalidExpiryError: If the unit is unknown or time is not positive
            ExpiryTooLongError: If the expiry lies beyond MAX_EXPIRY
        """
        if time <= 0:
            raise InvalidExpiryError("Duration must be positive")
        try:
            lifetime = ExpiryUnit(unit).to_timedelta(time)
        except ValueError:
            raise InvalidExpiryError(f"Cannot convert duration to unit '{unit}'") from None
        except OverflowError:
            raise ExpiryTooLongError("Duration too long") from None
        if lifetime > config.MAX_EXPIRY:
            raise ExpiryTooLongError("Duration too long")

        now = utcnow()
        upload_uuid = str(uuid.uuid4())
        password_hash = hash_password(password) if password else None

        upload = self.upload_repo.create_upload(
            uuid=upload_uuid,
            filename=filename,
            password_hash=password_hash,
            expiry=now + lifetime,
            created_at=now,
        )
        logger.info(f"Prepared upload {filename} [uuid={upload_uuid}] expiry={upload.expiry.isoformat()}")
        return upload

    def append(self, upload_uuid: str, chunk: BinaryIO, size: int) -> int:
        """
        Append one chunk to a pending upload.

        Returns:
            Total number of bytes received so far

        Raises:
            ChunkTooLargeError: If the chunk exceeds the server chunk size
            UploadNotFoundError: If the uuid does not name a pending upload
        """
        if size > self.chunk_size:
            raise ChunkTooLargeError(f"Chunk too large: {size} > {self.chunk_size} bytes")

        if self.upload_repo.get_pending(upload_uuid) is None:
            raise UploadNotFoundError(f"No pending upload {upload_uuid}")

        self.data_dir.mkdir(parents=True, exist_ok=True)
        written = 0
        with open(self.data_path(upload_uuid), 'ab') as destination:
            while True:
                buffer = chunk.read(COPY_BUFFER_SIZE)
                if not buffer:
                    break
                destination.write(buffer)
                written += len(buffer)

        total = self.upload_repo.record_append(upload_uuid, written, utcnow())
        if total is None:
            # Reaped or finished while the chunk was being written
            if self.upload_repo.get_by_uuid(upload_uuid) is None:
                logger.warning(f"Upload reaped during append, discarding data [uuid={upload_uuid}]")
                self.data_path(upload_uuid).unlink(missing_ok=True)
            raise UploadNotFoundError(f"No pending upload {upload_uuid}")

        logger.debug(f"Appended {written} bytes [uuid={upload_uuid}] total={total}")
        return total

    def finish(self, upload_uuid: str) -> Upload:
        """
        Mark a pending upload as complete.

        Raises:
            UploadNotFoundError: If the uuid does not name a pending upload
        """
        if not self.upload_repo.mark_done(upload_uuid):
            raise UploadNotFoundError(f"No pending upload {upload_uuid}")

        # An upload of zero bytes never created its data file
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.data_path(upload_uuid).touch(exist_ok=True)

        upload = self.upload_repo.get_by_uuid(upload_uuid)
        logger.info(f"Finished upload {upload.filename} [uuid={upload_uuid}] size={upload.size}")
        return upload

    def get_download(self, upload_uuid: str, password: Optional[str] = None) -> Upload:
        """
        Look up a finished upload for download.

        Args:
            upload_uuid: Upload to fetch
            password: Password supplied by the downloader, if any

        Returns:
            The upload, whose data lives at data_path(upload.uuid)

        Raises:
            UploadNotFoundError: If the upload is unknown, unfinished or expired
            DownloadForbiddenError: If the upload is protected and the password does not match
        """
        upload = self.upload_repo.get_by_uuid(upload_uuid)
        if upload is None or not upload.done or upload.expiry <= utcnow():
            raise UploadNotFoundError(f"No finished upload {upload_uuid}")

        if upload.password_hash is not None:
            if not password:
                raise DownloadForbiddenError("Password required")
            if not verify_password(password, upload.password_hash):
                logger.warning(f"Wrong download password [uuid={upload_uuid}]")
                raise DownloadForbiddenError("Wrong password")

        logger.info(f"Serving download {upload.filename} [uuid={upload_uuid}]")
        return upload

    def remove(self, upload_uuid: str) -> None:
        """Delete an upload's data file and row."""
        logger.info(f"Deleting upload [uuid={upload_uuid}]")
        self.data_path(upload_uuid).unlink(missing_ok=True)
        self.upload_repo.delete_upload(upload_uuid)

    def reap(self, now: Optional[datetime] = None) -> int:
        """
        Remove pending uploads idle past the session timeout and finished uploads past expiry.

        Returns:
            Number of uploads removed
        """
        now = now or utcnow()
        stale = self.upload_repo.list_stale_pending(now - self.session_timeout)
        expired = self.upload_repo.list_expired(now)

        for upload_uuid in stale:
            logger.info(f"Upload timed out [uuid={upload_uuid}]")
            self.remove(upload_uuid)
        for upload_uuid in expired:
            logger.info(f"Upload expired [uuid={upload_uuid}]")
            self.remove(upload_uuid)

        return len(stale) + len(expired)
