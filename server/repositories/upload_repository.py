"""Upload repository for database operations."""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from common.logging_config import get_logger
from server.database import get_db_connection

logger = get_logger(__name__)


@dataclass
class Upload:
    uuid: str
    filename: str
    password_hash: Optional[str]
    size: int
    expiry: datetime
    last_activity: datetime
    done: bool
    created_at: datetime


def _row_to_upload(row: sqlite3.Row) -> Upload:
    return Upload(
        uuid=row["uuid"],
        filename=row["filename"],
        password_hash=row["password_hash"],
        size=row["size"],
        expiry=datetime.fromisoformat(row["expiry"]),
        last_activity=datetime.fromisoformat(row["last_activity"]),
        done=bool(row["done"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class UploadRepository:
    @staticmethod
    def create_upload(
        uuid: str,
        filename: str,
        password_hash: Optional[str],
        expiry: datetime,
        created_at: datetime,
    ) -> Upload:
        logger.debug(f"Creating pending upload: {filename} [uuid={uuid}]")
        with get_db_connection() as conn:
            conn.execute(
                """
                INSERT INTO uploads (uuid, filename, password_hash, size, expiry, last_activity, done, created_at)
                VALUES (?, ?, ?, 0, ?, ?, 0, ?)
                """,
                (uuid, filename, password_hash, expiry.isoformat(), created_at.isoformat(), created_at.isoformat())
            )
            conn.commit()

        return Upload(
            uuid=uuid,
            filename=filename,
            password_hash=password_hash,
            size=0,
            expiry=expiry,
            last_activity=created_at,
            done=False,
            created_at=created_at,
        )

    @staticmethod
    def get_by_uuid(uuid: str) -> Optional[Upload]:
        with get_db_connection() as conn:
            row = conn.execute("SELECT * FROM uploads WHERE uuid = ?", (uuid,)).fetchone()
        return _row_to_upload(row) if row is not None else None

    @staticmethod
    def get_pending(uuid: str) -> Optional[Upload]:
        with get_db_connection() as conn:
            row = conn.execute(
                "SELECT * FROM uploads WHERE uuid = ? AND NOT done", (uuid,)
            ).fetchone()
        return _row_to_upload(row) if row is not None else None

    @staticmethod
    def record_append(uuid: str, chunk_size: int, now: datetime) -> Optional[int]:
        """
        Add an accepted chunk to the byte count of a pending upload.

        Returns:
            The new total, or None if the upload is no longer pending
        """
        with get_db_connection() as conn:
            cursor = conn.execute(
                "UPDATE uploads SET size = size + ?, last_activity = ? WHERE uuid = ? AND NOT done",
                (chunk_size, now.isoformat(), uuid)
            )
            conn.commit()
            if cursor.rowcount != 1:
                return None
            row = conn.execute("SELECT size FROM uploads WHERE uuid = ?", (uuid,)).fetchone()
        return row["size"] if row is not None else None

    @staticmethod
    def mark_done(uuid: str) -> bool:
        with get_db_connection() as conn:
            cursor = conn.execute(
                "UPDATE uploads SET done = 1 WHERE uuid = ? AND NOT done", (uuid,)
            )
            conn.commit()
            return cursor.rowcount == 1

    @staticmethod
    def list_stale_pending(idle_since: datetime) -> List[str]:
        with get_db_connection() as conn:
            rows = conn.execute(
                "SELECT uuid FROM uploads WHERE NOT done AND last_activity < ?",
                (idle_since.isoformat(),)
            ).fetchall()
        return [row["uuid"] for row in rows]

    @staticmethod
    def list_expired(now: datetime) -> List[str]:
        with get_db_connection() as conn:
            rows = conn.execute(
                "SELECT uuid FROM uploads WHERE done AND expiry <= ?",
                (now.isoformat(),)
            ).fetchall()
        return [row["uuid"] for row in rows]

    @staticmethod
    def delete_upload(uuid: str) -> None:
        with get_db_connection() as conn:
            conn.execute("DELETE FROM uploads WHERE uuid = ?", (uuid,))
            conn.commit()
