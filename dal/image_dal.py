"""Async Data Access Layer for the `images` table.

Provides ImageDAL class with async operations compatible with
`utils.database_init.AsyncDatabaseInitializer`.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from models.image_record import ImageRecord
from utils.database_init import AsyncDatabaseInitializer
from utils.errors import NotFoundError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_db(value: datetime) -> str:
    """Serialize a timestamp so that lexical order matches chronological order."""
    return _as_utc(value).isoformat(timespec="microseconds")


def _from_db(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class ImageDAL:
    """Data access layer for image records.

    The constructor accepts an `AsyncDatabaseInitializer` (or any object
    exposing an async `connection()` context manager that yields an
    `aiosqlite.Connection`). Each method holds one connection for the
    duration of its query.
    """

    _COLUMNS = (
        "id",
        "name",
        "original_name",
        "file_path",
        "file_size",
        "mime_type",
        "uploaded_at",
        "created_at",
        "updated_at",
    )
    _COLUMN_LIST = ", ".join(_COLUMNS)
    _PLACEHOLDERS = ", ".join("?" for _ in _COLUMNS)

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def create_image(self, record: ImageRecord) -> ImageRecord:
        """Insert a new image row and return the stored record.

        Args:
            record: ImageRecord with `id=None`. An `uploaded_at` already set on
                the record is kept; all other identity and timestamp fields
                are assigned here.

        Returns:
            A copy of `record` carrying its generated id and timestamps.

        Raises:
            StorageUnavailableError: If the database cannot be reached.
        """
        now = _utcnow()
        stored = replace(
            record,
            id=str(uuid.uuid4()),
            uploaded_at=_as_utc(record.uploaded_at) if record.uploaded_at else now,
            created_at=now,
            updated_at=now,
        )

        async with self._db.connection() as conn:
            await conn.execute(
                f"INSERT INTO images ({self._COLUMN_LIST}) VALUES ({self._PLACEHOLDERS})",
                (
                    stored.id,
                    stored.name,
                    stored.original_name,
                    stored.file_path,
                    stored.file_size,
                    stored.mime_type,
                    _to_db(stored.uploaded_at),
                    _to_db(stored.created_at),
                    _to_db(stored.updated_at),
                ),
            )
            await conn.commit()
        return stored

    async def list_images(self) -> List[ImageRecord]:
        """Return every image row, most recently uploaded first."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM images ORDER BY uploaded_at DESC"
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def get_image_by_id(self, image_id: str) -> ImageRecord:
        """Return the record for `image_id` or raise NotFoundError."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM images WHERE id = ?",
                (image_id,),
            )
            row = await cur.fetchone()
        if row is None:
            raise NotFoundError(f"Image {image_id} not found")
        return self._row_to_record(row)

    async def get_image_by_name(self, name: str) -> ImageRecord:
        """Return the record whose storage key is `name` or raise NotFoundError."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM images WHERE name = ?",
                (name,),
            )
            row = await cur.fetchone()
        if row is None:
            raise NotFoundError(f"File {name} not found")
        return self._row_to_record(row)

    async def delete_image(self, image_id: str) -> None:
        """Delete the row for `image_id`; raise NotFoundError if nothing was deleted."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM images WHERE id = ?", (image_id,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
        if not (changed and changed[0] > 0):
            raise NotFoundError(f"Image {image_id} not found")

    @staticmethod
    def _row_to_record(row: Sequence[object]) -> ImageRecord:
        """Convert a DB row tuple into an ImageRecord."""
        return ImageRecord(
            id=row[0],
            name=row[1],
            original_name=row[2],
            file_path=row[3],
            file_size=int(row[4]),
            mime_type=row[5],
            uploaded_at=_from_db(row[6]),
            created_at=_from_db(row[7]),
            updated_at=_from_db(row[8]),
        )
