from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from utils.errors import StorageUnavailableError


class AsyncDatabaseInitializer:
    """
    Own the SQLite database that backs the `images` table.

    - The database file lives at `db_path`; its parent directory is created
      on construction. A StorageUnavailableError is raised if the parent
      exists as a file or cannot be created.
    - `ensure_database()` creates the `images` table and its indexes. It is
      idempotent and never drops existing rows, so it is safe for
      `connection()` to call it on every use.
    - `connection()` opens one connection per caller and always closes it,
      including when the caller raises.
    """

    def __init__(self, db_path: Path | str, connect_timeout: float = 10.0) -> None:
        db_path = Path(db_path).expanduser()
        db_dir = db_path.parent

        # If the path exists but is not a directory, that's a configuration error.
        if db_dir.exists() and not db_dir.is_dir():
            raise StorageUnavailableError(
                f"Database directory {db_dir} points to a file, not a directory."
            )

        try:
            db_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Failed to create or access database directory at {db_dir}"
            ) from exc

        self.db_dir = db_dir
        self.db_path = db_path
        self.connect_timeout = connect_timeout

        self._initialized = False

    async def ensure_database(self) -> None:
        """
        Create the `images` table and its indexes if they are missing.

        Subsequent calls on the same instance are no-ops.
        """
        if self._initialized:
            return

        try:
            async with aiosqlite.connect(self.db_path, timeout=self.connect_timeout) as db:
                await db.execute(
                    """
                    CREATE TABLE IF NOT EXISTS images (
                        id TEXT PRIMARY KEY,
                        name TEXT NOT NULL,
                        original_name TEXT NOT NULL,
                        file_path TEXT NOT NULL,
                        file_size INTEGER NOT NULL,
                        mime_type TEXT NOT NULL,
                        uploaded_at TEXT NOT NULL,
                        created_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
                await db.execute(
                    "CREATE INDEX IF NOT EXISTS idx_images_uploaded_at ON images(uploaded_at DESC)"
                )
                await db.execute("CREATE INDEX IF NOT EXISTS idx_images_name ON images(name)")
                await db.commit()
        except aiosqlite.Error as exc:
            raise StorageUnavailableError("Failed to initialize the images table") from exc

        self._initialized = True

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Async context manager yielding an `aiosqlite.Connection`.

        Database errors raised while the connection is open surface as
        StorageUnavailableError; other exceptions pass through unchanged.
        """
        await self.ensure_database()
        try:
            conn = await aiosqlite.connect(self.db_path, timeout=self.connect_timeout)
        except aiosqlite.Error as exc:
            raise StorageUnavailableError("Database is unreachable") from exc
        try:
            yield conn
        except aiosqlite.Error as exc:
            raise StorageUnavailableError("Database operation failed") from exc
        finally:
            await conn.close()

    async def ping(self) -> bool:
        """Return True if a trivial query succeeds against the database."""
        try:
            async with self.connection() as conn:
                cur = await conn.execute("SELECT 1")
                row = await cur.fetchone()
                return bool(row and row[0] == 1)
        except StorageUnavailableError:
            return False
