"""Runtime configuration read from environment variables (and `.env`)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        database_dir: Directory holding the SQLite file `app.db`.
        upload_dir: Root directory where uploaded image bytes are written.
        public_files_prefix: URL prefix that serves stored files back by key.
        db_connect_timeout: Seconds allowed for establishing a database connection.
        log_level: Name of the root logging level.
    """

    database_dir: Path
    upload_dir: Path
    public_files_prefix: str = "/api/files"
    db_connect_timeout: float = 10.0
    log_level: str = "INFO"

    @property
    def db_path(self) -> Path:
        return self.database_dir / "app.db"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment.

        Raises:
            RuntimeError: If DATABASE_DIR is missing or a numeric value is malformed.
        """
        load_dotenv()  # Load environment variables from .env file if present

        env_dir = os.getenv("DATABASE_DIR")
        if env_dir is None or not env_dir.strip():
            raise RuntimeError(
                "DATABASE_DIR environment variable must be set to a writable "
                "directory path where the SQLite database file will be stored."
            )

        raw_timeout = os.getenv("DB_CONNECT_TIMEOUT", "10")
        try:
            connect_timeout = float(raw_timeout)
        except ValueError as exc:
            raise RuntimeError(f"DB_CONNECT_TIMEOUT must be a number, got {raw_timeout!r}") from exc

        prefix = os.getenv("PUBLIC_FILES_PREFIX", "/api/files").rstrip("/")

        return cls(
            database_dir=Path(env_dir).expanduser(),
            upload_dir=Path(os.getenv("UPLOAD_DIR", "uploads")).expanduser(),
            public_files_prefix=prefix or "/api/files",
            db_connect_timeout=connect_timeout,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
