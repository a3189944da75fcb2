"""Directory-backed storage for uploaded image bytes.

Each blob is addressed by a generated storage key (a random UUID plus the
uploaded file's extension) and written under a single root directory.
Writes go to a temporary sibling first and are renamed into place, so a
reader sees either the complete file or no file at all.
"""

from __future__ import annotations

import logging
import os
import uuid
from contextlib import suppress
from pathlib import Path
from typing import Tuple
from urllib.parse import quote

import aiofiles
import aiofiles.os

from utils.errors import BlobIOError, NotFoundError, StorageUnavailableError

logger = logging.getLogger(__name__)


class BlobStore:
    """Save, read, and delete blobs under `root`.

    Args:
        root: Directory that holds every blob. Created on demand.
        public_prefix: URL prefix under which blobs are served back by key.
    """

    def __init__(self, root: Path | str, public_prefix: str = "/api/files") -> None:
        self.root = Path(root).expanduser()
        self.public_prefix = public_prefix.rstrip("/")

    async def ensure_storage_ready(self) -> None:
        """Create the root directory (and parents) if it does not exist yet.

        Raises:
            StorageUnavailableError: If the root is a file or cannot be created.
        """
        if await aiofiles.os.path.isdir(self.root):
            return
        if await aiofiles.os.path.exists(self.root):
            raise StorageUnavailableError(f"Upload root {self.root} exists but is not a directory")

        logger.info("Creating upload directory: %s", self.root)
        try:
            await aiofiles.os.makedirs(self.root, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(f"Failed to create upload directory {self.root}") from exc

    async def save(self, content: bytes, original_name: str) -> Tuple[str, str]:
        """Write `content` under a freshly generated storage key.

        Args:
            content: Raw bytes to persist.
            original_name: Uploaded file name; only its extension is kept.

        Returns:
            A tuple of `(storage_key, storage_path)`.

        Raises:
            StorageUnavailableError: If the root directory cannot be prepared.
            BlobIOError: If writing the bytes fails.
        """
        await self.ensure_storage_ready()

        extension = os.path.splitext(os.path.basename(original_name or ""))[1]
        storage_key = f"{uuid.uuid4()}{extension}"
        storage_path = self.root / storage_key
        tmp_path = storage_path.with_name(f".{storage_key}.part")

        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(content)
            await aiofiles.os.replace(tmp_path, storage_path)
        except OSError as exc:
            with suppress(OSError):
                await aiofiles.os.remove(tmp_path)
            raise BlobIOError(f"Failed to write blob {storage_key}", path=str(storage_path)) from exc

        logger.info("File saved: %s (%d bytes)", storage_key, len(content))
        return storage_key, str(storage_path)

    async def read(self, storage_path: str) -> bytes:
        """Return the full contents of the blob at `storage_path`.

        Raises:
            NotFoundError: If no blob exists at the path.
            BlobIOError: If the blob exists but cannot be read.
        """
        try:
            async with aiofiles.open(storage_path, "rb") as f:
                return await f.read()
        except FileNotFoundError as exc:
            raise NotFoundError("Blob not found") from exc
        except OSError as exc:
            raise BlobIOError("Failed to read blob", path=storage_path) from exc

    async def delete(self, storage_path: str) -> None:
        """Remove the blob at `storage_path`.

        A blob that is already gone is logged and treated as deleted.

        Raises:
            BlobIOError: If the blob exists but cannot be removed.
        """
        try:
            await aiofiles.os.remove(storage_path)
        except FileNotFoundError:
            logger.warning("Blob already missing, nothing to delete: %s", storage_path)
            return
        except OSError as exc:
            raise BlobIOError("Failed to delete blob", path=storage_path) from exc
        logger.info("File deleted: %s", storage_path)

    def resolve_public_url(self, storage_key: str) -> str:
        """Return the URL that serves the blob stored under `storage_key`."""
        return f"{self.public_prefix}/{quote(storage_key)}"
