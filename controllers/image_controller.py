"""Upload, list, delete, and fetch flows over the metadata and blob stores."""

from __future__ import annotations

import logging
from typing import List, Optional

from dal.image_dal import ImageDAL
from models.image_record import ImageRecord
from models.image_view import ImageView, StoredFile
from services.blob_store import BlobStore
from utils.errors import BlobIOError
from utils.media_validation import validate_image_upload

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000"


class ImageController:
    """Coordinate the metadata store and the blob store for each request.

    Args:
        image_dal: Metadata store for image records.
        blob_store: Byte store the records point into.
    """

    def __init__(self, image_dal: ImageDAL, blob_store: BlobStore) -> None:
        self.image_dal = image_dal
        self.blob_store = blob_store

    def to_view(self, record: ImageRecord) -> ImageView:
        """Combine a stored record with its public URL."""
        url = self.blob_store.resolve_public_url(record.name)
        return ImageView(
            id=record.id,
            name=record.original_name,
            url=url,
            download_url=url,
            size=record.file_size,
            type=record.mime_type,
            uploaded_at=record.uploaded_at,
        )

    async def upload(self, content: Optional[bytes], original_name: Optional[str], mime_type: Optional[str]) -> ImageView:
        """Validate, store the bytes, then record their metadata.

        If the insert fails after the bytes were written, the blob stays on
        disk without a record.

        Raises:
            InvalidInputError: Before any write if the upload is not a usable image.
            StorageUnavailableError: If the directory or database is unreachable.
            BlobIOError: If the bytes cannot be written.
        """
        mime_type = validate_image_upload(content, original_name, mime_type)
        logger.info("Processing file: %s (%d bytes, %s)", original_name, len(content), mime_type)

        storage_key, storage_path = await self.blob_store.save(content, original_name)
        record = await self.image_dal.create_image(
            ImageRecord(
                id=None,
                name=storage_key,
                original_name=original_name,
                file_path=storage_path,
                file_size=len(content),
                mime_type=mime_type,
            )
        )
        logger.info("Upload successful: %s", record.id)
        return self.to_view(record)

    async def list_images(self) -> List[ImageView]:
        """Return every stored image, newest upload first."""
        records = await self.image_dal.list_images()
        return [self.to_view(record) for record in records]

    async def delete(self, image_id: str) -> None:
        """Remove the blob, then the record.

        A failure to remove the blob is logged and does not stop the
        record from being deleted.

        Raises:
            NotFoundError: If no record exists for `image_id`.
        """
        record = await self.image_dal.get_image_by_id(image_id)
        try:
            await self.blob_store.delete(record.file_path)
        except BlobIOError as exc:
            logger.exception("Error deleting file for image %s at %s", image_id, exc.path)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Error deleting file for image %s", image_id)
        await self.image_dal.delete_image(image_id)
        logger.info("Image deleted: %s", image_id)

    async def fetch(self, name: str) -> StoredFile:
        """Return the bytes stored under key `name` with response headers.

        Raises:
            NotFoundError: If no record or no blob exists for `name`.
            BlobIOError: If the blob exists but cannot be read.
        """
        record = await self.image_dal.get_image_by_name(name)
        try:
            content = await self.blob_store.read(record.file_path)
        except BlobIOError as exc:
            logger.error("Error reading file %s at %s", name, exc.path)
            raise
        return StoredFile(
            content=content,
            headers={
                "Content-Type": record.mime_type,
                "Content-Length": str(record.file_size),
                "Cache-Control": CACHE_CONTROL,
            },
        )
