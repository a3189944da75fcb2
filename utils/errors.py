"""Typed failures raised by the image stores and the upload/delete flows."""


class ImageStoreError(Exception):
    """Base class for failures raised by the persistence layer."""


class InvalidInputError(ImageStoreError, ValueError):
    """Raised when an upload is rejected before any persistence side effect."""


class NotFoundError(ImageStoreError, LookupError):
    """Raised when no record (or blob) exists for the given id, key, or path."""


class StorageUnavailableError(ImageStoreError):
    """Raised when the database or storage directory cannot be reached or created."""


class BlobIOError(ImageStoreError):
    """Raised when reading, writing, or deleting a blob fails part way."""

    def __init__(self, message: str, path: str | None = None) -> None:
        """
        Args:
            message: Human readable description of the failure.
            path: Filesystem path involved, kept for logs only.
        """
        self.path = path
        super().__init__(message)
