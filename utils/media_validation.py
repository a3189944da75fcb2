"""Validation helpers for uploaded image content."""

from typing import Optional

from utils.errors import InvalidInputError


def normalize_content_type(content_type: Optional[str]) -> str:
    """Lower-case a MIME type and drop parameters such as `; charset=...`."""
    if not content_type:
        return ""
    return content_type.lower().split(";", 1)[0].strip()


def validate_image_upload(content: Optional[bytes], filename: Optional[str], content_type: Optional[str]) -> str:
    """Reject uploads that are not images, returning the declared MIME type unchanged.

    The type is checked in its normalized form; the caller stores it as declared.

    Args:
        content: Raw bytes read from the upload (None when no file was sent).
        filename: Client supplied file name.
        content_type: Declared MIME type.

    Raises:
        InvalidInputError: If the file is missing or the type is not `image/*`.
    """
    if content is None or not filename:
        raise InvalidInputError("No file provided")
    if not normalize_content_type(content_type).startswith("image/"):
        raise InvalidInputError("File must be an image")
    return content_type
