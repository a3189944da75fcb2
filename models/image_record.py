from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class ImageRecord:
    """In-memory representation of a row in the `images` table.

    Attributes:
        id: UUID primary key as a string (None for new records).
        name: Generated storage key; resolves both the file path and the public URL.
        original_name: File name supplied by the uploader, for display only.
        file_path: Filesystem path where the blob store wrote the bytes.
        file_size: Byte count of the stored content.
        mime_type: Declared content type, always `image/*`.
        uploaded_at: Upload time (UTC); listings are ordered by this, newest first.
        created_at: Row creation time (UTC).
        updated_at: Last row modification time (UTC).
    """

    id: Optional[str]
    name: str
    original_name: str
    file_path: str
    file_size: int
    mime_type: str
    uploaded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
