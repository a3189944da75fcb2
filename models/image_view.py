"""View models handed back to HTTP callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class ImageView:
    """A stored image combined with its resolved public URL."""

    id: str
    name: str
    url: str
    download_url: str
    size: int
    type: str
    uploaded_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Render the JSON shape used by the web UI."""
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "downloadUrl": self.download_url,
            "size": self.size,
            "uploadedAt": self.uploaded_at.isoformat() if self.uploaded_at else None,
            "type": self.type,
        }


@dataclass
class StoredFile:
    """Raw blob bytes plus the response headers derived from its record."""

    content: bytes
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def media_type(self) -> str:
        return self.headers.get("Content-Type", "application/octet-stream")
