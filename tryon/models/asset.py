"""
Asset Model
Uploaded photo record.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Asset:
    """Uploaded photo. Immutable once registered."""

    id: str
    filename: str
    storage_path: str  # Path inside the storage backend, e.g. uploads/<id>.jpg
    size: int
    content_type: str
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def url(self) -> str:
        """Retrieval URL served by the API."""
        return f"/api/uploads/{self.id}"
