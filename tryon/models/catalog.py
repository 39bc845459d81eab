"""
Catalog Model
Garment records loaded from the product catalog.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class CatalogItem:
    """Garment available for try-on."""

    id: str
    title: str
    price: int  # minor currency unit (cents)
    category: str
    currency: str = "EUR"
    images: List[str] = field(default_factory=list)
    sizes: List[str] = field(default_factory=list)
    gender: Optional[str] = None
    description: Optional[str] = None

    @property
    def image_url(self) -> Optional[str]:
        """Canonical image (first in the list)."""
        return self.images[0] if self.images else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogItem":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            price=int(data["price"]),
            category=data["category"],
            currency=data.get("currency") or "EUR",
            images=list(data.get("images") or []),
            sizes=list(data.get("sizes") or []),
            gender=data.get("gender"),
            description=data.get("description"),
        )
