"""
Catalog Schemas
Pydantic models for product listing.
"""

from typing import List, Optional

from tryon.schemas.common import CamelModel


class ProductResponse(CamelModel):
    """Schema for a catalog item."""
    id: str
    title: str
    price: int  # cents
    currency: str
    images: List[str] = []
    sizes: List[str] = []
    category: str
    gender: Optional[str] = None
    description: Optional[str] = None


class ProductListResponse(CamelModel):
    items: List[ProductResponse]
