"""
Result Schemas
Pydantic models for the assembled try-on result.
"""

from datetime import datetime
from typing import List

from tryon.schemas.catalog import ProductResponse
from tryon.schemas.common import CamelModel


class TryOnResultResponse(CamelModel):
    original_url: str
    result_urls: List[str]
    products: List[ProductResponse]
    created_at: datetime
