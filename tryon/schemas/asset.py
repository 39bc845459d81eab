"""
Asset Schemas
Pydantic models for upload responses.
"""

from tryon.schemas.common import CamelModel


class UploadResponse(CamelModel):
    """Schema for a registered upload."""
    asset_id: str
    url: str
    filename: str
    size: int
