"""
Asset Service
Registers uploaded photos and resolves them back to bytes.
"""

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Optional, Tuple

from tryon.core.errors import NotFound, PayloadTooLarge, UnsupportedType
from tryon.models import Asset
from tryon.services.storage import StorageService
from tryon.services.store import AssetStore

logger = logging.getLogger(__name__)


class AssetService:
    """Validates uploads, stores their bytes and records them."""

    def __init__(self, assets: AssetStore, storage: StorageService, max_bytes: int):
        self.assets = assets
        self.storage = storage
        self.max_bytes = max_bytes

    def register(self, filename: str, data: bytes, content_type: Optional[str]) -> Asset:
        """
        Register an uploaded photo.

        Raises:
            PayloadTooLarge: data exceeds max_bytes
            UnsupportedType: content type is not image/*
        """
        if len(data) > self.max_bytes:
            raise PayloadTooLarge(
                f"File exceeds {self.max_bytes} bytes",
                {"size": len(data), "limit": self.max_bytes},
            )
        if not content_type or not content_type.startswith("image/"):
            raise UnsupportedType(
                "Only image files are allowed",
                {"content_type": content_type},
            )

        asset_id = str(uuid.uuid4())
        suffix = Path(filename or "").suffix or mimetypes.guess_extension(content_type) or ""
        storage_path = self.storage.upload_bytes(data, f"uploads/{asset_id}{suffix}", content_type)

        asset = self.assets.put(Asset(
            id=asset_id,
            filename=filename or f"{asset_id}{suffix}",
            storage_path=storage_path,
            size=len(data),
            content_type=content_type,
        ))
        logger.info(f"[Asset] Registered {asset.id} ({asset.size} bytes, {asset.content_type})")
        return asset

    def open(self, asset_id: str) -> Tuple[bytes, str]:
        """Return (bytes, content_type) for a registered asset."""
        asset = self.assets.get(asset_id)
        try:
            data = self.storage.get_file(asset.storage_path)
        except FileNotFoundError:
            raise NotFound(f"File for asset {asset_id} missing from storage", {"asset_id": asset_id})
        return data, asset.content_type
