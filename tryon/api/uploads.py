"""
Upload API Routes
Registers user photos and serves them back.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response

from tryon.api.deps import get_context
from tryon.core.context import AppContext
from tryon.core.errors import NotFound, PayloadTooLarge, UnsupportedType
from tryon.schemas.asset import UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload_photo(
    photo: Optional[UploadFile] = File(None),
    ctx: AppContext = Depends(get_context),
):
    """Register an uploaded photo (multipart field "photo")."""
    if photo is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    # One byte past the limit is enough to reject
    data = await photo.read(ctx.settings.MAX_UPLOAD_BYTES + 1)

    try:
        asset = ctx.assets.register(photo.filename or "", data, photo.content_type)
    except PayloadTooLarge as e:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=e.message)
    except UnsupportedType as e:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=e.message)

    return UploadResponse(
        asset_id=asset.id,
        url=asset.url,
        filename=asset.filename,
        size=asset.size,
    )


@router.get("/uploads/{asset_id}")
def get_upload(asset_id: str, ctx: AppContext = Depends(get_context)):
    """Serve an uploaded photo with its original content type."""
    try:
        data, content_type = ctx.assets.open(asset_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return Response(
        content=data,
        media_type=content_type,
        headers={"Cache-Control": "public, max-age=3600"},
    )
