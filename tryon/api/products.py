"""
Product API Routes
Catalog listing and lookup.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from tryon.api.deps import get_context
from tryon.core.context import AppContext
from tryon.core.errors import NotFound
from tryon.schemas.catalog import ProductListResponse, ProductResponse

router = APIRouter()


@router.get("", response_model=ProductListResponse)
def list_products(
    category: Optional[str] = None,
    gender: Optional[str] = None,
    search: Optional[str] = None,
    ctx: AppContext = Depends(get_context),
):
    """List catalog items; "all" disables a filter."""
    items = ctx.store.catalog.filter(category=category, gender=gender, search=search)
    return ProductListResponse(items=[ProductResponse.model_validate(i) for i in items])


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: str, ctx: AppContext = Depends(get_context)):
    try:
        item = ctx.store.catalog.get(product_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return ProductResponse.model_validate(item)
