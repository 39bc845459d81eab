"""
Results API Routes
Assembled output of a succeeded try-on job.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from tryon.api.deps import get_context
from tryon.core.context import AppContext
from tryon.core.errors import NotFound, NotReady
from tryon.schemas.catalog import ProductResponse
from tryon.schemas.result import TryOnResultResponse

router = APIRouter()


@router.get("/{job_id}", response_model=TryOnResultResponse)
def get_results(job_id: str, ctx: AppContext = Depends(get_context)):
    try:
        result = ctx.results.get_result(job_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except NotReady as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

    return TryOnResultResponse(
        original_url=result.original_url,
        result_urls=result.result_urls,
        products=[ProductResponse.model_validate(p) for p in result.products],
        created_at=result.created_at,
    )
