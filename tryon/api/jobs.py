"""
Jobs API Routes
Try-on job creation, status polling and the compositor completion callback.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tryon.api.deps import get_context, get_session_id
from tryon.core.context import AppContext
from tryon.core.errors import AlreadyTerminal, InvalidRequest, InvalidTransition, NotFound
from tryon.models import Job
from tryon.schemas.job import (
    CompletionAck,
    CompletionReport,
    JobListResponse,
    JobStatusResponse,
    JobSummary,
    TryOnRequest,
    TryOnResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _summary(job: Job) -> JobSummary:
    return JobSummary(
        job_id=job.id,
        status=job.status,
        mode=job.mode,
        product_ids=job.item_ids,
        result_urls=job.result_urls,
        error=job.error,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


@router.post("/tryon", response_model=TryOnResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_tryon_job(
    request: TryOnRequest,
    session_id: str = Depends(get_session_id),
    ctx: AppContext = Depends(get_context),
):
    """
    Create a try-on job.
    Returns immediately; poll GET /api/jobs/{job_id} for progress.
    """
    try:
        job = await ctx.jobs.create_job(
            asset_id=request.user_asset_id,
            item_ids=request.product_ids,
            mode=request.mode,
            session_id=session_id,
        )
    except InvalidRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return TryOnResponse(job_id=job.id, session_id=job.session_id)


@router.get("/jobs", response_model=JobListResponse)
def list_jobs(
    session_id: str = Depends(get_session_id),
    ctx: AppContext = Depends(get_context),
):
    """List the jobs of the caller's session (X-Session-Id)."""
    return JobListResponse(items=[_summary(j) for j in ctx.jobs.list_jobs(session_id)])


@router.get("/jobs/{job_id}", response_model=JobStatusResponse)
def get_job_status(job_id: str, ctx: AppContext = Depends(get_context)):
    """Get job status and result urls. Safe to poll."""
    try:
        job = ctx.jobs.get_status(job_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return JobStatusResponse.model_validate(job)


@router.post("/jobs/{job_id}/complete", response_model=CompletionAck)
def report_completion(
    job_id: str,
    report: CompletionReport,
    ctx: AppContext = Depends(get_context),
):
    """
    Completion callback for the external compositor.

    Not authenticated: anyone who knows the job id can report.
    A report for a job that already finished is acknowledged but ignored.
    """
    if not ctx.trigger.accepts_callbacks:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Completion callbacks are not enabled"
        )

    try:
        job = ctx.jobs.apply_transition(
            job_id,
            report.status,
            result_urls=report.result_urls,
            error=report.error,
        )
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except AlreadyTerminal as e:
        current = ctx.jobs.get_status(job_id)
        return CompletionAck(job_id=job_id, status=current.status, applied=False, detail=e.message)
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return CompletionAck(job_id=job.id, status=job.status, applied=True)
