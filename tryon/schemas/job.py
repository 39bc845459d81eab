"""
Job Schemas
Pydantic models for try-on job requests and responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from tryon.models import JobMode, JobStatus
from tryon.schemas.common import CamelModel


class TryOnRequest(CamelModel):
    """Schema for job creation. The upper bound on products is enforced by JobManager."""
    user_asset_id: str
    product_ids: List[str] = Field(..., min_length=1)
    mode: JobMode = JobMode.IMAGE


class TryOnResponse(CamelModel):
    job_id: str
    session_id: str


class JobStatusResponse(CamelModel):
    """Schema returned while polling."""
    status: JobStatus
    result_urls: List[str] = []
    created_at: datetime
    updated_at: datetime


class JobSummary(CamelModel):
    job_id: str
    status: JobStatus
    mode: JobMode
    product_ids: List[str]
    result_urls: List[str] = []
    error: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class JobListResponse(CamelModel):
    items: List[JobSummary]


class CompletionReport(CamelModel):
    """Schema for the compositor's completion callback."""
    status: JobStatus
    result_urls: Optional[List[str]] = None
    error: Optional[str] = None


class CompletionAck(CamelModel):
    job_id: str
    status: JobStatus
    applied: bool
    detail: Optional[str] = None
