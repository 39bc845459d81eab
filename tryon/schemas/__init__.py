# Pydantic schemas package
from tryon.schemas.asset import UploadResponse
from tryon.schemas.catalog import ProductResponse, ProductListResponse
from tryon.schemas.job import (
    TryOnRequest, TryOnResponse, JobStatusResponse, JobSummary, JobListResponse,
    CompletionReport, CompletionAck
)
from tryon.schemas.result import TryOnResultResponse

__all__ = [
    "UploadResponse",
    "ProductResponse", "ProductListResponse",
    "TryOnRequest", "TryOnResponse", "JobStatusResponse", "JobSummary", "JobListResponse",
    "CompletionReport", "CompletionAck",
    "TryOnResultResponse",
]
