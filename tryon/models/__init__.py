# Domain models package
from tryon.models.asset import Asset
from tryon.models.catalog import CatalogItem
from tryon.models.job import Job, JobMode, JobStatus, ALLOWED_TRANSITIONS, TERMINAL_STATES

__all__ = [
    "Asset",
    "CatalogItem",
    "Job",
    "JobMode",
    "JobStatus",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATES",
]
