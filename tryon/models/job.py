"""
Job Model
Try-on job record and its state machine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class JobStatus(str, Enum):
    """Job status enum."""
    QUEUED = "queued"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


class JobMode(str, Enum):
    """Output kind requested from the compositor."""
    IMAGE = "image"
    VIDEO = "video"


TERMINAL_STATES = frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED})

# Forward-only; queued may skip straight to a terminal state.
ALLOWED_TRANSITIONS = {
    JobStatus.QUEUED: frozenset({JobStatus.PROCESSING, JobStatus.SUCCEEDED, JobStatus.FAILED}),
    JobStatus.PROCESSING: frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED}),
    JobStatus.SUCCEEDED: frozenset(),
    JobStatus.FAILED: frozenset(),
}


@dataclass
class Job:
    """Try-on job."""

    id: str
    session_id: str
    asset_id: str
    item_ids: List[str]
    mode: JobMode = JobMode.IMAGE
    status: JobStatus = JobStatus.QUEUED
    result_urls: List[str] = field(default_factory=list)
    error: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
