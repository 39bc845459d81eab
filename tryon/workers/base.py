"""
Processing Trigger Base
Shared contract for the strategies that move a job out of "queued".
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from tryon.core.errors import TransitionError
from tryon.models import Job, JobStatus

logger = logging.getLogger(__name__)


class ProcessingTrigger(ABC):
    """
    Abstract base class for processing triggers.

    Exactly one trigger is active per deployment. invoke() runs as a
    background task started by JobManager.create_job and eventually causes
    JobManager.apply_transition to be called, either by the trigger itself
    or by an inbound completion report.
    """

    name: str = "base"
    accepts_callbacks: bool = False

    def __init__(self, manager):
        self.manager = manager

    def _transition(
        self,
        job_id: str,
        status: JobStatus,
        result_urls: Optional[Sequence[str]] = None,
        error: Optional[str] = None,
    ) -> Optional[Job]:
        """Apply a transition, logging instead of raising when it is rejected."""
        try:
            return self.manager.apply_transition(job_id, status, result_urls=result_urls, error=error)
        except TransitionError as e:
            logger.warning(f"[{self.name}] Ignored transition of {job_id} to {status.value}: {e}")
            return None

    def _log_start(self, job: Job) -> float:
        logger.info(f"[START] {self.name} | job={job.id} items={job.item_ids}")
        return time.monotonic()

    def _log_complete(self, job: Job, started: float, summary: str = ""):
        duration = time.monotonic() - started
        logger.info(f"[COMPLETE] {self.name} | job={job.id} | Duration: {duration:.2f}s | {summary}")

    def _log_error(self, job: Job, started: float, error: Exception):
        duration = time.monotonic() - started
        logger.error(f"[ERROR] {self.name} | job={job.id} | Duration: {duration:.2f}s | Error: {error}")

    @abstractmethod
    async def invoke(self, job: Job) -> None:
        """Start processing a freshly created job."""

    def describe(self) -> dict:
        return {"name": self.name, "accepts_callbacks": self.accepts_callbacks}
