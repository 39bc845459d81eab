"""
Job Lifecycle Manager
Creates try-on jobs, owns their state machine and hands them to the
processing trigger.
"""

import asyncio
import logging
import uuid
from dataclasses import replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Coroutine, List, Optional, Sequence, Set, Union

from tryon.core.errors import (
    AlreadyTerminal,
    InvalidReference,
    InvalidRequest,
    InvalidTransition,
    TransitionError,
)
from tryon.models import ALLOWED_TRANSITIONS, Job, JobMode, JobStatus
from tryon.services.store import EntityStore

if TYPE_CHECKING:
    from tryon.workers.base import ProcessingTrigger

logger = logging.getLogger(__name__)


class JobManager:
    """
    Job lifecycle.

    apply_transition() is the only code path that writes a job status.
    The terminal check and the write run inside one JobStore.update call,
    so concurrent completion reports cannot both win.
    """

    def __init__(self, store: EntityStore, max_items: int = 3):
        self.store = store
        self.max_items = max_items
        self.trigger: Optional["ProcessingTrigger"] = None
        self._tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def validate(self, asset_id: str, item_ids: Sequence[str]) -> None:
        """Raise InvalidReference/InvalidRequest if the job cannot be created."""
        if not self.store.assets.exists(asset_id):
            raise InvalidReference("Invalid upload asset ID", {"asset_id": asset_id})

        if not item_ids:
            raise InvalidRequest("At least one product is required", {"count": 0})
        if len(item_ids) > self.max_items:
            raise InvalidRequest(
                f"At most {self.max_items} products per try-on",
                {"count": len(item_ids), "max": self.max_items},
            )

        for item_id in item_ids:
            if not self.store.catalog.exists(item_id):
                raise InvalidReference(f"Product {item_id} not found", {"item_id": item_id})

    async def create_job(
        self,
        asset_id: str,
        item_ids: Sequence[str],
        mode: Union[JobMode, str] = JobMode.IMAGE,
        session_id: Optional[str] = None,
    ) -> Job:
        """
        Validate, persist a queued job and start processing in the background.

        Returns as soon as the job is stored; the trigger runs as a task.
        """
        self.validate(asset_id, item_ids)

        now = datetime.utcnow()
        job = self.store.jobs.put(Job(
            id=str(uuid.uuid4()),
            session_id=session_id or str(uuid.uuid4()),
            asset_id=asset_id,
            item_ids=list(item_ids),
            mode=JobMode(mode),
            created_at=now,
            updated_at=now,
        ))
        logger.info(
            f"[Job] Created {job.id} | session={job.session_id} "
            f"asset={asset_id} items={job.item_ids} mode={job.mode.value}"
        )

        if self.trigger is not None:
            self._spawn(self.trigger.invoke(job))
        else:
            logger.warning(f"[Job] No processing trigger configured; {job.id} stays queued")
        return job

    def _spawn(self, coro: Coroutine) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def wait_idle(self) -> None:
        """Wait until every background trigger task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel background trigger tasks. Their jobs stay where they are."""
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tasks.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_status(self, job_id: str) -> Job:
        """Current job snapshot. Raises NotFound."""
        return self.store.jobs.get(job_id)

    def list_jobs(self, session_id: str) -> List[Job]:
        return sorted(self.store.jobs.list_by_session(session_id), key=lambda j: j.created_at)

    def find_stale(self, threshold_seconds: float, now: Optional[datetime] = None) -> List[Job]:
        """Non-terminal jobs not updated within threshold_seconds."""
        cutoff = (now or datetime.utcnow()) - timedelta(seconds=threshold_seconds)
        return [
            j for j in self.store.jobs.all()
            if not j.is_terminal and j.updated_at < cutoff
        ]

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def apply_transition(
        self,
        job_id: str,
        new_status: Union[JobStatus, str],
        result_urls: Optional[Sequence[str]] = None,
        error: Optional[str] = None,
    ) -> Job:
        """
        Move a job to new_status.

        Raises:
            NotFound: unknown job
            AlreadyTerminal: job is succeeded/failed, nothing was written
            InvalidTransition: backward move, or succeeded without result urls
        """
        new_status = JobStatus(new_status)

        def _transition(job: Job) -> Job:
            if job.is_terminal:
                raise AlreadyTerminal(
                    f"Job {job.id} is already {job.status.value}",
                    {"job_id": job.id, "status": job.status.value, "requested": new_status.value},
                )
            if new_status not in ALLOWED_TRANSITIONS[job.status]:
                raise InvalidTransition(
                    f"Cannot move job {job.id} from {job.status.value} to {new_status.value}",
                    {"job_id": job.id, "status": job.status.value, "requested": new_status.value},
                )
            if new_status == JobStatus.SUCCEEDED and not result_urls:
                raise InvalidTransition(
                    f"Job {job.id} cannot succeed without result urls",
                    {"job_id": job.id},
                )

            updated_at = datetime.utcnow()
            if updated_at <= job.updated_at:
                updated_at = job.updated_at + timedelta(microseconds=1)

            return replace(
                job,
                status=new_status,
                result_urls=list(result_urls) if new_status == JobStatus.SUCCEEDED else [],
                error=error if new_status == JobStatus.FAILED else None,
                updated_at=updated_at,
            )

        try:
            job = self.store.jobs.update(job_id, _transition)
        except TransitionError as e:
            logger.warning(f"[Job] Rejected transition for {job_id}: {e}")
            raise

        logger.info(f"[Job] {job.id} -> {job.status.value}")
        return job
