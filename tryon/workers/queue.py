"""
Compositor Queue
Hands try-on jobs to an external compositor worker through an RQ queue.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from rq import Queue
from rq.job import Job as RQJob

from tryon.core.redis import RedisManager

logger = logging.getLogger(__name__)


class CompositorQueue:
    """
    Enqueues compositor tasks by dotted name.

    The task itself lives in the compositor's code base; this process only
    needs Redis, never the task's import path.
    """

    def __init__(
        self,
        redis_manager: RedisManager,
        queue_name: str,
        task_name: str,
        job_timeout: int = 300,
    ):
        self.redis_manager = redis_manager
        self.queue_name = queue_name
        self.task_name = task_name
        self.job_timeout = job_timeout
        self._queue: Optional[Queue] = None

    @property
    def queue(self) -> Queue:
        """Lazy queue; connects to Redis on first use."""
        if self._queue is None:
            self._queue = Queue(
                name=self.queue_name,
                connection=self.redis_manager.get_connection(),
                default_timeout=self.job_timeout,
            )
            logger.debug(f"Created queue: {self.queue_name}")
        return self._queue

    def enqueue(self, payload: Dict[str, Any]) -> RQJob:
        """Enqueue one try-on payload. Redis errors propagate."""
        rq_job = self.queue.enqueue(
            self.task_name,
            payload,
            job_id=f"tryon_{payload['jobId']}",
            job_timeout=self.job_timeout,
            meta={
                "type": "tryon",
                "mode": payload.get("mode"),
                "created_at": datetime.utcnow().isoformat(),
            },
        )
        logger.info(f"Enqueued compositor job: {payload['jobId']} on {self.queue_name}")
        return rq_job
