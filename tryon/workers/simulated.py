"""
Simulated Trigger
Completes jobs after a random delay with placeholder results.
"""

import asyncio
import logging
import random
from typing import Callable, List, Optional

from tryon.models import Job, JobStatus
from tryon.workers.base import ProcessingTrigger

logger = logging.getLogger(__name__)


class SimulatedTrigger(ProcessingTrigger):
    """
    queued -> processing immediately, processing -> succeeded after
    a delay drawn from [min_delay_ms, max_delay_ms].

    There is no retry: if the task dies before the delay elapses the
    job stays in processing.
    """

    name = "simulated"

    def __init__(
        self,
        manager,
        result_urls: List[str],
        min_delay_ms: int = 3000,
        max_delay_ms: int = 5000,
        rng: Optional[Callable[[float, float], float]] = None,
    ):
        super().__init__(manager)
        self.result_urls = list(result_urls)
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self._uniform = rng or random.uniform

    def next_delay(self) -> float:
        """Delay in seconds."""
        return self._uniform(self.min_delay_ms, self.max_delay_ms) / 1000.0

    async def invoke(self, job: Job) -> None:
        started = self._log_start(job)
        if self._transition(job.id, JobStatus.PROCESSING) is None:
            return

        delay = self.next_delay()
        logger.debug(f"[{self.name}] {job.id} completes in {delay:.2f}s")
        await asyncio.sleep(delay)

        if self._transition(job.id, JobStatus.SUCCEEDED, result_urls=self.result_urls) is not None:
            self._log_complete(job, started, f"{len(self.result_urls)} result(s)")

    def describe(self) -> dict:
        return {
            **super().describe(),
            "delay_ms": [self.min_delay_ms, self.max_delay_ms],
        }
