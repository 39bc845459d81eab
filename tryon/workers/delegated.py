"""
Delegated Trigger
Dispatches jobs to an external compositor and waits for its completion
report on the callback endpoint.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from tryon.core.errors import DispatchFailure, NotFound
from tryon.models import Job, JobStatus
from tryon.workers.base import ProcessingTrigger
from tryon.workers.queue import CompositorQueue

logger = logging.getLogger(__name__)


class Dispatcher(ABC):
    """One-way transport to the compositor."""

    transport: str = "base"

    @abstractmethod
    async def dispatch(self, payload: Dict[str, Any]) -> None:
        """Send the payload. Raises DispatchFailure."""


class HttpDispatcher(Dispatcher):
    """POSTs the payload to the compositor's webhook URL."""

    transport = "http"

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def dispatch(self, payload: Dict[str, Any]) -> None:
        if not self.url:
            raise DispatchFailure("COMPOSITOR_URL is not configured")

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise DispatchFailure(f"Compositor unreachable: {e}", {"url": self.url}) from e

        if not response.is_success:
            raise DispatchFailure(
                f"Compositor returned {response.status_code}: {response.text[:300]}",
                {"url": self.url, "status_code": response.status_code},
            )


class QueueDispatcher(Dispatcher):
    """Pushes the payload onto the compositor's RQ queue."""

    transport = "rq"

    def __init__(self, queue: CompositorQueue):
        self.queue = queue

    async def dispatch(self, payload: Dict[str, Any]) -> None:
        try:
            # redis-py is blocking
            await asyncio.to_thread(self.queue.enqueue, payload)
        except Exception as e:
            raise DispatchFailure(f"Could not enqueue compositor job: {e}") from e


class DelegatedTrigger(ProcessingTrigger):
    """
    Sends the job to the compositor and leaves the status alone.

    The compositor reports back through JobManager.apply_transition
    (POST /api/jobs/{id}/complete). A failed dispatch marks the job
    failed right away since no report will ever arrive.
    """

    name = "delegated"
    accepts_callbacks = True

    def __init__(self, manager, dispatcher: Dispatcher, public_base_url: str):
        super().__init__(manager)
        self.dispatcher = dispatcher
        self.public_base_url = public_base_url.rstrip("/")

    def build_payload(self, job: Job) -> Dict[str, Any]:
        store = self.manager.store
        asset = store.assets.get(job.asset_id)

        garment_urls = []
        for item_id in job.item_ids:
            try:
                item = store.catalog.get(item_id)
            except NotFound:
                continue
            if item.image_url:
                garment_urls.append(item.image_url)

        return {
            "jobId": job.id,
            "mode": job.mode.value,
            "originalImageUrl": f"{self.public_base_url}{asset.url}",
            "garmentImageUrls": garment_urls,
            "callbackUrl": f"{self.public_base_url}/api/jobs/{job.id}/complete",
        }

    async def invoke(self, job: Job) -> None:
        started = self._log_start(job)
        try:
            payload = self.build_payload(job)
            await self.dispatcher.dispatch(payload)
        except DispatchFailure as e:
            self._log_error(job, started, e)
            self._transition(job.id, JobStatus.FAILED, error=e.message)
            return

        self._log_complete(job, started, f"dispatched via {self.dispatcher.transport}")

    def describe(self) -> dict:
        return {**super().describe(), "transport": self.dispatcher.transport}
