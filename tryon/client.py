"""
Try-On Client
Small httpx client for the upload -> create -> poll -> result flow.
"""

import logging
import mimetypes
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = ("succeeded", "failed")


class JobTimeout(Exception):
    """Job did not reach a terminal status in time."""

    def __init__(self, job_id: str, last_status: Optional[str]):
        super().__init__(f"Job {job_id} still {last_status} after polling timeout")
        self.job_id = job_id
        self.last_status = last_status


class TryOnClient:
    """
    Client for the try-on API.

    Pass http_client to reuse an existing httpx.Client (FastAPI's
    TestClient works too); otherwise one is created for base_url.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        session_id: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self.session_id = session_id
        self._owns_client = http_client is None
        self.http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self):
        if self._owns_client:
            self.http.close()

    def __enter__(self) -> "TryOnClient":
        return self

    def __exit__(self, *exc):
        self.close()

    @property
    def _headers(self) -> Dict[str, str]:
        return {"X-Session-Id": self.session_id} if self.session_id else {}

    def upload_photo(self, path: Path, content_type: Optional[str] = None) -> Dict[str, Any]:
        path = Path(path)
        content_type = content_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        with path.open("rb") as f:
            response = self.http.post(
                "/api/upload",
                files={"photo": (path.name, f, content_type)},
                headers=self._headers,
            )
        response.raise_for_status()
        return response.json()

    def list_products(self, **filters: Optional[str]) -> List[Dict[str, Any]]:
        params = {k: v for k, v in filters.items() if v}
        response = self.http.get("/api/products", params=params)
        response.raise_for_status()
        return response.json()["items"]

    def create_job(self, asset_id: str, product_ids: Sequence[str], mode: str = "image") -> str:
        response = self.http.post(
            "/api/tryon",
            json={"userAssetId": asset_id, "productIds": list(product_ids), "mode": mode},
            headers=self._headers,
        )
        response.raise_for_status()
        payload = response.json()
        # Keep the server-assigned session so later jobs are grouped with this one
        self.session_id = self.session_id or payload.get("sessionId")
        return payload["jobId"]

    def get_status(self, job_id: str) -> Dict[str, Any]:
        response = self.http.get(f"/api/jobs/{job_id}")
        response.raise_for_status()
        return response.json()

    def get_result(self, job_id: str) -> Dict[str, Any]:
        response = self.http.get(f"/api/results/{job_id}")
        response.raise_for_status()
        return response.json()

    def wait_for_job(
        self,
        job_id: str,
        interval: float = 2.0,
        timeout: float = 60.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Dict[str, Any]:
        """
        Poll job status until it is succeeded or failed.

        Raises:
            JobTimeout: still non-terminal after timeout seconds
        """
        deadline = time.monotonic() + timeout
        last_status = None
        while True:
            status = self.get_status(job_id)
            if status["status"] != last_status:
                logger.info(f"Job {job_id}: {status['status']}")
                last_status = status["status"]
            if status["status"] in TERMINAL_STATUSES:
                return status
            if time.monotonic() >= deadline:
                raise JobTimeout(job_id, last_status)
            sleep(interval)
