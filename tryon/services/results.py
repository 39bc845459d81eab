"""
Result Assembler
Builds the client-facing payload for a succeeded job.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List

from tryon.core.errors import NotFound, NotReady
from tryon.models import CatalogItem, JobStatus
from tryon.services.store import EntityStore


@dataclass(frozen=True)
class TryOnResult:
    original_url: str
    result_urls: List[str]
    products: List[CatalogItem]
    created_at: datetime


class ResultAssembler:
    """Joins job output with the original upload and catalog entries."""

    def __init__(self, store: EntityStore):
        self.store = store

    def get_result(self, job_id: str) -> TryOnResult:
        job = self.store.jobs.get(job_id)
        if job.status != JobStatus.SUCCEEDED:
            raise NotReady(
                "Job not completed successfully",
                {"job_id": job.id, "status": job.status.value},
            )

        # Catalog content is externally owned; ids that no longer resolve are dropped.
        products = []
        for item_id in job.item_ids:
            try:
                products.append(self.store.catalog.get(item_id))
            except NotFound:
                continue

        asset = self.store.assets.get(job.asset_id)
        return TryOnResult(
            original_url=asset.url,
            result_urls=list(job.result_urls),
            products=products,
            created_at=job.created_at,
        )
