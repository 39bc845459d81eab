"""
Entity Store
In-memory keyed collections for assets, catalog items and jobs.

Each collection guards its map with a lock: sync endpoints run in the
threadpool while triggers run on the event loop.
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from tryon.core.errors import NotFound
from tryon.models import Asset, CatalogItem, Job

logger = logging.getLogger(__name__)

# Filter value meaning "no filter"
WILDCARD = "all"


def _normalize(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower()
    if not value or value == WILDCARD:
        return None
    return value


class AssetStore:
    """Registered uploads, keyed by asset id."""

    def __init__(self):
        self._assets: Dict[str, Asset] = {}
        self._lock = threading.Lock()

    def put(self, asset: Asset) -> Asset:
        with self._lock:
            self._assets[asset.id] = asset
        return asset

    def get(self, asset_id: str) -> Asset:
        with self._lock:
            asset = self._assets.get(asset_id)
        if asset is None:
            raise NotFound(f"Asset {asset_id} not found", {"asset_id": asset_id})
        return asset

    def exists(self, asset_id: str) -> bool:
        with self._lock:
            return asset_id in self._assets

    def __len__(self) -> int:
        with self._lock:
            return len(self._assets)


class CatalogStore:
    """Garment catalog. Read-only after startup."""

    def __init__(self, items: Optional[List[CatalogItem]] = None):
        # dicts keep insertion order, which is the listing order
        self._items: Dict[str, CatalogItem] = {}
        self._lock = threading.Lock()
        for item in items or []:
            self.put(item)

    def put(self, item: CatalogItem) -> CatalogItem:
        with self._lock:
            self._items[item.id] = item
        return item

    def get(self, item_id: str) -> CatalogItem:
        with self._lock:
            item = self._items.get(item_id)
        if item is None:
            raise NotFound(f"Product {item_id} not found", {"item_id": item_id})
        return item

    def exists(self, item_id: str) -> bool:
        with self._lock:
            return item_id in self._items

    def filter(
        self,
        category: Optional[str] = None,
        gender: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[CatalogItem]:
        """
        Return items matching every supplied predicate.

        Args:
            category: Case-insensitive category equality
            gender: Case-insensitive gender equality
            search: Case-insensitive substring of title or description

        "all" and empty values disable category and gender; search is
        always a plain substring match.
        """
        category = _normalize(category)
        gender = _normalize(gender)
        search = search.lower() if search else None

        with self._lock:
            items = list(self._items.values())

        if category:
            items = [i for i in items if i.category.lower() == category]
        if gender:
            items = [i for i in items if (i.gender or "").lower() == gender]
        if search:
            items = [
                i for i in items
                if search in i.title.lower() or search in (i.description or "").lower()
            ]
        return items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class JobStore:
    """Try-on jobs, keyed by job id. Records are replaced, never mutated in place."""

    def __init__(self):
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()

    def put(self, job: Job) -> Job:
        with self._lock:
            self._jobs[job.id] = job
        return job

    def get(self, job_id: str) -> Job:
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise NotFound(f"Job {job_id} not found", {"job_id": job_id})
        return job

    def update(self, job_id: str, fn: Callable[[Job], Job]) -> Job:
        """
        Atomically replace a job with fn(current).

        If fn raises, the stored record is left untouched and the
        exception propagates.
        """
        with self._lock:
            current = self._jobs.get(job_id)
            if current is None:
                raise NotFound(f"Job {job_id} not found", {"job_id": job_id})
            updated = fn(current)
            self._jobs[job_id] = updated
            return updated

    def list_by_session(self, session_id: str) -> List[Job]:
        with self._lock:
            return [j for j in self._jobs.values() if j.session_id == session_id]

    def all(self) -> List[Job]:
        with self._lock:
            return list(self._jobs.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)


@dataclass
class EntityStore:
    """The three collections, constructed together at startup."""

    assets: AssetStore = field(default_factory=AssetStore)
    catalog: CatalogStore = field(default_factory=CatalogStore)
    jobs: JobStore = field(default_factory=JobStore)


def load_catalog(path: Union[str, Path]) -> List[CatalogItem]:
    """
    Load catalog items from a JSON file shaped {"products": [...]}.

    A missing or malformed file yields an empty catalog.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        items = [CatalogItem.from_dict(p) for p in data.get("products", [])]
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.warning(f"Could not load catalog from {path}: {e}")
        return []

    logger.info(f"Loaded {len(items)} catalog items from {path}")
    return items
