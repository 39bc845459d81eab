"""
Application Context
Everything a request needs, built once from Settings at startup.
Tests build their own isolated instances.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from tryon.core.config import Settings
from tryon.core.redis import RedisManager
from tryon.services.assets import AssetService
from tryon.services.jobs import JobManager
from tryon.services.results import ResultAssembler
from tryon.services.storage import StorageService
from tryon.services.store import CatalogStore, EntityStore, load_catalog
from tryon.workers import (
    CompositorQueue,
    DelegatedTrigger,
    HttpDispatcher,
    ProcessingTrigger,
    QueueDispatcher,
    SimulatedTrigger,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    store: EntityStore
    storage: StorageService
    assets: AssetService
    jobs: JobManager
    results: ResultAssembler
    trigger: ProcessingTrigger
    redis: Optional[RedisManager] = None

    async def close(self) -> None:
        await self.jobs.shutdown()
        if self.redis is not None:
            self.redis.close()


def build_trigger(
    settings: Settings,
    manager: JobManager,
    redis_manager: Optional[RedisManager] = None,
) -> ProcessingTrigger:
    """Create the processing trigger selected by PROCESSING_TRIGGER."""
    if settings.PROCESSING_TRIGGER == "simulated":
        return SimulatedTrigger(
            manager,
            result_urls=settings.SIMULATED_RESULT_URLS,
            min_delay_ms=settings.SIMULATED_DELAY_MIN_MS,
            max_delay_ms=settings.SIMULATED_DELAY_MAX_MS,
        )

    if settings.COMPOSITOR_TRANSPORT == "rq":
        if redis_manager is None:
            redis_manager = RedisManager(settings.REDIS_URL)
        dispatcher = QueueDispatcher(CompositorQueue(
            redis_manager,
            queue_name=settings.COMPOSITOR_QUEUE,
            task_name=settings.COMPOSITOR_TASK,
            job_timeout=settings.COMPOSITOR_JOB_TIMEOUT,
        ))
    else:
        dispatcher = HttpDispatcher(
            settings.COMPOSITOR_URL,
            api_key=settings.COMPOSITOR_API_KEY,
            timeout=settings.COMPOSITOR_TIMEOUT,
        )
    return DelegatedTrigger(manager, dispatcher, public_base_url=settings.API_BASE_URL)


def build_context(settings: Settings, store: Optional[EntityStore] = None) -> AppContext:
    """Wire stores, services and the processing trigger together."""
    if store is None:
        store = EntityStore(catalog=CatalogStore(load_catalog(settings.CATALOG_PATH)))

    storage = StorageService(settings)
    manager = JobManager(store, max_items=settings.MAX_ITEMS_PER_JOB)

    redis_manager = None
    if settings.PROCESSING_TRIGGER == "delegated" and settings.COMPOSITOR_TRANSPORT == "rq":
        redis_manager = RedisManager(settings.REDIS_URL)

    trigger = build_trigger(settings, manager, redis_manager)
    manager.trigger = trigger
    logger.info(f"Processing trigger: {trigger.describe()}")

    return AppContext(
        settings=settings,
        store=store,
        storage=storage,
        assets=AssetService(store.assets, storage, max_bytes=settings.MAX_UPLOAD_BYTES),
        jobs=manager,
        results=ResultAssembler(store),
        trigger=trigger,
        redis=redis_manager,
    )
