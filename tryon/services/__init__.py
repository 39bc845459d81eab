# Services package - stores and business logic
from tryon.services.store import EntityStore, AssetStore, CatalogStore, JobStore, load_catalog
from tryon.services.storage import StorageService
from tryon.services.assets import AssetService
from tryon.services.jobs import JobManager
from tryon.services.results import ResultAssembler, TryOnResult

__all__ = [
    "EntityStore",
    "AssetStore",
    "CatalogStore",
    "JobStore",
    "load_catalog",
    "StorageService",
    "AssetService",
    "JobManager",
    "ResultAssembler",
    "TryOnResult",
]
