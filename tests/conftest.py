"""Shared fixtures: isolated settings, stores and application instances."""

from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from tryon.core.config import Settings
from tryon.core.context import build_context
from tryon.main import create_app
from tryon.models import Asset, CatalogItem
from tryon.services.jobs import JobManager
from tryon.services.store import CatalogStore, EntityStore
from tryon.workers import HttpDispatcher

PROJECT_ROOT = Path(__file__).resolve().parents[1]
CATALOG_FILE = PROJECT_ROOT / "data" / "products.json"

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 1024


def make_items():
    return [
        CatalogItem(
            id="c1", title="Denim Jacket", price=8900, category="jackets", gender="Unisex",
            images=["https://cdn.example.com/c1.jpg"], sizes=["M"],
            description="Blue denim",
        ),
        CatalogItem(
            id="c2", title="Oxford Shirt", price=4900, category="shirts", gender="men",
            images=["https://cdn.example.com/c2.jpg"], sizes=["L"],
            description="Pairs with a jacket",
        ),
        CatalogItem(
            id="c3", title="Biker Jacket", price=24900, category="Jackets", gender="women",
            images=["https://cdn.example.com/c3.jpg"], sizes=["S"],
        ),
        CatalogItem(
            id="c4", title="Wrap Dress", price=7900, category="dresses", gender="women",
            images=[], sizes=["S"], description=None,
        ),
    ]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        LOCAL_STORAGE_PATH=str(tmp_path / "uploads"),
        CATALOG_PATH=str(CATALOG_FILE),
        SIMULATED_DELAY_MIN_MS=50,
        SIMULATED_DELAY_MAX_MS=100,
        API_BASE_URL="http://testserver",
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def store() -> EntityStore:
    return EntityStore(catalog=CatalogStore(make_items()))


@pytest.fixture
def asset(store) -> Asset:
    return store.assets.put(Asset(
        id="a1",
        filename="me.jpg",
        storage_path="uploads/a1.jpg",
        size=2 * 1024 * 1024,
        content_type="image/jpeg",
    ))


@pytest.fixture
def manager(store) -> JobManager:
    """Manager without a trigger: jobs stay where transitions put them."""
    return JobManager(store, max_items=3)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def dispatched():
    """Requests received by the fake compositor."""
    return []


@pytest.fixture
def delegated_client(settings, dispatched):
    """Delegated-mode app whose compositor accepts every job and never calls back."""
    def handler(request: httpx.Request) -> httpx.Response:
        dispatched.append(request)
        return httpx.Response(202)

    ctx = build_context(settings.model_copy(update={"PROCESSING_TRIGGER": "delegated"}))
    ctx.trigger.dispatcher = HttpDispatcher(
        "http://compositor.test/jobs",
        transport=httpx.MockTransport(handler),
    )
    with TestClient(create_app(context=ctx)) as c:
        yield c
