import json
import threading
from dataclasses import replace

import pytest

from tryon.core.errors import NotFound
from tryon.models import CatalogItem, Job, JobStatus
from tryon.services.store import AssetStore, CatalogStore, JobStore, load_catalog

from conftest import CATALOG_FILE, make_items


@pytest.fixture
def catalog():
    return CatalogStore(make_items())


def ids(items):
    return [i.id for i in items]


class TestCatalogFilter:
    def test_no_predicates_returns_everything_in_insertion_order(self, catalog):
        assert ids(catalog.filter()) == ["c1", "c2", "c3", "c4"]

    def test_category_with_gender_wildcard(self, catalog):
        assert ids(catalog.filter(category="jackets", gender="all")) == ["c1", "c3"]

    def test_all_is_treated_as_absent(self, catalog):
        assert ids(catalog.filter(category="all", gender="all", search="")) == ["c1", "c2", "c3", "c4"]

    def test_gender_is_case_insensitive(self, catalog):
        assert ids(catalog.filter(gender="UNISEX")) == ["c1"]
        assert ids(catalog.filter(gender="Women")) == ["c3", "c4"]

    def test_search_matches_title_or_description(self, catalog):
        # "jacket" is in c1/c3 titles and in c2's description
        assert ids(catalog.filter(search="JACKET")) == ["c1", "c2", "c3"]

    def test_search_does_not_treat_all_as_wildcard(self):
        catalog = CatalogStore([
            CatalogItem(id="x1", title="Small Tote", price=2900, category="bags"),
            CatalogItem(id="x2", title="Denim Jacket", price=8900, category="jackets"),
        ])
        assert ids(catalog.filter(search="all")) == ["x1"]
        assert ids(catalog.filter(search="ALL")) == ["x1"]

    def test_search_tolerates_missing_description(self, catalog):
        assert ids(catalog.filter(search="wrap")) == ["c4"]

    def test_predicates_are_anded(self, catalog):
        assert ids(catalog.filter(category="jackets", gender="women", search="biker")) == ["c3"]
        assert catalog.filter(category="shirts", gender="women") == []


class TestLookups:
    def test_unknown_keys_raise_not_found(self, catalog):
        with pytest.raises(NotFound):
            catalog.get("nope")
        with pytest.raises(NotFound):
            AssetStore().get("nope")
        with pytest.raises(NotFound):
            JobStore().get("nope")

    def test_catalog_get(self, catalog):
        assert catalog.get("c2").title == "Oxford Shirt"
        assert catalog.get("c1").image_url == "https://cdn.example.com/c1.jpg"
        assert catalog.get("c4").image_url is None


class TestJobStoreUpdate:
    def _job(self, job_id="j1", session_id="s1"):
        return Job(id=job_id, session_id=session_id, asset_id="a1", item_ids=["c1"])

    def test_update_replaces_record(self):
        jobs = JobStore()
        jobs.put(self._job())
        updated = jobs.update("j1", lambda j: replace(j, status=JobStatus.PROCESSING))
        assert updated.status == JobStatus.PROCESSING
        assert jobs.get("j1").status == JobStatus.PROCESSING

    def test_failed_update_leaves_record_untouched(self):
        jobs = JobStore()
        original = jobs.put(self._job())

        def boom(job):
            raise RuntimeError("nope")

        with pytest.raises(RuntimeError):
            jobs.update("j1", boom)
        assert jobs.get("j1") is original

    def test_update_unknown_job(self):
        with pytest.raises(NotFound):
            JobStore().update("missing", lambda j: j)

    def test_list_by_session(self):
        jobs = JobStore()
        jobs.put(self._job("j1", "s1"))
        jobs.put(self._job("j2", "s2"))
        jobs.put(self._job("j3", "s1"))
        assert [j.id for j in jobs.list_by_session("s1")] == ["j1", "j3"]


class TestLocking:
    @pytest.mark.parametrize("collection", [AssetStore(), CatalogStore(), JobStore()], ids=["assets", "catalog", "jobs"])
    def test_len_waits_for_lock(self, collection):
        sizes = []
        with collection._lock:
            reader = threading.Thread(target=lambda: sizes.append(len(collection)))
            reader.start()
            reader.join(timeout=0.1)
            assert reader.is_alive()
        reader.join(timeout=1)
        assert sizes == [0]


class TestLoadCatalog:
    def test_loads_bundled_catalog(self):
        items = load_catalog(CATALOG_FILE)
        assert len(items) > 0
        assert all(isinstance(i.price, int) for i in items)
        jackets = CatalogStore(items).filter(category="jackets", gender="all")
        assert jackets and all(i.category == "jackets" for i in jackets)

    def test_missing_file_gives_empty_catalog(self, tmp_path):
        assert load_catalog(tmp_path / "missing.json") == []

    def test_malformed_file_gives_empty_catalog(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text("{not json")
        assert load_catalog(path) == []

    def test_defaults_for_optional_fields(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps({"products": [
            {"id": 7, "title": "Tee", "price": "1500", "category": "tops"}
        ]}))
        (item,) = load_catalog(path)
        assert item.id == "7"
        assert item.price == 1500
        assert item.currency == "EUR"
        assert item.images == [] and item.gender is None
