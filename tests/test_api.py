import importlib
import time

from fastapi.testclient import TestClient

from tryon.main import create_app

from conftest import JPEG_BYTES

VALID_STATUSES = {"queued", "processing", "succeeded", "failed"}


def upload(client, data=JPEG_BYTES, content_type="image/jpeg", filename="me.jpg"):
    return client.post("/api/upload", files={"photo": (filename, data, content_type)})


def poll(client, job_id, timeout=5.0):
    """Poll until terminal, returning every status observed."""
    seen = []
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        body = client.get(f"/api/jobs/{job_id}").json()
        seen.append(body["status"])
        if body["status"] in ("succeeded", "failed"):
            return seen, body
        time.sleep(0.02)
    raise AssertionError(f"job {job_id} never finished: {seen}")


class TestMeta:
    def test_import_builds_nothing(self, tmp_path, monkeypatch):
        import tryon.main

        monkeypatch.chdir(tmp_path)
        module = importlib.reload(tryon.main)
        assert not hasattr(module, "app")
        assert list(tmp_path.iterdir()) == []

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/health"

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["trigger"]["name"] == "simulated"
        assert body["services"]["storage"] == {"backend": "local", "status": "ok"}
        assert body["jobs"]["stale"] == 0


class TestUploads:
    def test_upload_and_fetch(self, client):
        response = upload(client)
        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"assetId", "url", "filename", "size"}
        assert body["url"] == f"/api/uploads/{body['assetId']}"
        assert body["filename"] == "me.jpg"
        assert body["size"] == len(JPEG_BYTES)

        fetched = client.get(body["url"])
        assert fetched.status_code == 200
        assert fetched.content == JPEG_BYTES
        assert fetched.headers["content-type"] == "image/jpeg"

    def test_too_large(self, settings):
        app = create_app(settings.model_copy(update={"MAX_UPLOAD_BYTES": 1024}))
        with TestClient(app) as c:
            response = upload(c, data=b"\xff" * 1025)
        assert response.status_code == 413

    def test_not_an_image(self, client):
        response = upload(client, data=b"hello", content_type="text/plain", filename="notes.txt")
        assert response.status_code == 415

    def test_missing_file(self, client):
        assert client.post("/api/upload").status_code == 400

    def test_unknown_upload(self, client):
        assert client.get("/api/uploads/nope").status_code == 404


class TestProducts:
    def test_jackets_any_gender_in_catalog_order(self, client):
        response = client.get("/api/products", params={"category": "jackets", "gender": "all"})
        assert response.status_code == 200
        items = response.json()["items"]
        assert [i["id"] for i in items] == ["p-denim-jacket", "p-leather-jacket", "p-puffer-jacket"]

    def test_no_filters_returns_full_catalog(self, client):
        items = client.get("/api/products").json()["items"]
        assert len(items) == 8

    def test_search(self, client):
        items = client.get("/api/products", params={"search": "DENIM"}).json()["items"]
        # title of the jacket, description of the hoodie
        assert [i["id"] for i in items] == ["p-denim-jacket", "p-hoodie"]

    def test_get_product(self, client):
        assert client.get("/api/products/p-chinos").json()["price"] == 6900
        assert client.get("/api/products/nope").status_code == 404


class TestCreateJob:
    def test_unknown_asset_creates_no_job(self, client):
        headers = {"X-Session-Id": "s-invalid"}
        response = client.post(
            "/api/tryon",
            json={"userAssetId": "never-registered", "productIds": ["p-chinos"]},
            headers=headers,
        )
        assert response.status_code == 400
        assert client.get("/api/jobs", headers=headers).json()["items"] == []

    def test_too_many_products(self, client):
        asset_id = upload(client).json()["assetId"]
        headers = {"X-Session-Id": "s-many"}
        response = client.post(
            "/api/tryon",
            json={
                "userAssetId": asset_id,
                "productIds": ["p-chinos", "p-hoodie", "p-wrap-dress", "p-linen-shirt"],
            },
            headers=headers,
        )
        assert response.status_code == 400
        assert client.get("/api/jobs", headers=headers).json()["items"] == []

    def test_unknown_product(self, client):
        asset_id = upload(client).json()["assetId"]
        response = client.post("/api/tryon", json={"userAssetId": asset_id, "productIds": ["p-chinos", "ghost"]})
        assert response.status_code == 400
        assert "ghost" in response.json()["detail"]

    def test_empty_products_fail_schema(self, client):
        asset_id = upload(client).json()["assetId"]
        response = client.post("/api/tryon", json={"userAssetId": asset_id, "productIds": []})
        assert response.status_code == 422

    def test_bad_mode_fails_schema(self, client):
        asset_id = upload(client).json()["assetId"]
        response = client.post(
            "/api/tryon", json={"userAssetId": asset_id, "productIds": ["p-chinos"], "mode": "hologram"}
        )
        assert response.status_code == 422

    def test_unknown_job_status(self, client):
        assert client.get("/api/jobs/nope").status_code == 404
        assert client.get("/api/results/nope").status_code == 404


class TestSimulatedFlow:
    def test_upload_create_poll_result(self, client):
        photo = b"\xff\xd8" + b"\x00" * (2 * 1024 * 1024)
        asset = upload(client, data=photo).json()

        response = client.post(
            "/api/tryon",
            json={"userAssetId": asset["assetId"], "productIds": ["p-denim-jacket"]},
        )
        assert response.status_code == 202
        job_id = response.json()["jobId"]
        assert response.json()["sessionId"]

        seen, final = poll(client, job_id)
        assert set(seen) <= VALID_STATUSES
        assert final["status"] == "succeeded"
        assert final["resultUrls"]
        assert final["updatedAt"] >= final["createdAt"]

        # terminal state does not change on later polls
        assert client.get(f"/api/jobs/{job_id}").json() == final

        result = client.get(f"/api/results/{job_id}").json()
        assert result["originalUrl"] == asset["url"]
        assert result["resultUrls"] == final["resultUrls"]
        assert [p["id"] for p in result["products"]] == ["p-denim-jacket"]
        assert result["createdAt"] == final["createdAt"]

    def test_session_listing(self, client):
        asset_id = upload(client).json()["assetId"]
        mine = {"X-Session-Id": "session-a"}
        theirs = {"X-Session-Id": "session-b"}

        first = client.post("/api/tryon", json={"userAssetId": asset_id, "productIds": ["p-chinos"]}, headers=mine)
        client.post("/api/tryon", json={"userAssetId": asset_id, "productIds": ["p-hoodie"]}, headers=theirs)
        second = client.post(
            "/api/tryon",
            json={"userAssetId": asset_id, "productIds": ["p-hoodie", "p-chinos"], "mode": "video"},
            headers=mine,
        )

        items = client.get("/api/jobs", headers=mine).json()["items"]
        assert [i["jobId"] for i in items] == [first.json()["jobId"], second.json()["jobId"]]
        assert items[1]["productIds"] == ["p-hoodie", "p-chinos"]
        assert items[1]["mode"] == "video"
        assert first.json()["sessionId"] == "session-a"

    def test_callbacks_disabled(self, client):
        asset_id = upload(client).json()["assetId"]
        job_id = client.post("/api/tryon", json={"userAssetId": asset_id, "productIds": ["p-chinos"]}).json()["jobId"]
        response = client.post(f"/api/jobs/{job_id}/complete", json={"status": "failed"})
        assert response.status_code == 404


class TestDelegatedFlow:
    def _create(self, client):
        asset_id = upload(client).json()["assetId"]
        response = client.post("/api/tryon", json={"userAssetId": asset_id, "productIds": ["p-denim-jacket"]})
        assert response.status_code == 202
        return response.json()["jobId"]

    def test_result_not_ready_while_queued(self, delegated_client):
        job_id = self._create(delegated_client)
        assert delegated_client.get(f"/api/jobs/{job_id}").json()["status"] == "queued"
        assert delegated_client.get(f"/api/results/{job_id}").status_code == 409

    def test_completion_callback(self, delegated_client, dispatched):
        job_id = self._create(delegated_client)

        processing = delegated_client.post(f"/api/jobs/{job_id}/complete", json={"status": "processing"})
        assert processing.json() == {"jobId": job_id, "status": "processing", "applied": True, "detail": None}

        done = delegated_client.post(
            f"/api/jobs/{job_id}/complete",
            json={"status": "succeeded", "resultUrls": ["https://cdn.example.com/out.jpg"]},
        )
        assert done.status_code == 200
        assert done.json()["applied"] is True

        late = delegated_client.post(f"/api/jobs/{job_id}/complete", json={"status": "failed"})
        assert late.status_code == 200
        assert late.json()["applied"] is False
        assert late.json()["status"] == "succeeded"

        status = delegated_client.get(f"/api/jobs/{job_id}").json()
        assert status["status"] == "succeeded"
        assert status["resultUrls"] == ["https://cdn.example.com/out.jpg"]
        assert delegated_client.get(f"/api/results/{job_id}").status_code == 200
        assert len(dispatched) == 1

    def test_success_without_results_rejected(self, delegated_client):
        job_id = self._create(delegated_client)
        response = delegated_client.post(f"/api/jobs/{job_id}/complete", json={"status": "succeeded"})
        assert response.status_code == 400
        assert delegated_client.get(f"/api/jobs/{job_id}").json()["status"] == "queued"

    def test_unknown_job(self, delegated_client):
        response = delegated_client.post("/api/jobs/nope/complete", json={"status": "failed"})
        assert response.status_code == 404

    def test_failed_report_marks_job_failed(self, delegated_client):
        job_id = self._create(delegated_client)
        delegated_client.post(f"/api/jobs/{job_id}/complete", json={"status": "failed", "error": "no person detected"})
        status = delegated_client.get(f"/api/jobs/{job_id}").json()
        assert status["status"] == "failed"
        assert status["resultUrls"] == []
        assert delegated_client.get(f"/api/results/{job_id}").status_code == 409
