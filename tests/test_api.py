"""HTTP-level tests with the store and current user swapped for fakes."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from catalog.store import get_store
from main import app

USER = {"id": 1, "email": "analyst@example.com", "name": "Analyst", "plan": "free", "is_active": True}


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[auth_dependencies.get_current_user] = lambda: USER
    # Not entered as a context manager, so the DB pool lifespan never runs.
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def catalog(store):
    us = store.add_country("United States", "US")
    amazon = store.add_retailer("Amazon")
    ebay = store.add_retailer("eBay")
    target = store.add_retailer("Target")
    store.add_delivery(amazon, us, "Standard", "$5.99")
    store.add_delivery(amazon, us, "Express", "$12.99")
    store.add_delivery(ebay, us, "Standard", "Free")
    return {"us": us, "amazon": amazon, "ebay": ebay, "target": target}


def _upload(client, path, data, filename="rates.csv", content_type="text/csv"):
    return client.post(path, files={"file": (filename, data, content_type)})


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestCompare:
    def test_compare_ranks_and_saves_history(self, client, store, catalog) -> None:
        body = {
            "retailers": [catalog["amazon"]["id"], catalog["target"]["id"], catalog["ebay"]["id"]],
            "country": catalog["us"]["id"],
        }

        response = client.post("/api/compare", json=body)

        assert response.status_code == 200
        comparison = response.json()["comparison"]
        assert comparison["country"] == "United States"
        names = [r["retailer"]["name"] for r in comparison["results"]]
        assert names == ["eBay", "Amazon", "Target"]
        assert comparison["results"][1]["cheapestOption"]["cost"] == "$5.99"
        assert "cheapestOption" not in comparison["results"][2]

        (saved,) = store.comparisons.values()
        assert saved["user_id"] == USER["id"]
        assert saved["results"] == comparison["results"]

    def test_unknown_retailer(self, client, catalog) -> None:
        response = client.post("/api/compare", json={"retailers": [catalog["amazon"]["id"], 999], "country": catalog["us"]["id"]})
        assert response.status_code == 404

    def test_unknown_country(self, client, catalog) -> None:
        response = client.post("/api/compare", json={"retailers": [catalog["amazon"]["id"]], "country": 999})
        assert response.status_code == 404

    @pytest.mark.parametrize("retailers", [[], list(range(1, 12))])
    def test_retailer_count_validated(self, client, catalog, retailers) -> None:
        response = client.post("/api/compare", json={"retailers": retailers, "country": catalog["us"]["id"]})
        assert response.status_code == 422

    def test_missing_country(self, client, catalog) -> None:
        response = client.post("/api/compare", json={"retailers": [catalog["amazon"]["id"]]})
        assert response.status_code == 422

    def test_history_and_lookup(self, client, store, catalog) -> None:
        body = {"retailers": [catalog["amazon"]["id"]], "country": catalog["us"]["id"]}
        first = client.post("/api/compare", json=body).json()["comparison"]
        second = client.post("/api/compare", json=body).json()["comparison"]

        history = client.get("/api/compare/history").json()
        assert [c["id"] for c in history["comparisons"]] == [second["id"], first["id"]]

        found = client.get(f"/api/compare/{first['id']}")
        assert found.status_code == 200
        assert found.json()["comparison"]["results"] == first["results"]

    def test_saved_and_fetched_comparisons_share_one_shape(self, client, catalog) -> None:
        body = {"retailers": [catalog["amazon"]["id"]], "country": catalog["us"]["id"]}
        created = client.post("/api/compare", json=body).json()["comparison"]
        fetched = client.get(f"/api/compare/{created['id']}").json()["comparison"]
        listed = client.get("/api/compare/history").json()["comparisons"][0]

        keys = {"id", "retailers", "country_id", "country", "results", "created_at"}
        assert set(created) == set(fetched) == set(listed) == keys
        for view in (created, fetched, listed):
            assert view["country_id"] == catalog["us"]["id"]
            assert view["country"] == "United States"

    def test_other_users_comparison_hidden(self, client, store, catalog) -> None:
        row = asyncio.run(store.save_comparison(user_id=2, retailer_ids=[1], country_id=1, results=[]))
        assert client.get(f"/api/compare/{row['id']}").status_code == 404

    def test_requires_auth(self, store, catalog) -> None:
        app.dependency_overrides[get_store] = lambda: store
        try:
            response = TestClient(app).post("/api/compare", json={"retailers": [1], "country": 1})
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 401


class TestBulkUpload:
    def test_upload_then_reupload(self, client, store, sample_csv: bytes) -> None:
        first = _upload(client, "/api/delivery-data/bulk", sample_csv)
        second = _upload(client, "/api/upload/csv", sample_csv)

        assert first.status_code == 200
        assert first.json()["created"] == 4
        assert first.json()["total"] == 4
        assert second.json()["created"] == 0
        assert second.json()["updated"] == 4
        assert len(store.delivery) == 4

    def test_incomplete_rows_reported_as_skipped(self, client, store) -> None:
        data = b"retailer,country,method,cost,duration\nAmazon,Canada,Standard,$8,\nAmazon,Canada,Express,$15,2 days\n"

        body = _upload(client, "/api/delivery-data/bulk", data).json()

        assert (body["created"], body["updated"], body["skipped"], body["total"]) == (1, 0, 1, 1)

    def test_malformed_csv_writes_nothing(self, client, store) -> None:
        data = b'retailer,country,method,cost,duration\nAmazon,Canada,Standard,$8,3 days\nB,"C"x,M,1,2\n'

        response = _upload(client, "/api/delivery-data/bulk", data)

        assert response.status_code == 400
        assert store.delivery == {}
        assert store.retailers == {}

    def test_rejects_non_csv(self, client) -> None:
        response = _upload(client, "/api/delivery-data/bulk", b"%PDF-1.4", filename="rates.pdf", content_type="application/pdf")
        assert response.status_code == 400

    def test_accepts_csv_content_type_without_extension(self, client, sample_csv: bytes) -> None:
        response = _upload(client, "/api/upload/csv", sample_csv, filename="export", content_type="text/csv")
        assert response.status_code == 200

    def test_size_limit(self, client, monkeypatch, sample_csv: bytes) -> None:
        monkeypatch.setenv("MAX_UPLOAD_BYTES", "16")
        response = _upload(client, "/api/delivery-data/bulk", sample_csv)
        assert response.status_code == 413


class TestCountries:
    def test_create_allocates_code(self, client, store) -> None:
        store.add_country("United States", "US")

        response = client.post("/api/countries", json={"name": "Ukraine"})

        assert response.status_code == 201
        assert response.json()["country"]["code"] == "UK"

    def test_create_with_explicit_code(self, client) -> None:
        response = client.post("/api/countries", json={"name": "Iceland", "code": "is"})
        assert response.json()["country"]["code"] == "IS"

    def test_duplicate_name(self, client, store) -> None:
        store.add_country("Iceland", "IS")
        response = client.post("/api/countries", json={"name": "Iceland", "code": "IC"})
        assert response.status_code == 409

    def test_duplicate_code(self, client, store) -> None:
        store.add_country("Iceland", "IS")
        response = client.post("/api/countries", json={"name": "Israel North", "code": "IS"})
        assert response.status_code == 409

    def test_invalid_code(self, client) -> None:
        response = client.post("/api/countries", json={"name": "Iceland", "code": "ISL"})
        assert response.status_code == 422
