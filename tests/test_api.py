"""
Tests for the advocate directory HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from advocate_directory.api.app import create_app
from advocate_directory.api.dependencies import get_handler
from advocate_directory.exceptions import StoreError
from advocate_directory.handlers import AdvocateHandler
from advocate_directory.handlers.advocate_handler import LIST_CACHE_CONTROL, SEARCH_CACHE_CONTROL

from .conftest import make_row


@pytest.fixture
def client(search_service):
    """Create a test client wired to the fake store and in-memory cache."""
    app = create_app()
    handler = AdvocateHandler(search_service=search_service)
    app.dependency_overrides[get_handler] = lambda: handler
    return TestClient(app)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "Advocate Directory API"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "store_healthy": True, "cache_healthy": True}


def test_health_reports_store_outage(client, fake_store):
    fake_store.healthy = False
    assert client.get("/health").status_code == 503


def test_list_advocates_envelope(client):
    response = client.get("/api/advocates")
    assert response.status_code == 200
    assert response.headers["cache-control"] == LIST_CACHE_CONTROL
    assert "etag" in response.headers

    body = response.json()
    assert body["pagination"] == {
        "page": 1,
        "limit": 10,
        "total": 20,
        "totalPages": 2,
        "hasNext": True,
        "hasPrev": False,
    }
    assert len(body["data"]) == 10
    assert set(body["data"][0]) == {
        "id",
        "firstName",
        "lastName",
        "city",
        "degree",
        "specialties",
        "yearsOfExperience",
        "phoneNumber",
        "createdAt",
    }


def test_search_scenario(client):
    response = client.get("/api/advocates", params={"search": "smith", "page": 1, "limit": 10})
    assert response.status_code == 200
    assert response.headers["cache-control"] == SEARCH_CACHE_CONTROL
    body = response.json()
    assert body["pagination"]["total"] == 15
    assert body["pagination"]["totalPages"] == 2
    assert body["pagination"]["hasNext"] is True
    assert body["pagination"]["hasPrev"] is False
    assert len(body["data"]) <= 10


def test_script_injection_is_rejected(client, fake_store):
    response = client.get("/api/advocates", params={"search": "<script>alert(1)</script>"})
    assert response.status_code == 400
    assert response.headers["cache-control"] == "no-store"
    body = response.json()
    assert body["message"] == "Invalid search query"
    assert "invalid" in body["error"].lower()
    assert fake_store.find_calls == 0
    assert fake_store.count_calls == 0


def test_store_failure_is_opaque(client, fake_store):
    fake_store.fail_with = StoreError("password authentication failed for user 'admin'")
    response = client.get("/api/advocates", params={"search": "smith"})
    assert response.status_code == 500
    assert response.headers["cache-control"] == "no-store"
    assert response.json() == {"error": "Internal server error", "message": "Failed to fetch advocates"}
    assert "password" not in response.text


def test_repeated_request_is_identical_without_store_round_trip(client, fake_store):
    first = client.get("/api/advocates", params={"search": "smith", "page": 2, "limit": 10})
    second = client.get("/api/advocates", params={"search": "smith", "page": 2, "limit": 10})
    assert first.content == second.content
    assert first.headers["etag"] == second.headers["etag"]
    assert fake_store.find_calls == 1
    assert fake_store.count_calls == 1


def test_blank_search_matches_list_all(client):
    listed = client.get("/api/advocates", params={"page": 2})
    blank = client.get("/api/advocates", params={"search": "   ", "page": 2})
    assert listed.json() == blank.json()


def test_out_of_range_parameters_are_clamped(client):
    body = client.get("/api/advocates", params={"page": -4, "limit": 3}).json()
    assert body["pagination"]["page"] == 1
    assert body["pagination"]["limit"] == 10

    body = client.get("/api/advocates", params={"limit": 5000}).json()
    assert body["pagination"]["limit"] == 100
    assert len(body["data"]) == 20


def test_non_integer_parameters_fall_back_to_defaults(client):
    body = client.get("/api/advocates", params={"page": "abc", "limit": "ten"}).json()
    assert body["pagination"]["page"] == 1
    assert body["pagination"]["limit"] == 10


def test_revalidate_drops_cached_results(client, fake_store):
    client.get("/api/advocates")
    response = client.post("/api/advocates/revalidate")
    assert response.status_code == 200
    assert response.json()["deleted_count"] == 2

    client.get("/api/advocates")
    assert fake_store.find_calls == 2


def test_stats(client):
    client.get("/api/advocates")
    client.get("/api/advocates")
    stats = client.get("/stats").json()
    assert stats["hits"] == 2
    assert stats["misses"] == 2
    assert stats["entries"] == 2


def test_unexpected_stored_values_are_still_rendered(client, fake_store):
    fake_store.rows.append(make_row(21, last_name="Okafor", years_of_experience=-1))
    response = client.get("/api/advocates", params={"search": "okafor"})
    assert response.status_code == 200
    assert response.json()["data"][0]["yearsOfExperience"] == -1
