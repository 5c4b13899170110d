import threading
import time

import pytest
import requests

from ethnica.core.config import Settings
from ethnica.core.location_cache import LocationCache
from ethnica.jobs import run_server
from ethnica.search.orchestrator import SearchOrchestrator
from ethnica.search.providers import MockBusinessProvider
from ethnica.vendors import google_places


@pytest.fixture
def settings():
    return Settings(google_places_api_key="secret", privy_app_id="privy")


@pytest.fixture
def client(monkeypatch, tmp_path, settings):
    monkeypatch.setattr(run_server, "get_settings", lambda: settings)
    monkeypatch.setattr(run_server, "get_location_cache", lambda: LocationCache(str(tmp_path / "loc.json")))
    monkeypatch.setattr(run_server, "_orchestrator", SearchOrchestrator([MockBusinessProvider(count=10)]))
    return run_server.app.test_client()


def test_health_endpoint(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "ok"
    assert body["features"] == {"map": False, "auth": True, "google_places": False, "places_proxy": True}


def test_nearby_requires_api_key(client, monkeypatch):
    monkeypatch.setattr(run_server, "get_settings", lambda: Settings())
    response = client.get("/api/places/nearby?lat=1&lng=2")
    assert response.status_code == 200
    assert response.get_json()["status"] == "API_KEY_MISSING"


def test_nearby_requires_coordinates(client):
    for query in ("", "?lat=1", "?lat=abc&lng=2"):
        response = client.get(f"/api/places/nearby{query}")
        assert response.status_code == 200
        assert response.get_json()["status"] == "PARAMS_MISSING"


def test_nearby_forwards_to_google(client, monkeypatch):
    seen = {}

    def fake_nearby(lat, lng, api_key, radius=5000, keyword=None):
        seen.update(lat=lat, lng=lng, api_key=api_key, radius=radius, keyword=keyword)
        return {"status": "OK", "results": [{"place_id": "gp1"}]}

    monkeypatch.setattr(run_server.google_places, "nearby_search", fake_nearby)
    response = client.get("/api/places/nearby?lat=40.7&lng=-74&radius=1200&keyword=bakery")

    assert response.get_json() == {"status": "OK", "results": [{"place_id": "gp1"}]}
    assert seen == {"lat": 40.7, "lng": -74.0, "api_key": "secret", "radius": 1200, "keyword": "bakery"}


@pytest.mark.parametrize(
    "error,status",
    [
        (requests.HTTPError("403"), "REQUEST_DENIED"),
        (google_places.GooglePlacesError("OVER_QUERY_LIMIT", "slow down"), "OVER_QUERY_LIMIT"),
        (RuntimeError("boom"), "SERVER_ERROR"),
    ],
)
def test_nearby_errors_are_200_envelopes(client, monkeypatch, error, status):
    def fake_nearby(*args, **kwargs):
        raise error

    monkeypatch.setattr(run_server.google_places, "nearby_search", fake_nearby)
    response = client.get("/api/places/nearby?lat=40.7&lng=-74")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == status
    assert body["results"] == []
    assert body["error"]


def test_details_envelopes(client, monkeypatch):
    assert client.get("/api/places/details").get_json()["status"] == "PARAMS_MISSING"

    def fake_details(place_id, api_key):
        if place_id == "gp1":
            return {"status": "OK", "result": {"place_id": "gp1"}}
        raise google_places.GooglePlacesError("NOT_FOUND")

    monkeypatch.setattr(run_server.google_places, "place_details", fake_details)

    assert client.get("/api/places/details?place_id=gp1").get_json()["result"] == {"place_id": "gp1"}
    missing = client.get("/api/places/details?place_id=nope")
    assert missing.status_code == 200
    assert missing.get_json() == {"status": "NOT_FOUND", "error": "Google Places API error", "result": None}


def test_search_returns_businesses(client):
    response = client.get("/api/businesses/search?lat=40.7128&lng=-74.006&limit=4")

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["source"] == "mock"
    assert len(data["businesses"]) == 4
    assert data["center"] == [-74.006, 40.7128]
    assert data["sequence"] >= 1


def test_search_without_location_uses_default_center(client):
    data = client.get("/api/businesses/search?q=bakery").get_json()["data"]

    assert data["center"] == [-74.006, 40.7128]
    assert data["notices"][0]["level"] == "warning"
    assert all(b["category"] == "Bakery" for b in data["businesses"])


def test_search_validates_numbers(client):
    assert client.get("/api/businesses/search?lat=abc&lng=1").status_code == 400
    assert client.get("/api/businesses/search?lat=1&lng=1&limit=-3").status_code == 400
    assert client.get("/api/businesses/search?lat=1&lng=1&radius=far").status_code == 400


def test_business_details_endpoint(client):
    response = client.get("/api/businesses/mock1")
    assert response.status_code == 200
    assert response.get_json()["data"]["name"] == "Green Earth Cafe"
    assert client.get("/api/businesses/unknown-id").status_code == 404


@pytest.mark.parametrize(
    "query",
    ["lat=40.7", "lng=-74", "lat=95&lng=0", "lat=0&lng=-181", "lat=nan&lng=1"],
)
def test_search_rejects_partial_or_out_of_range_center(client, query):
    response = client.get(f"/api/businesses/search?{query}")
    assert response.status_code == 400
    assert response.get_json()["error"]


def test_orchestrator_is_built_once_across_threads(monkeypatch):
    built = []

    def slow_build():
        time.sleep(0.01)
        search = SearchOrchestrator([MockBusinessProvider(count=1)])
        built.append(search)
        return search

    monkeypatch.setattr(run_server, "_orchestrator", None)
    monkeypatch.setattr(run_server, "build_orchestrator", slow_build)

    seen = []
    workers = [threading.Thread(target=lambda: seen.append(run_server.get_orchestrator())) for _ in range(8)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert len(built) == 1
    assert all(search is built[0] for search in seen)
