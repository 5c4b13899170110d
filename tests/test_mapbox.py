import pytest

from ethnica.vendors import mapbox


class DummyResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse(payload={"features": []})

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(mapbox, "_SESSION", session)
    return session


def test_forward_geocode_builds_query_url(patch_session):
    patch_session.response = DummyResponse(payload={"features": [{"id": "poi.1"}]})

    payload = mapbox.forward_geocode("coffee shop", proximity=[-74.0, 40.7], token="tok", bbox=[-74.1, 40.6, -73.9, 40.8], limit=25)

    assert payload["features"] == [{"id": "poi.1"}]
    url, params, timeout = patch_session.calls[0]
    assert url.endswith("/mapbox.places/coffee%20shop.json")
    assert params["proximity"] == "-74.0,40.7"
    assert params["limit"] == 10
    assert params["types"] == "poi,address,place"
    assert params["bbox"] == "-74.1,40.6,-73.9,40.8"
    assert params["access_token"] == "tok"
    assert timeout == 10


def test_reverse_geocode_uses_center(patch_session):
    mapbox.reverse_geocode([-74.0, 40.7], token="tok")
    url, params, _ = patch_session.calls[0]
    assert url.endswith("/-74.0,40.7.json")
    assert params["types"] == "poi"


def test_error_status_raises(patch_session):
    patch_session.response = DummyResponse(status_code=401, text="Not Authorized - Invalid Token")
    with pytest.raises(mapbox.MapboxError) as excinfo:
        mapbox.lookup_feature("poi.1", token="bad")
    assert excinfo.value.status_code == 401


def test_non_json_body_raises(patch_session):
    patch_session.response = DummyResponse(payload=ValueError("no json"))
    with pytest.raises(mapbox.MapboxError):
        mapbox.reverse_geocode([0, 0], token="tok")
