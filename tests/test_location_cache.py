import json

from ethnica.core import location_cache
from ethnica.core.location_cache import LocationCache, resolve_center

NYC = [-74.006, 40.7128]
SF = [-122.4194, 37.7749]


def test_save_and_load_round_trip(tmp_path):
    cache = LocationCache(str(tmp_path / "loc.json"))
    cache.save(NYC, now=1000)

    assert cache.load(now=1000 + 60) == NYC
    stored = json.loads((tmp_path / "loc.json").read_text())
    assert stored[location_cache.LOCATION_KEY] == NYC
    assert stored[location_cache.TIMESTAMP_KEY] == 1000


def test_expired_location_is_discarded(tmp_path):
    cache = LocationCache(str(tmp_path / "loc.json"))
    cache.save(NYC, now=0)

    assert cache.load(now=location_cache.MAX_AGE_SECONDS + 1) is None
    assert cache.load(now=1) is None


def test_missing_or_malformed_cache(tmp_path, caplog):
    path = tmp_path / "loc.json"
    cache = LocationCache(str(path))
    assert cache.load() is None

    path.write_text("{not json")
    assert cache.load() is None

    path.write_text(json.dumps({location_cache.LOCATION_KEY: [500, 0], location_cache.TIMESTAMP_KEY: 1}))
    assert cache.load(now=2) is None
    assert "malformed" in caplog.text


def test_clear_keeps_unrelated_keys(tmp_path):
    path = tmp_path / "loc.json"
    path.write_text(json.dumps({"theme": "dark"}))
    cache = LocationCache(str(path))
    cache.save(NYC)

    cache.clear()

    assert json.loads(path.read_text()) == {"theme": "dark"}


def test_resolve_center_prefers_requested_then_cached_then_default(tmp_path):
    cache = LocationCache(str(tmp_path / "loc.json"))

    assert resolve_center(None, cache, SF) == (SF, "default")
    assert resolve_center(NYC, cache, SF) == (NYC, "requested")
    assert resolve_center(None, cache, SF) == (NYC, "cached")
    assert resolve_center([999, 999], None, SF) == (SF, "default")
