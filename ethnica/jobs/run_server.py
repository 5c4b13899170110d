"""HTTP entrypoint: Google Places proxy plus the business search endpoints."""

from __future__ import annotations

import logging
import os
import threading
from typing import Any, Dict, Optional

import requests
from flask import Flask, jsonify, request

from ethnica.core.config import get_settings
from ethnica.core.geo import is_valid_center
from ethnica.core.location_cache import LocationCache, resolve_center
from ethnica.search.orchestrator import DEFAULT_LIMIT, Notice, SearchOrchestrator, build_orchestrator
from ethnica.vendors import google_places

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)
_orchestrator: Optional[SearchOrchestrator] = None
_orchestrator_lock = threading.Lock()


def get_orchestrator() -> SearchOrchestrator:
    global _orchestrator
    with _orchestrator_lock:
        if _orchestrator is None:
            _orchestrator = build_orchestrator()
        return _orchestrator


def get_location_cache() -> LocationCache:
    return LocationCache(get_settings().location_cache_path)


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "features": {
                    "map": settings.map_enabled,
                    "auth": settings.auth_enabled,
                    "google_places": settings.google_places_enabled,
                    "places_proxy": bool(settings.google_places_api_key),
                },
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/api/places/nearby")
def places_nearby() -> Any:
    """
    Forward a Nearby Search to Google with the server-side key.
    Always answers 200; failures are reported through ``status``.
    """
    api_key = get_settings().google_places_api_key
    if not api_key:
        return _envelope("API_KEY_MISSING", "Google Places API key is not configured", results=[])

    lat = _float_arg("lat")
    lng = _float_arg("lng")
    if lat is None or lng is None:
        return _envelope("PARAMS_MISSING", "Missing required parameters: lat and lng", results=[])
    radius = request.args.get("radius", type=int) or 5000
    keyword = (request.args.get("keyword") or "").strip() or None

    logger.info("Nearby proxy params: lat=%s lng=%s radius=%s keyword=%s", lat, lng, radius, keyword)
    try:
        payload = google_places.nearby_search(lat, lng, api_key, radius=radius, keyword=keyword)
    except requests.HTTPError as exc:
        logger.error("Google Places nearby HTTP error: %s", exc)
        return _envelope("REQUEST_DENIED", f"Google Places API responded with an HTTP error: {exc}", results=[])
    except google_places.GooglePlacesError as exc:
        return _envelope(exc.status, exc.message or "Google Places API error", results=[])
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error fetching nearby places: %s", exc)
        return _envelope("SERVER_ERROR", "Failed to fetch nearby places", results=[])
    return jsonify(payload), 200


@app.get("/api/places/details")
def places_details() -> Any:
    """Forward a Place Details lookup. Always answers 200 with ``result`` or ``result: null``."""
    api_key = get_settings().google_places_api_key
    if not api_key:
        return _envelope("API_KEY_MISSING", "Google Places API key is not configured", result=None)

    place_id = (request.args.get("place_id") or "").strip()
    if not place_id:
        return _envelope("PARAMS_MISSING", "Missing required parameter: place_id", result=None)

    logger.info("Details proxy request for place_id=%s", place_id)
    try:
        payload = google_places.place_details(place_id, api_key)
    except requests.HTTPError as exc:
        logger.error("Google Places details HTTP error: %s", exc)
        return _envelope("REQUEST_DENIED", f"Google Places API responded with an HTTP error: {exc}", result=None)
    except google_places.GooglePlacesError as exc:
        return _envelope(exc.status, exc.message or "Google Places API error", result=None)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error fetching place details: %s", exc)
        return _envelope("SERVER_ERROR", "Failed to fetch place details", result=None)
    return jsonify(payload), 200


@app.get("/api/businesses/search")
def search_businesses() -> Any:
    """
    Search businesses around a center.
    Query params: lat and lng (optional as a pair, fall back to cached/default center), q, radius (m), limit.
    """
    settings = get_settings()
    try:
        lat = _float_arg("lat", strict=True)
        lng = _float_arg("lng", strict=True)
        radius = _int_arg("radius", 5000)
        limit = _int_arg("limit", settings.search_result_limit or DEFAULT_LIMIT)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    if (lat is None) != (lng is None):
        return jsonify({"error": "lat and lng must be given together"}), 400
    requested = [lng, lat] if lat is not None else None
    if requested is not None and not is_valid_center(requested):
        return jsonify({"error": "lat must be within [-90, 90] and lng within [-180, 180]"}), 400
    center, origin = resolve_center(requested, get_location_cache(), settings.default_center)
    query = (request.args.get("q") or "").strip() or None

    try:
        outcome = get_orchestrator().search(center, query=query, radius_meters=radius, limit=limit)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    if origin != "requested":
        outcome.notices.insert(0, Notice("warning", f"Location unavailable; searching around the {origin} location"))
    data = outcome.to_dict()
    data["center"] = center
    return jsonify({"data": data}), 200


@app.get("/api/businesses/<path:place_id>")
def business_details(place_id: str) -> Any:
    business = get_orchestrator().get_details(place_id)
    if business is None:
        return jsonify({"error": "business not found"}), 404
    return jsonify({"data": business.to_dict()}), 200


# ---------- Internals ----------


def _envelope(status: str, error: str, **body: Any) -> Any:
    payload: Dict[str, Any] = {"status": status, "error": error}
    payload.update(body)
    return jsonify(payload), 200


def _float_arg(name: str, strict: bool = False) -> Optional[float]:
    raw = request.args.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as exc:
        if strict:
            raise ValueError(f"{name} must be numeric") from exc
        return None


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be numeric") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


def main() -> None:
    app.run(host="0.0.0.0", port=get_settings().server_port)


if __name__ == "__main__":
    main()
