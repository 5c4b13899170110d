"""Client utilities for the Mapbox Geocoding API."""

import logging
from typing import Any, Dict, Optional, Sequence
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"
MAX_LIMIT = 10


class MapboxError(RuntimeError):
    """Raised when the Geocoding API answers with a non-2xx status or an unusable body."""

    def __init__(self, status_code: Optional[int], message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


def _get(path: str, params: Dict[str, Any]) -> Dict[str, Any]:
    response = _SESSION.get(f"{_BASE_URL}/{path}.json", params=params, timeout=10)
    if response.status_code >= 400:
        logger.error("Mapbox API error: status=%s body=%s", response.status_code, response.text[:300])
        raise MapboxError(response.status_code, f"Mapbox API error: {response.status_code}")
    try:
        payload = response.json()
    except ValueError as exc:
        raise MapboxError(response.status_code, "Mapbox API returned a non-JSON body") from exc
    if not isinstance(payload, dict):
        raise MapboxError(response.status_code, "Mapbox API returned an unexpected body")
    logger.info("Mapbox API response features: %d", len(payload.get("features") or []))
    return payload


def forward_geocode(
    query: str,
    proximity: Sequence[float],
    token: str,
    bbox: Optional[Sequence[float]] = None,
    limit: int = MAX_LIMIT,
    types: str = "poi,address,place",
) -> Dict[str, Any]:
    """Search features matching ``query``, biased towards ``proximity`` ([lng, lat])."""
    params: Dict[str, Any] = {
        "access_token": token,
        "proximity": f"{proximity[0]},{proximity[1]}",
        "limit": min(limit, MAX_LIMIT),
        "types": types,
    }
    if bbox:
        params["bbox"] = ",".join(str(round(value, 6)) for value in bbox)
    return _get(quote(query.strip(), safe=""), params)


def reverse_geocode(center: Sequence[float], token: str, limit: int = MAX_LIMIT, types: str = "poi") -> Dict[str, Any]:
    """List features around ``center`` ([lng, lat]). Mapbox only allows ``limit`` with one type."""
    params = {"access_token": token, "limit": min(limit, MAX_LIMIT), "types": types}
    return _get(f"{center[0]},{center[1]}", params)


def lookup_feature(feature_id: str, token: str) -> Dict[str, Any]:
    return _get(quote(feature_id, safe=""), {"access_token": token})
