"""Client utilities for the Google Places API (server-side, uses the secret key)."""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"
_OK_STATUSES = {"OK", "ZERO_RESULTS"}

DETAILS_FIELDS = (
    "place_id,name,rating,formatted_phone_number,formatted_address,website,geometry,"
    "editorial_summary,opening_hours,price_level,reviews,user_ratings_total,photos,types,vicinity"
)
PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""

    def __init__(self, status: str, message: Optional[str] = None) -> None:
        super().__init__(message or status)
        self.status = status
        self.message = message


def nearby_search(
    lat: float,
    lng: float,
    api_key: str,
    radius: int = 5000,
    keyword: Optional[str] = None,
) -> Dict[str, Any]:
    params = {"location": f"{lat},{lng}", "radius": radius, "key": api_key}
    if keyword:
        params["keyword"] = keyword
    response = _SESSION.get(
        f"{_BASE_URL}/nearbysearch/json",
        params=params,
        headers={"Accept": "application/json"},
        timeout=10,
    )
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    logger.info("nearby_search status=%s results=%d", status, len(payload.get("results") or []))
    if status not in _OK_STATUSES:
        logger.error("nearby_search failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(status or "UNKNOWN_ERROR", payload.get("error_message"))
    return payload


def place_details(place_id: str, api_key: str) -> Dict[str, Any]:
    params = {"place_id": place_id, "key": api_key, "fields": DETAILS_FIELDS}
    response = _SESSION.get(
        f"{_BASE_URL}/details/json",
        params=params,
        headers={"Accept": "application/json"},
        timeout=10,
    )
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status != "OK":
        logger.error("place_details failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(status or "UNKNOWN_ERROR", payload.get("error_message"))
    return payload


def photo_url(photo_reference: str, api_key: str, max_width: int = 400) -> str:
    return f"{PHOTO_URL}?maxwidth={max_width}&photoreference={photo_reference}&key={api_key}"
