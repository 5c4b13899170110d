"""Interchangeable place-data providers behind one ``search_nearby``/``get_details`` shape."""

import logging
import random
from typing import List, Optional, Protocol, Sequence

import requests

from ethnica.core.geo import bounding_box
from ethnica.etl import sample_data
from ethnica.etl.transform import (
    google_place_to_business,
    google_places_to_businesses,
    mapbox_feature_to_business,
    mapbox_features_to_businesses,
)
from ethnica.models import Business
from ethnica.vendors import mapbox

logger = logging.getLogger(__name__)
_SESSION = requests.Session()

DEFAULT_RADIUS_METERS = 5000
MAPBOX_MAX_RADIUS_KM = 50
MOCK_MAX_RADIUS_KM = 50
MAPBOX_FEATURE_TYPES = (
    "poi",
    "address",
    "place",
    "locality",
    "neighborhood",
    "postcode",
    "district",
    "region",
    "country",
)


class ProviderError(RuntimeError):
    """Raised when a provider cannot answer a search (transport, status or body failure)."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class PlaceProvider(Protocol):
    name: str

    def search_nearby(
        self,
        center: Sequence[float],
        query: Optional[str] = None,
        radius_meters: int = DEFAULT_RADIUS_METERS,
    ) -> List[Business]:
        ...

    def get_details(self, provider_id: str) -> Optional[Business]:
        ...


class MapboxProvider:
    """Mapbox Geocoding. Mapbox has no ratings, photos or ownership data."""

    name = "mapbox"

    def __init__(self, token: str, rng: Optional[random.Random] = None) -> None:
        self._token = token
        self._rng = rng

    def search_nearby(
        self,
        center: Sequence[float],
        query: Optional[str] = None,
        radius_meters: int = DEFAULT_RADIUS_METERS,
    ) -> List[Business]:
        radius_km = min(radius_meters / 1000, MAPBOX_MAX_RADIUS_KM)
        try:
            if query and query.strip():
                payload = mapbox.forward_geocode(
                    query,
                    proximity=center,
                    token=self._token,
                    bbox=bounding_box(center, radius_km),
                )
            else:
                payload = mapbox.reverse_geocode(center, token=self._token)
        except (mapbox.MapboxError, requests.RequestException) as exc:
            raise ProviderError(self.name, str(exc)) from exc
        rng = self._rng or sample_data.rng_for(center, query)
        return mapbox_features_to_businesses(payload.get("features"), center=center, rng=rng)

    def get_details(self, provider_id: str) -> Optional[Business]:
        feature_id = provider_id[len("mapbox-"):] if provider_id.startswith("mapbox-") else provider_id
        feature_type, _, local_id = feature_id.partition(".")
        if feature_type not in MAPBOX_FEATURE_TYPES or not local_id:
            logger.debug("Skipping Mapbox lookup for non-Mapbox id=%s", provider_id)
            return None
        try:
            payload = mapbox.lookup_feature(feature_id, token=self._token)
        except (mapbox.MapboxError, requests.RequestException) as exc:
            logger.warning("Mapbox details lookup failed for %s: %s", feature_id, exc)
            return None
        features = payload.get("features") or []
        if not features:
            logger.info("No Mapbox features found for id=%s", feature_id)
            return None
        return mapbox_feature_to_business(features[0], rng=self._rng, with_reviews=True)


class GooglePlacesProvider:
    """Google Places through the same-origin proxy, which holds the secret key."""

    name = "google_places"

    def __init__(self, proxy_url: str, photo_key: Optional[str] = None, rng: Optional[random.Random] = None) -> None:
        self._proxy_url = proxy_url.rstrip("/")
        self._photo_key = photo_key
        self._rng = rng

    def _get(self, path: str, params: dict) -> dict:
        response = _SESSION.get(f"{self._proxy_url}{path}", params=params, timeout=10)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("proxy returned an unexpected body")
        return payload

    def search_nearby(
        self,
        center: Sequence[float],
        query: Optional[str] = None,
        radius_meters: int = DEFAULT_RADIUS_METERS,
    ) -> List[Business]:
        params = {"lat": center[1], "lng": center[0], "radius": radius_meters}
        if query and query.strip():
            params["keyword"] = query.strip()
        try:
            payload = self._get("/api/places/nearby", params)
        except (requests.RequestException, ValueError) as exc:
            raise ProviderError(self.name, f"proxy request failed: {exc}") from exc

        status = payload.get("status")
        if status not in {"OK", "ZERO_RESULTS"}:
            raise ProviderError(self.name, f"{status}: {payload.get('error') or 'no error message'}")
        results = payload.get("results") or []
        logger.info("Google Places returned %d results (status=%s)", len(results), status)
        return google_places_to_businesses(results, center=center, photo_key=self._photo_key, rng=self._rng)

    def get_details(self, provider_id: str) -> Optional[Business]:
        try:
            payload = self._get("/api/places/details", {"place_id": provider_id})
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Google Places details failed for %s: %s", provider_id, exc)
            return None
        if payload.get("status") != "OK" or not payload.get("result"):
            logger.info("Google Places details unavailable for %s: status=%s", provider_id, payload.get("status"))
            return None
        return google_place_to_business(payload["result"], photo_key=self._photo_key, rng=self._rng)


class MockBusinessProvider:
    """Deterministic synthetic data; always answers a search with at least one business."""

    name = "mock"

    def __init__(self, count: int = 25, rng: Optional[random.Random] = None) -> None:
        self._count = count
        self._rng = rng

    def search_nearby(
        self,
        center: Sequence[float],
        query: Optional[str] = None,
        radius_meters: int = DEFAULT_RADIUS_METERS,
    ) -> List[Business]:
        rng = self._rng or sample_data.rng_for(center, query)
        return sample_data.search_mock_businesses(
            center,
            keyword=query,
            radius_km=min(radius_meters / 1000, MOCK_MAX_RADIUS_KM),
            count=max(self._count, 1),
            rng=rng,
        )

    def get_details(self, provider_id: str) -> Optional[Business]:
        return sample_data.get_featured_business(provider_id)
