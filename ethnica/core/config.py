"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CENTER = (-74.006, 40.7128)


@dataclass(frozen=True)
class Settings:
    google_places_api_key: str = ""
    mapbox_token: str = ""
    google_maps_public_key: str = ""
    google_places_public_key: str = ""
    privy_app_id: str = ""
    places_proxy_url: str = "http://localhost:9000"
    server_port: int = 9000
    location_cache_path: str = ".ethnica_location.json"
    default_center_lng: float = DEFAULT_CENTER[0]
    default_center_lat: float = DEFAULT_CENTER[1]
    search_result_limit: int = 25

    @property
    def map_enabled(self) -> bool:
        return bool(self.mapbox_token)

    @property
    def auth_enabled(self) -> bool:
        return bool(self.privy_app_id)

    @property
    def google_places_enabled(self) -> bool:
        return bool(self.google_places_public_key)

    @property
    def default_center(self) -> List[float]:
        return [self.default_center_lng, self.default_center_lat]


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("%s=%r is not a number; using %s", name, raw, default)
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer; using %s", name, raw, default)
        return default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_places_api_key = os.getenv("GOOGLE_PLACES_API_KEY", "")
    mapbox_token = os.getenv("NEXT_PUBLIC_MAPBOX_TOKEN", "")
    google_maps_public_key = os.getenv("NEXT_PUBLIC_GOOGLE_MAPS_API_KEY", "")
    google_places_public_key = os.getenv("NEXT_PUBLIC_GOOGLE_PLACES_API_KEY", "")
    privy_app_id = os.getenv("NEXT_PUBLIC_PRIVY_APP_ID", "")
    places_proxy_url = os.getenv("PLACES_PROXY_URL", "http://localhost:9000").rstrip("/")
    location_cache_path = os.getenv("LOCATION_CACHE_PATH", ".ethnica_location.json")

    if not google_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not configured; the places proxy will answer API_KEY_MISSING.")
    if not mapbox_token:
        logger.warning("NEXT_PUBLIC_MAPBOX_TOKEN is not set; map and Mapbox search are disabled.")
    if not google_places_public_key:
        logger.warning("NEXT_PUBLIC_GOOGLE_PLACES_API_KEY is not set; Google Places search is disabled.")
    if not privy_app_id:
        logger.warning("NEXT_PUBLIC_PRIVY_APP_ID is not set; authentication is disabled.")

    return Settings(
        google_places_api_key=google_places_api_key,
        mapbox_token=mapbox_token,
        google_maps_public_key=google_maps_public_key,
        google_places_public_key=google_places_public_key,
        privy_app_id=privy_app_id,
        places_proxy_url=places_proxy_url,
        server_port=_int_env("SERVER_PORT", 9000),
        location_cache_path=location_cache_path,
        default_center_lng=_float_env("DEFAULT_CENTER_LNG", DEFAULT_CENTER[0]),
        default_center_lat=_float_env("DEFAULT_CENTER_LAT", DEFAULT_CENTER[1]),
        search_result_limit=_int_env("SEARCH_RESULT_LIMIT", 25),
    )
