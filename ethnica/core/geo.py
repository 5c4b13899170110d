"""Coordinate helpers. Coordinates are ``[longitude, latitude]`` pairs throughout."""

import math
import random
from typing import Any, List, Sequence

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers between two points given in degrees."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_from_center(center: Sequence[float], coordinates: Sequence[float]) -> float:
    return haversine_km(center[1], center[0], coordinates[1], coordinates[0])


def random_point_near(center: Sequence[float], radius_km: float, rng: random.Random) -> List[float]:
    """
    Pick a point at a random bearing up to ``radius_km`` away from ``center``.
    Points past a pole are reflected back over it and longitudes wrap into [-180, 180).
    """
    lng, lat = center[0], center[1]
    angle = rng.random() * 2 * math.pi
    offset_deg = math.degrees(rng.random() * radius_km / EARTH_RADIUS_KM)
    lat_offset = offset_deg * math.cos(angle)
    lng_offset = offset_deg * math.sin(angle) / max(math.cos(math.radians(lat)), 1e-6)
    return normalize_point(lng + lng_offset, lat + lat_offset)


def normalize_point(lng: float, lat: float) -> List[float]:
    """Fold an out-of-range ``[lng, lat]`` back onto the globe."""
    lat = (lat + 90) % 360 - 90
    if lat > 90:
        lat = 180 - lat
        lng += 180
    lng = (lng + 180) % 360 - 180
    return [lng, min(max(lat, -90.0), 90.0)]


def is_valid_center(center: Any) -> bool:
    if not isinstance(center, (list, tuple)) or len(center) != 2:
        return False
    lng, lat = center
    if isinstance(lng, bool) or isinstance(lat, bool):
        return False
    if not isinstance(lng, (int, float)) or not isinstance(lat, (int, float)):
        return False
    if not (math.isfinite(lng) and math.isfinite(lat)):
        return False
    return -180 <= lng <= 180 and -90 <= lat <= 90


def bounding_box(center: Sequence[float], radius_km: float) -> List[float]:
    """Return ``[min_lng, min_lat, max_lng, max_lat]`` enclosing the radius around ``center``."""
    lng, lat = center[0], center[1]
    lat_delta = math.degrees(radius_km / EARTH_RADIUS_KM)
    lng_delta = lat_delta / max(math.cos(math.radians(lat)), 1e-6)
    return [
        max(lng - lng_delta, -180.0),
        max(lat - lat_delta, -90.0),
        min(lng + lng_delta, 180.0),
        min(lat + lat_delta, 90.0),
    ]
