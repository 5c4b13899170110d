"""Last known user location, kept in a small JSON file with a 24 hour expiry."""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ethnica.core.geo import is_valid_center

logger = logging.getLogger(__name__)

LOCATION_KEY = "userLocation"
TIMESTAMP_KEY = "userLocationTimestamp"
MAX_AGE_SECONDS = 24 * 60 * 60


class LocationCache:
    def __init__(self, path: str, max_age_seconds: int = MAX_AGE_SECONDS) -> None:
        self.path = Path(path)
        self.max_age_seconds = max_age_seconds

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable location cache %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh)

    def load(self, now: Optional[float] = None) -> Optional[List[float]]:
        """Return the cached ``[lon, lat]`` if present and younger than ``max_age_seconds``."""
        data = self._read()
        location = data.get(LOCATION_KEY)
        timestamp = data.get(TIMESTAMP_KEY)
        if location is None or timestamp is None:
            return None
        if not is_valid_center(location) or not isinstance(timestamp, (int, float)):
            logger.warning("Discarding malformed cached location: %r", data)
            self.clear()
            return None
        now = time.time() if now is None else now
        if now - timestamp > self.max_age_seconds:
            logger.info("Cached location expired; requesting a fresh one.")
            self.clear()
            return None
        return [float(location[0]), float(location[1])]

    def save(self, center: Sequence[float], now: Optional[float] = None) -> None:
        data = self._read()
        data[LOCATION_KEY] = [float(center[0]), float(center[1])]
        data[TIMESTAMP_KEY] = time.time() if now is None else now
        try:
            self._write(data)
        except OSError as exc:
            logger.warning("Could not persist location to %s: %s", self.path, exc)

    def clear(self) -> None:
        data = self._read()
        if LOCATION_KEY not in data and TIMESTAMP_KEY not in data:
            return
        data.pop(LOCATION_KEY, None)
        data.pop(TIMESTAMP_KEY, None)
        try:
            self._write(data)
        except OSError as exc:
            logger.warning("Could not clear location cache %s: %s", self.path, exc)


def resolve_center(
    requested: Optional[Sequence[float]],
    cache: Optional[LocationCache],
    default: Sequence[float],
) -> Tuple[List[float], str]:
    """Pick the search center: requested, then cached, then the default. Returns (center, origin)."""
    if requested is not None and is_valid_center(requested):
        if cache is not None:
            cache.save(requested)
        return [float(requested[0]), float(requested[1])], "requested"
    if cache is not None:
        cached = cache.load()
        if cached is not None:
            return cached, "cached"
    return [float(default[0]), float(default[1])], "default"
