"""Provider-chained business search.

Providers are tried in order. An error or an empty answer moves on to the next
provider straight away (no retries); the mock provider closes every chain, so a
valid center always yields businesses.
"""

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ethnica.core.config import Settings, get_settings
from ethnica.core.geo import is_valid_center
from ethnica.models import Business
from ethnica.search.providers import (
    DEFAULT_RADIUS_METERS,
    GooglePlacesProvider,
    MapboxProvider,
    MockBusinessProvider,
    PlaceProvider,
    ProviderError,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25


@dataclass(frozen=True)
class Notice:
    """User-facing message for degraded paths (rendered as a toast by the UI)."""

    level: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"level": self.level, "message": self.message}


@dataclass
class SearchOutcome:
    businesses: List[Business]
    source: str
    sequence: int
    degraded: bool = False
    notices: List[Notice] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "businesses": [business.to_dict() for business in self.businesses],
            "source": self.source,
            "sequence": self.sequence,
            "degraded": self.degraded,
            "notices": [notice.to_dict() for notice in self.notices],
        }


class SearchSequencer:
    """Hands out increasing request numbers so stale responses can be discarded."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._latest = next(self._counter)
            return self._latest

    @property
    def latest(self) -> int:
        return self._latest

    def is_current(self, sequence: int) -> bool:
        return sequence == self._latest


class SearchOrchestrator:
    def __init__(self, providers: Sequence[PlaceProvider], sequencer: Optional[SearchSequencer] = None) -> None:
        if not providers:
            raise ValueError("at least one provider is required")
        self.providers = list(providers)
        self.sequencer = sequencer or SearchSequencer()

    def search(
        self,
        center: Sequence[float],
        query: Optional[str] = None,
        radius_meters: int = DEFAULT_RADIUS_METERS,
        limit: int = DEFAULT_LIMIT,
    ) -> SearchOutcome:
        if not is_valid_center(center):
            raise ValueError(f"center must be [lon, lat] in degrees, got {center!r}")
        if limit <= 0:
            raise ValueError("limit must be positive")
        query = query.strip() if query else None
        sequence = self.sequencer.next()
        notices: List[Notice] = []
        degraded = False

        logger.info("Search #%d center=%s query=%r radius=%s", sequence, list(center), query, radius_meters)
        for provider in self.providers:
            try:
                businesses = provider.search_nearby(center, query, radius_meters)
            except ProviderError as exc:
                logger.warning("Provider %s failed: %s", provider.name, exc)
                notices.append(Notice("error", "Using sample data while the business directory is unavailable"))
                degraded = True
                continue
            except Exception as exc:  # noqa: BLE001
                logger.exception("Provider %s crashed: %s", provider.name, exc)
                notices.append(Notice("error", "Using sample data while the business directory is unavailable"))
                degraded = True
                continue

            if not businesses:
                logger.warning("Provider %s returned no results; falling back.", provider.name)
                degraded = True
                continue

            if degraded or provider.name == "mock":
                degraded = True
                if not notices:
                    notices.append(Notice("info", "Showing sample businesses near you"))
            logger.info("Search #%d answered by %s with %d businesses", sequence, provider.name, len(businesses))
            return SearchOutcome(
                businesses=businesses[:limit],
                source=provider.name,
                sequence=sequence,
                degraded=degraded,
                notices=_dedupe(notices),
            )

        logger.error("Search #%d: every provider came back empty", sequence)
        notices.append(Notice("error", "No businesses found near this location"))
        return SearchOutcome(businesses=[], source="none", sequence=sequence, degraded=True, notices=_dedupe(notices))

    def get_details(self, place_id: str) -> Optional[Business]:
        for provider in self.providers:
            try:
                business = provider.get_details(place_id)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Provider %s details lookup failed for %s: %s", provider.name, place_id, exc)
                continue
            if business is not None:
                return business
        logger.info("No provider knows place_id=%s", place_id)
        return None

    def is_current(self, outcome: SearchOutcome) -> bool:
        return self.sequencer.is_current(outcome.sequence)


def _dedupe(notices: List[Notice]) -> List[Notice]:
    unique: List[Notice] = []
    for notice in notices:
        if notice not in unique:
            unique.append(notice)
    return unique


def build_providers(settings: Optional[Settings] = None, mock_count: int = DEFAULT_LIMIT) -> List[PlaceProvider]:
    """Default chain: Mapbox, then Google Places via the proxy, then mock data."""
    settings = settings or get_settings()
    providers: List[PlaceProvider] = []
    if settings.mapbox_token:
        providers.append(MapboxProvider(settings.mapbox_token))
    else:
        logger.warning("Mapbox provider disabled: NEXT_PUBLIC_MAPBOX_TOKEN is not set")
    if settings.google_places_enabled:
        providers.append(GooglePlacesProvider(settings.places_proxy_url, photo_key=settings.google_places_public_key))
    else:
        logger.warning("Google Places provider disabled: NEXT_PUBLIC_GOOGLE_PLACES_API_KEY is not set")
    providers.append(MockBusinessProvider(count=mock_count))
    return providers


def build_orchestrator(settings: Optional[Settings] = None) -> SearchOrchestrator:
    settings = settings or get_settings()
    return SearchOrchestrator(build_providers(settings, mock_count=settings.search_result_limit))


def search_nearby_businesses(
    center: Sequence[float],
    query: Optional[str] = None,
    radius_meters: int = DEFAULT_RADIUS_METERS,
    limit: int = DEFAULT_LIMIT,
    orchestrator: Optional[SearchOrchestrator] = None,
) -> List[Business]:
    orchestrator = orchestrator or build_orchestrator()
    return orchestrator.search(center, query=query, radius_meters=radius_meters, limit=limit).businesses


def get_business_details(place_id: str, orchestrator: Optional[SearchOrchestrator] = None) -> Optional[Business]:
    orchestrator = orchestrator or build_orchestrator()
    return orchestrator.get_details(place_id)
