"""Core data models shared by the search providers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

_CAMEL_KEYS = {
    "place_id": "placeId",
    "review_count": "reviewCount",
    "price_level": "priceLevel",
    "open_now": "openNow",
    "author_details": "authorDetails",
}
_SNAKE_KEYS = {camel: snake for snake, camel in _CAMEL_KEYS.items()}


def _to_camel(data: Dict[str, Any]) -> Dict[str, Any]:
    return {_CAMEL_KEYS.get(key, key): value for key, value in data.items() if value is not None}


def _to_snake(data: Dict[str, Any]) -> Dict[str, Any]:
    return {_SNAKE_KEYS.get(key, key): value for key, value in data.items()}


@dataclass(slots=True)
class BusinessReview:
    id: str
    rating: float
    text: str
    author: str
    author_details: Optional[str] = None
    time: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return _to_camel(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BusinessReview":
        return cls(**_to_snake(data))


@dataclass(slots=True)
class Business:
    """Normalized business record, whichever provider produced it.

    ``coordinates`` is ``[longitude, latitude]`` (GeoJSON order). ``distance`` is
    kilometers from the search center and is only set by location-based searches.
    """

    id: str
    name: str
    category: str
    address: str
    coordinates: List[float]
    description: str = ""
    place_id: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    price_level: Optional[int] = None
    open_now: Optional[bool] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    attributes: List[str] = field(default_factory=list)
    photos: List[str] = field(default_factory=list)
    distance: Optional[float] = None
    reviews: List[BusinessReview] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.coordinates) != 2:
            raise ValueError(f"coordinates must be [lon, lat], got {self.coordinates!r}")
        self.coordinates = [float(self.coordinates[0]), float(self.coordinates[1])]
        deduped: List[str] = []
        for attribute in self.attributes:
            if attribute not in deduped:
                deduped.append(attribute)
        self.attributes = deduped

    def matches(self, keyword: str) -> bool:
        """Case-insensitive keyword match over name, category, description and attributes."""
        term = keyword.strip().lower()
        if not term:
            return True
        haystacks = [self.name, self.category, self.description or "", *self.attributes]
        return any(term in value.lower() for value in haystacks)

    def to_dict(self) -> Dict[str, Any]:
        data = _to_camel(asdict(self))
        data["reviews"] = [review.to_dict() for review in self.reviews]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Business":
        values = _to_snake(data)
        values["reviews"] = [BusinessReview.from_dict(review) for review in values.get("reviews") or []]
        return cls(**values)
