"""Utilities for transforming provider responses into ``Business`` records.

Ownership and values attributes are not supplied by any provider. The helpers
below fabricate placeholder tags so the UI has something to filter on; they are
not a classification of the business.
"""

import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Sequence
from urllib.parse import quote

from ethnica.core.geo import distance_from_center
from ethnica.models import Business, BusinessReview
from ethnica.vendors.google_places import photo_url

logger = logging.getLogger(__name__)

GOOGLE_TYPE_CATEGORIES = {
    "restaurant": "Restaurant",
    "cafe": "Café",
    "bar": "Bar",
    "food": "Food",
    "grocery_or_supermarket": "Grocery",
    "store": "Retail",
    "shopping_mall": "Shopping",
    "clothing_store": "Clothing",
    "beauty_salon": "Beauty",
    "book_store": "Bookstore",
    "bakery": "Bakery",
    "convenience_store": "Convenience Store",
    "department_store": "Department Store",
    "electronics_store": "Electronics",
    "furniture_store": "Furniture",
    "hardware_store": "Hardware Store",
    "home_goods_store": "Home Goods",
    "jewelry_store": "Jewelry",
    "liquor_store": "Liquor Store",
    "shoe_store": "Shoe Store",
    "supermarket": "Supermarket",
}

MAPBOX_PLACE_TYPES = {
    "poi": "Point of Interest",
    "address": "Address",
    "place": "Place",
    "neighborhood": "Neighborhood",
}

RESTAURANT_ATTRIBUTES = (
    "Family Owned",
    "Woman Owned",
    "Minority Owned",
    "Sustainable",
    "Vegan Options",
    "Locally Sourced",
)
STORE_ATTRIBUTES = (
    "Locally Owned",
    "Woman Owned",
    "Black Owned",
    "Latino Owned",
    "Asian Owned",
    "LGBTQ+ Owned",
)
GENERIC_ATTRIBUTES = ("Local Business", "Mapbox Listed", "Community Place", "Listed Location")
PRIORITY_ATTRIBUTES = ("Woman Owned", "Latino Owned", "Black Owned", "LGBTQ+ Owned", "Veteran Owned")

PLACEHOLDER_PHOTO = "https://via.placeholder.com/400x300/4F46E5/FFFFFF?text={text}"


def placeholder_photo(category: str) -> str:
    return PLACEHOLDER_PHOTO.format(text=quote(category, safe=""))


def _random_token(rng: random.Random) -> str:
    return f"{rng.getrandbits(48):012x}"


def google_category(types: Optional[Iterable[str]]) -> str:
    for type_name in types or []:
        if type_name in GOOGLE_TYPE_CATEGORIES:
            return GOOGLE_TYPE_CATEGORIES[type_name]
    return "Business"


def _pick_some(pool: Sequence[str], rng: random.Random, attributes: List[str]) -> None:
    for _ in range(rng.randint(1, 2)):
        choice = rng.choice(pool)
        if choice not in attributes:
            attributes.append(choice)


def google_placeholder_attributes(place: Dict[str, Any], rng: random.Random) -> List[str]:
    attributes: List[str] = []
    price_level = place.get("price_level")
    rating = place.get("rating")
    types = place.get("types") or []

    if price_level == 1:
        attributes.append("Budget Friendly")
    if price_level is not None and price_level >= 3:
        attributes.append("Premium")
    if rating is not None and rating >= 4.5:
        attributes.append("Highly Rated")
    if "restaurant" in types:
        _pick_some(RESTAURANT_ATTRIBUTES, rng, attributes)
    if "store" in types or "shopping" in types:
        _pick_some(STORE_ATTRIBUTES, rng, attributes)
    return attributes


def _google_reviews(raw_reviews: Optional[Iterable[Dict[str, Any]]]) -> List[BusinessReview]:
    reviews = []
    for index, raw in enumerate(raw_reviews or []):
        review_time = raw.get("time")
        reviews.append(
            BusinessReview(
                id=str(review_time if review_time is not None else index),
                rating=raw.get("rating") or 0,
                text=raw.get("text") or "",
                author=raw.get("author_name") or "Anonymous",
                author_details=raw.get("relative_time_description"),
                time=review_time,
            )
        )
    return reviews


def google_place_to_business(
    place: Dict[str, Any],
    center: Optional[Sequence[float]] = None,
    photo_key: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Optional[Business]:
    """Map a Nearby Search result or a Details result onto ``Business``."""
    location = (place.get("geometry") or {}).get("location") or {}
    lat, lng = location.get("lat"), location.get("lng")
    place_id = place.get("place_id")
    if lat is None or lng is None:
        logger.debug("Skipping Google place without geometry: %s", place_id)
        return None
    rng = rng or random.Random(place_id)

    coordinates = [lng, lat]
    photos = []
    if photo_key:
        photos = [photo_url(photo["photo_reference"], photo_key) for photo in place.get("photos") or [] if photo.get("photo_reference")]

    return Business(
        id=place_id or f"google-{_random_token(rng)}",
        place_id=place_id,
        name=place.get("name") or "Unnamed Business",
        category=google_category(place.get("types")),
        description=(place.get("editorial_summary") or {}).get("overview") or "",
        address=place.get("formatted_address") or place.get("vicinity") or "",
        coordinates=coordinates,
        rating=place.get("rating"),
        review_count=place.get("user_ratings_total"),
        price_level=place.get("price_level"),
        open_now=(place.get("opening_hours") or {}).get("open_now"),
        phone=place.get("formatted_phone_number"),
        website=place.get("website"),
        attributes=google_placeholder_attributes(place, rng),
        photos=photos,
        distance=distance_from_center(center, coordinates) if center else None,
        reviews=_google_reviews(place.get("reviews")),
    )


def google_places_to_businesses(
    places: Iterable[Dict[str, Any]],
    center: Optional[Sequence[float]] = None,
    photo_key: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> List[Business]:
    businesses = []
    for place in places or []:
        business = google_place_to_business(place, center=center, photo_key=photo_key, rng=rng)
        if business is not None:
            businesses.append(business)
    return businesses


def mapbox_category(feature: Dict[str, Any]) -> str:
    category = (feature.get("properties") or {}).get("category")
    if category:
        return category
    place_types = feature.get("place_type") or []
    if place_types:
        place_type = place_types[0]
        return MAPBOX_PLACE_TYPES.get(place_type, place_type[:1].upper() + place_type[1:])
    return "Business"


def mapbox_placeholder_attributes(feature: Dict[str, Any], rng: random.Random) -> List[str]:
    attributes: List[str] = []
    properties = feature.get("properties")
    if properties:
        if properties.get("wikidata"):
            attributes.append("Listed on Wikidata")
        if properties.get("landmark"):
            attributes.append("Landmark")
        if properties.get("address"):
            attributes.append("Has Address")
        for context in feature.get("context") or []:
            if str(context.get("id", "")).startswith("neighborhood"):
                attributes.append(f"In {context.get('text')}")
                break

    if not attributes:
        attributes.append(rng.choice(GENERIC_ATTRIBUTES))
    # Half of the listings get one ownership tag so the demographic filters have hits.
    if rng.random() > 0.5:
        attributes.append(rng.choice(PRIORITY_ATTRIBUTES))
    return attributes


def mapbox_feature_to_business(
    feature: Dict[str, Any],
    center: Optional[Sequence[float]] = None,
    rng: Optional[random.Random] = None,
    with_reviews: bool = False,
) -> Optional[Business]:
    coordinates = feature.get("center")
    if not coordinates or len(coordinates) != 2:
        logger.debug("Skipping Mapbox feature without center: %s", feature.get("id"))
        return None
    feature_id = feature.get("id")
    rng = rng or random.Random(feature_id)
    category = mapbox_category(feature)

    reviews = []
    if with_reviews:
        reviews.append(
            BusinessReview(
                id=f"review-{_random_token(rng)}",
                rating=4,
                text="This is a placeholder review since Mapbox doesn't provide review data.",
                author="System",
            )
        )

    distance = None
    if center:
        distance = round(distance_from_center(center, coordinates), 1)

    return Business(
        id=f"mapbox-{feature_id or _random_token(rng)}",
        place_id=feature_id,
        name=feature.get("text") or feature.get("place_name") or "Unnamed Location",
        category=category,
        description=(feature.get("properties") or {}).get("description") or "",
        address=feature.get("place_name") or "",
        coordinates=list(coordinates),
        attributes=mapbox_placeholder_attributes(feature, rng),
        photos=[placeholder_photo(category)],
        distance=distance,
        reviews=reviews,
    )


def mapbox_features_to_businesses(
    features: Optional[Iterable[Dict[str, Any]]],
    center: Optional[Sequence[float]] = None,
    rng: Optional[random.Random] = None,
) -> List[Business]:
    businesses = []
    for feature in features or []:
        business = mapbox_feature_to_business(feature, center=center, rng=rng)
        if business is not None:
            businesses.append(business)
    return businesses
