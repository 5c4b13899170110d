"""Synthetic business data used when no live provider answers.

Every generator takes a ``random.Random`` so the output is reproducible; callers
that do not pass one get a generator seeded from the request center.
"""

import logging
import random
import time
from typing import List, Optional, Sequence

from ethnica.core.geo import distance_from_center, random_point_near
from ethnica.etl.transform import placeholder_photo
from ethnica.models import Business, BusinessReview

logger = logging.getLogger(__name__)

CATEGORIES = (
    "Restaurant", "Café", "Bar", "Bakery", "Coffee Shop",
    "Grocery", "Bookstore", "Clothing Store", "Electronics",
    "Beauty Salon", "Hardware Store", "Pharmacy", "Gym",
    "Art Gallery", "Gift Shop", "Yoga Studio", "Pet Store",
    "Florist", "Food Truck", "Jewelry Store",
)

ATTRIBUTES = (
    "Woman Owned", "Black Owned", "LGBTQ+ Owned", "Latino Owned", "Asian Owned",
    "Veteran Owned", "Locally Owned", "Family Owned", "Sustainable",
    "Organic", "Vegan Options", "Fair Trade", "Eco-Friendly",
    "Minority Owned", "Ethical Business", "Budget Friendly", "Premium", "Highly Rated",
)

PHOTO_SETS = (
    ("https://images.unsplash.com/photo-1517248135467-4c7edcad34c4?w=1000&q=80",),
    ("https://images.unsplash.com/photo-1526365609942-180c5ee58144?w=1000&q=80",),
    ("https://images.unsplash.com/photo-1555396273-367ea4eb4db5?w=1000&q=80",),
)

NAME_PREFIXES = (
    ("The", "Happy", "Golden", "Green", "Blue", "Urban", "Rustic", "Modern", "Classic"),
    ("Sunshine", "Mountain", "Ocean", "City", "Garden", "Valley", "River"),
    ("Fresh", "Tasty", "Artisan", "Organic", "Premium", "Craft", "Homemade"),
    ("Local", "Neighborhood", "Community", "Family", "Friendly", "Cozy", "Trendy"),
)
NAME_SUFFIXES = ("House", "Corner", "Spot", "Place", "Station", "Hub", "Market")

STREET_NAMES = ("Main", "Oak", "Maple", "Cedar", "Pine", "Elm", "Park", "Lake", "River", "Hill", "Valley", "Mountain", "Ocean")
STREET_TYPES = ("St", "Ave", "Blvd", "Dr", "Ln", "Rd", "Way", "Pl", "Ct")

SECONDS_PER_DAY = 24 * 60 * 60
MIN_QUERY_RESULTS = 3

_FEATURED = (
    {
        "id": "mock1",
        "name": "Green Earth Cafe",
        "category": "Restaurant",
        "description": "Sustainable, plant-based cafe with locally sourced ingredients.",
        "address": "123 Main St, New York, NY",
        "coordinates": [-74.006, 40.7128],
        "rating": 4.5,
        "reviewCount": 32,
        "phone": "(555) 123-4567",
        "website": "https://greenearthcafe.example.com",
        "attributes": ["Minority Owned", "Vegan Options", "Sustainable"],
        "photos": list(PHOTO_SETS[0]),
    },
    {
        "id": "mock2",
        "name": "Community Bookstore",
        "category": "Retail",
        "description": "Independent bookstore with diverse authors and community events.",
        "address": "456 Park Ave, New York, NY",
        "coordinates": [-73.997, 40.7185],
        "rating": 4.8,
        "reviewCount": 56,
        "phone": "(555) 234-5678",
        "website": "https://communitybookstore.example.com",
        "attributes": ["Locally Owned", "Woman Owned"],
        "photos": list(PHOTO_SETS[1]),
    },
    {
        "id": "mock3",
        "name": "Halal Grill House",
        "category": "Restaurant",
        "description": "Family-owned restaurant serving authentic halal dishes.",
        "address": "789 Broadway, New York, NY",
        "coordinates": [-73.988, 40.7155],
        "rating": 4.3,
        "reviewCount": 28,
        "phone": "(555) 345-6789",
        "attributes": ["Minority Owned", "Halal Options", "Family Owned"],
        "photos": list(PHOTO_SETS[2]),
    },
)


def rng_for(center: Sequence[float], query: Optional[str] = None) -> random.Random:
    """Seed a generator from the rounded center and query so repeated searches agree."""
    seed = f"{center[0]:.4f},{center[1]:.4f}|{(query or '').strip().lower()}"
    return random.Random(seed)


def featured_businesses() -> List[Business]:
    return [Business.from_dict(dict(entry)) for entry in _FEATURED]


def get_featured_business(business_id: str) -> Optional[Business]:
    for business in featured_businesses():
        if business_id in (business.id, business.place_id):
            return business
    return None


def _token(rng: random.Random) -> str:
    return f"{rng.getrandbits(48):012x}"


def _pick_attributes(rng: random.Random) -> List[str]:
    selected: List[str] = []
    for _ in range(rng.randint(2, 4)):
        attribute = rng.choice(ATTRIBUTES)
        if attribute not in selected:
            selected.append(attribute)
    return selected


def _pick_photos(rng: random.Random, category: str) -> List[str]:
    if rng.random() > 0.2:
        return list(rng.choice(PHOTO_SETS))
    return [placeholder_photo(category)]


def _business_name(rng: random.Random, category: str) -> str:
    template = rng.randint(0, len(NAME_PREFIXES))
    if template == len(NAME_PREFIXES):
        return f"{category} {rng.choice(NAME_SUFFIXES)}"
    return f"{rng.choice(NAME_PREFIXES[template])} {category}"


def _street_address(rng: random.Random) -> str:
    return f"{rng.randint(1, 999)} {rng.choice(STREET_NAMES)} {rng.choice(STREET_TYPES)}"


def _phone(rng: random.Random) -> str:
    return f"(555) {rng.randint(100, 999)}-{rng.randint(1000, 9999)}"


def _slug(text: str) -> str:
    return "-".join(text.lower().split())


def _reviews(rng: random.Random, prefix: str, min_rating: int, text: str, now: float) -> List[BusinessReview]:
    return [
        BusinessReview(
            id=f"{prefix}-{index}",
            rating=rng.randint(min_rating, 5),
            text=text,
            author=f"User{rng.randint(1000, 9999)}",
            time=int(now) - rng.randint(1, 30) * SECONDS_PER_DAY,
        )
        for index in range(rng.randint(1, 5))
    ]


def generate_businesses_near(
    center: Sequence[float],
    radius_km: float = 5,
    count: int = 25,
    rng: Optional[random.Random] = None,
) -> List[Business]:
    """Generate ``count`` businesses around ``center``, nearest first.

    Points are placed within 80% of ``radius_km`` so the haversine distance stays
    inside the radius despite the flat-earth offset approximation.
    """
    rng = rng or rng_for(center)
    now = time.time()
    businesses = []
    for index in range(count):
        coordinates = random_point_near(center, radius_km * 0.8, rng)
        category = rng.choice(CATEGORIES)
        name = _business_name(rng, category)
        businesses.append(
            Business(
                id=f"business-{index}",
                place_id=f"place_id_{index}_{_token(rng)}",
                name=name,
                category=category,
                description=f"A wonderful {category.lower()} offering a variety of products and services in your area.",
                address=_street_address(rng),
                coordinates=coordinates,
                rating=round(rng.uniform(3.0, 5.0), 1),
                review_count=rng.randint(5, 200),
                price_level=rng.randint(1, 4),
                open_now=rng.random() > 0.3,
                phone=_phone(rng),
                website=f"https://example.com/{_slug(name)}",
                attributes=_pick_attributes(rng),
                photos=_pick_photos(rng, category),
                distance=distance_from_center(center, coordinates),
                reviews=_reviews(
                    rng,
                    f"review-{index}",
                    3,
                    "This place is amazing! I highly recommend checking it out when you're in the area.",
                    now,
                ),
            )
        )
    businesses.sort(key=lambda business: business.distance if business.distance is not None else float("inf"))
    return businesses


def category_for_term(term: str) -> str:
    term = term.strip().lower()
    for category in CATEGORIES:
        if term in category.lower():
            return category
    return term.title()


def generate_query_businesses(
    center: Sequence[float],
    term: str,
    radius_km: float = 3,
    rng: Optional[random.Random] = None,
) -> List[Business]:
    """Make 3-5 businesses that answer ``term`` so a keyword search never comes back empty."""
    term = term.strip()
    rng = rng or rng_for(center, term)
    now = time.time()
    category = category_for_term(term)
    display_term = term[:1].upper() + term[1:]
    name = f"{display_term} {category}" if category.lower() != term.lower() else f"{display_term} {rng.choice(NAME_SUFFIXES)}"

    businesses = []
    for index in range(rng.randint(3, 5)):
        coordinates = random_point_near(center, radius_km * 0.8, rng)
        businesses.append(
            Business(
                id=f"search-{index}-{_token(rng)[:8]}",
                place_id=f"place_search_{index}_{_token(rng)}",
                name=name,
                category=category,
                description=f"A fantastic {category.lower()} specializing in {term.lower()} options.",
                address=_street_address(rng),
                coordinates=coordinates,
                rating=round(rng.uniform(4.0, 5.0), 1),
                review_count=rng.randint(5, 200),
                price_level=rng.randint(1, 4),
                open_now=True,
                phone=_phone(rng),
                website=f"https://example.com/{_slug(term)}",
                attributes=[rng.choice(ATTRIBUTES), rng.choice(ATTRIBUTES)],
                photos=_pick_photos(rng, category),
                distance=distance_from_center(center, coordinates),
                reviews=_reviews(rng, f"review-search-{index}", 4, f"Great place with excellent {term.lower()} options!", now),
            )
        )
    businesses.sort(key=lambda business: business.distance)
    return businesses


def _relocated_featured(center: Sequence[float], radius_km: float, rng: random.Random) -> List[Business]:
    relocated = []
    for business in featured_businesses():
        business.coordinates = random_point_near(center, min(radius_km * 0.8, 1.0), rng)
        business.distance = distance_from_center(center, business.coordinates)
        relocated.append(business)
    return relocated


def search_mock_businesses(
    center: Sequence[float],
    keyword: Optional[str] = None,
    radius_km: float = 5,
    count: int = 25,
    rng: Optional[random.Random] = None,
) -> List[Business]:
    """Keyword search over generated data, synthesizing matches when nothing fits."""
    rng = rng or rng_for(center, keyword)
    nearby = generate_businesses_near(center, radius_km=radius_km, count=count, rng=rng)
    if not keyword or not keyword.strip():
        return nearby

    pool = nearby + _relocated_featured(center, radius_km, rng)
    matches = [business for business in pool if business.matches(keyword)]
    if len(matches) < MIN_QUERY_RESULTS:
        logger.info("Only %d mock businesses match %r; synthesizing query results.", len(matches), keyword)
        matches.extend(generate_query_businesses(center, keyword, radius_km=min(radius_km, 3), rng=rng))
    matches.sort(key=lambda business: business.distance)
    return matches[:count]
