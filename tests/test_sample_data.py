import random

from ethnica.core.geo import distance_from_center, is_valid_center
from ethnica.etl import sample_data

NYC = [-74.006, 40.7128]


def test_generated_businesses_stay_within_radius():
    businesses = sample_data.generate_businesses_near(NYC, radius_km=2, count=50, rng=random.Random(11))

    within = [b for b in businesses if distance_from_center(NYC, b.coordinates) <= 2 + 1e-9]
    assert len(businesses) == 50
    assert len(within) / len(businesses) >= 0.8


def test_generated_businesses_are_sorted_and_well_formed():
    businesses = sample_data.generate_businesses_near(NYC, radius_km=5, count=25, rng=random.Random(2))

    distances = [b.distance for b in businesses]
    assert distances == sorted(distances)
    for business in businesses:
        assert is_valid_center(business.coordinates)
        assert business.category in sample_data.CATEGORIES
        assert 1 <= len(business.attributes) <= 4
        assert 3.0 <= business.rating <= 5.0
        assert 1 <= len(business.reviews) <= 5
        assert business.website.startswith("https://example.com/")


def test_generation_is_reproducible_from_the_center():
    first = sample_data.generate_businesses_near(NYC, count=5)
    second = sample_data.generate_businesses_near(NYC, count=5)

    assert [b.name for b in first] == [b.name for b in second]
    assert [b.coordinates for b in first] == [b.coordinates for b in second]


def test_query_businesses_use_matching_category():
    businesses = sample_data.generate_query_businesses(NYC, "bakery", rng=random.Random(4))

    assert 3 <= len(businesses) <= 5
    assert all(b.category == "Bakery" for b in businesses)
    assert all(b.name.startswith("Bakery ") for b in businesses)
    assert all(b.open_now for b in businesses)
    assert all(b.rating >= 4.0 for b in businesses)


def test_query_businesses_for_unknown_term_use_the_term():
    businesses = sample_data.generate_query_businesses(NYC, "sushi", rng=random.Random(4))

    assert all(b.category == "Sushi" for b in businesses)
    assert all(b.name.startswith("Sushi ") for b in businesses)


def test_search_mock_businesses_without_keyword_returns_everything():
    businesses = sample_data.search_mock_businesses(NYC, None, count=10, rng=random.Random(1))
    assert len(businesses) == 10


def test_search_mock_businesses_matches_featured_attributes():
    businesses = sample_data.search_mock_businesses(NYC, "halal", count=25, rng=random.Random(1))

    names = [b.name for b in businesses]
    assert "Halal Grill House" in names
    assert len(businesses) >= 3


def test_search_mock_businesses_synthesizes_bakeries():
    businesses = sample_data.search_mock_businesses(NYC, "bakery", count=25, rng=random.Random(9))

    assert len(businesses) >= 3
    assert all(b.category == "Bakery" for b in businesses)


def test_featured_business_lookup():
    assert sample_data.get_featured_business("mock3").name == "Halal Grill House"
    assert sample_data.get_featured_business("unknown") is None
