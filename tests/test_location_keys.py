"""
Tests for cache key derivation and location equality.
"""
from forecast_core.keys import cache_key, cache_key_for_date, same_location
from forecast_core.models import Location


class TestCacheKey:
    def test_key_format(self):
        assert cache_key(Location(lat=41.8781, lng=-87.6298)) == "41.8781,-87.6298"

    def test_key_rounds_to_four_decimals(self):
        assert cache_key(Location(lat=41.87814, lng=-87.62981)) == "41.8781,-87.6298"

    def test_jittered_coordinates_produce_same_key(self):
        a = Location(lat=41.87814, lng=-87.62981)
        b = Location(lat=41.87809, lng=-87.62976)
        assert cache_key(a) == cache_key(b)

    def test_name_does_not_affect_key(self):
        a = Location(lat=41.8781, lng=-87.6298, name="Chicago, IL")
        b = Location(lat=41.8781, lng=-87.6298, name="Chicago, Illinois")
        assert cache_key(a) == cache_key(b)

    def test_pads_whole_numbers(self):
        assert cache_key(Location(lat=10, lng=-20)) == "10.0000,-20.0000"

    def test_negative_zero_normalised(self):
        assert cache_key(Location(lat=-0.00001, lng=0.00001)) == "0.0000,0.0000"

    def test_distinct_places_get_distinct_keys(self):
        a = Location(lat=41.8781, lng=-87.6298)
        b = Location(lat=41.8782, lng=-87.6298)
        assert cache_key(a) != cache_key(b)


class TestCacheKeyForDate:
    def test_date_key_format(self):
        location = Location(lat=41.8781, lng=-87.6298)
        assert cache_key_for_date(location, "2022-01-02") == "41.8781,-87.6298-2022-01-02"

    def test_different_dates_different_keys(self):
        location = Location(lat=41.8781, lng=-87.6298)
        assert cache_key_for_date(location, "2022-01-02") != cache_key_for_date(
            location, "2022-01-03"
        )

    def test_date_key_never_equals_plain_key(self):
        location = Location(lat=41.8781, lng=-87.6298)
        assert cache_key_for_date(location, "2022-01-02") != cache_key(location)


class TestSameLocation:
    def test_identical_locations(self):
        a = Location(lat=41.8781, lng=-87.6298)
        assert same_location(a, a)

    def test_within_default_tolerance(self):
        a = Location(lat=41.8781, lng=-87.6298)
        b = Location(lat=41.8785, lng=-87.6302)
        assert same_location(a, b)

    def test_outside_default_tolerance(self):
        a = Location(lat=41.8781, lng=-87.6298)
        b = Location(lat=41.8800, lng=-87.6298)
        assert not same_location(a, b)

    def test_both_axes_must_match(self):
        a = Location(lat=41.8781, lng=-87.6298)
        b = Location(lat=41.8781, lng=-87.6400)
        assert not same_location(a, b)

    def test_looser_than_cache_key(self):
        # Different cache entries, same place for recent-location merging
        a = Location(lat=41.8781, lng=-87.6298)
        b = Location(lat=41.8786, lng=-87.6298)
        assert cache_key(a) != cache_key(b)
        assert same_location(a, b)

    def test_custom_tolerance(self):
        a = Location(lat=41.8781, lng=-87.6298)
        b = Location(lat=41.9, lng=-87.6298)
        assert not same_location(a, b)
        assert same_location(a, b, tolerance=0.05)
