"""
Cache key derivation for geographic locations.

Two coordinates that only differ by floating-point jitter must map to the
same key, so coordinates are rounded to KEY_PRECISION decimals (~11 m).
"""
from typing import Protocol

KEY_PRECISION = 4

# ~100 m; deliberately looser than the cache key rounding
RECENT_LOCATION_TOLERANCE = 0.001


class HasCoordinates(Protocol):
    lat: float
    lng: float


def _format_coordinate(value: float) -> str:
    # + 0.0 turns -0.0 into 0.0 so both sides of the equator/meridian agree
    return f"{round(value, KEY_PRECISION) + 0.0:.{KEY_PRECISION}f}"


def cache_key(location: HasCoordinates) -> str:
    """Key for current conditions and the daily forecast."""
    return f"{_format_coordinate(location.lat)},{_format_coordinate(location.lng)}"


def cache_key_for_date(location: HasCoordinates, date: str) -> str:
    """Key for the hourly forecast of one calendar day (date is YYYY-MM-DD)."""
    return f"{cache_key(location)}-{date}"


def same_location(
    a: HasCoordinates,
    b: HasCoordinates,
    tolerance: float = RECENT_LOCATION_TOLERANCE,
) -> bool:
    """True when both coordinate deltas are within tolerance degrees."""
    return abs(a.lat - b.lat) <= tolerance and abs(a.lng - b.lng) <= tolerance
