"""
Location search and reverse geocoding using the Nominatim API.
"""
import json
import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

import requests

from .cache import TemporalCacheStore
from .config import NOMINATIM_URL
from .errors import GeocodingError, InvalidLocationError
from .models import LocationSearchResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

GEOCODING_TTL_MS = 5 * 60 * 1000  # 5 minutes
USER_AGENT = "weather-dash/1.0"

COUNTRY_ABBREVIATIONS = {
    "united states": "US",
    "united kingdom": "UK",
    "canada": "CA",
}

STATE_ABBREVIATIONS = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR",
    "california": "CA", "colorado": "CO", "connecticut": "CT", "delaware": "DE",
    "florida": "FL", "georgia": "GA", "hawaii": "HI", "idaho": "ID",
    "illinois": "IL", "indiana": "IN", "iowa": "IA", "kansas": "KS",
    "kentucky": "KY", "louisiana": "LA", "maine": "ME", "maryland": "MD",
    "massachusetts": "MA", "michigan": "MI", "minnesota": "MN", "mississippi": "MS",
    "missouri": "MO", "montana": "MT", "nebraska": "NE", "nevada": "NV",
    "new hampshire": "NH", "new jersey": "NJ", "new mexico": "NM", "new york": "NY",
    "north carolina": "NC", "north dakota": "ND", "ohio": "OH", "oklahoma": "OK",
    "oregon": "OR", "pennsylvania": "PA", "rhode island": "RI", "south carolina": "SC",
    "south dakota": "SD", "tennessee": "TN", "texas": "TX", "utah": "UT",
    "vermont": "VT", "virginia": "VA", "washington": "WA", "west virginia": "WV",
    "wisconsin": "WI", "wyoming": "WY",
}

TYPE_PRIORITY = {
    "city": 5,
    "county": 4,
    "state": 3,
    "country": 2,
    "postcode": 1,
    "address": 0,
}

_CITY_TYPES = {"city", "town", "village"}


def _city(address: Mapping[str, Any]) -> Optional[str]:
    return address.get("city") or address.get("town") or address.get("village")


def format_location_name(response: Mapping[str, Any]) -> str:
    """Short, readable name such as "Chicago, IL" for a Nominatim result."""
    address = response.get("address")
    if not address:
        return response["display_name"]

    city = _city(address)
    state = address.get("state")
    country = address.get("country")
    county = address.get("county")

    if city and state:
        return f"{city}, {STATE_ABBREVIATIONS.get(state.lower(), state)}"
    if city and country:
        return f"{city}, {COUNTRY_ABBREVIATIONS.get(country.lower(), country)}"
    if county and state:
        return f"{county}, {STATE_ABBREVIATIONS.get(state.lower(), state)}"

    return city or county or state or country or response["display_name"]


def _location_type(nominatim_type: Optional[str]) -> str:
    if nominatim_type in _CITY_TYPES:
        return "city"
    if nominatim_type == "province":
        return "state"
    if nominatim_type in ("county", "state", "country", "postcode"):
        return nominatim_type
    return "address"


def transform_response(response: Mapping[str, Any]) -> LocationSearchResult:
    address = response.get("address") or {}
    return LocationSearchResult(
        lat=float(response["lat"]),
        lng=float(response["lon"]),
        name=format_location_name(response),
        display_name=response["display_name"],
        country=address.get("country"),
        state=address.get("state"),
        city=_city(address),
        type=_location_type(response.get("type")),
    )


class GeocodingService:
    def __init__(
        self,
        cache: Optional[TemporalCacheStore] = None,
        base_url: str = NOMINATIM_URL,
        retries: int = 2,
        retry_delay: float = 1.0,
        timeout: float = 10.0,
    ):
        self.cache = cache or TemporalCacheStore(["search", "reverse"], GEOCODING_TTL_MS)
        self.base_url = base_url.rstrip("/")
        self.retries = retries
        self.retry_delay = retry_delay
        self.timeout = timeout

    def _request_with_retry(self, request_fn: Callable[[], T]) -> T:
        last_error: Optional[Exception] = None
        for attempt in range(self.retries + 1):
            try:
                return request_fn()
            except (requests.RequestException, ValueError) as e:
                last_error = e
                logger.warning(f"Geocoding attempt {attempt + 1} failed: {e}")
                if attempt < self.retries:
                    time.sleep(self.retry_delay * (attempt + 1))
        raise GeocodingError(f"Geocoding failed after retries: {last_error}")

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        response = requests.get(
            f"{self.base_url}/{path}",
            params=params,
            headers={"User-Agent": USER_AGENT},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def search_locations(
        self,
        query: str,
        limit: int = 5,
        countrycodes: Optional[str] = None,
        language: Optional[str] = None,
    ) -> List[LocationSearchResult]:
        """Search by free text; cities sort ahead of coarser matches."""
        if not query or not query.strip():
            raise ValueError("Search query cannot be empty")

        cache_key = json.dumps(
            {"query": query, "limit": limit, "countrycodes": countrycodes, "language": language},
            sort_keys=True,
        )
        cached = self.cache.get("search", cache_key)
        if cached is not None:
            return list(cached)

        params: Dict[str, Any] = {
            "q": query,
            "format": "json",
            "addressdetails": 1,
            "limit": limit,
            "dedupe": 1,
        }
        if countrycodes:
            params["countrycodes"] = countrycodes
        if language:
            params["accept-language"] = language

        def search() -> List[Dict[str, Any]]:
            data = self._get("search", params)
            if not isinstance(data, list):
                raise ValueError("Invalid geocoding response")
            return data

        raw_results = self._request_with_retry(search)
        try:
            results = [transform_response(result) for result in raw_results]
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Geocoding failed: {e}") from e

        results.sort(key=lambda result: TYPE_PRIORITY.get(result.type, 0), reverse=True)
        self.cache.put("search", cache_key, results)
        return list(results)

    def reverse_geocode(self, lat: float, lng: float) -> LocationSearchResult:
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            raise InvalidLocationError("Invalid coordinates")

        cache_key = f"{lat},{lng}"
        cached = self.cache.get("reverse", cache_key)
        if cached is not None:
            return cached

        def reverse() -> Dict[str, Any]:
            data = self._get(
                "reverse",
                {"lat": lat, "lon": lng, "format": "json", "addressdetails": 1, "zoom": 10},
            )
            if not data or "error" in data:
                raise ValueError("Location not found")
            return data

        raw_result = self._request_with_retry(reverse)
        try:
            result = transform_response(raw_result)
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Reverse geocoding failed: {e}") from e

        self.cache.put("reverse", cache_key, result)
        return result

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_stats(self) -> Dict[str, Dict[str, int]]:
        return self.cache.stats()
