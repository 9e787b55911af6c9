"""
Forecast fetch orchestrator.

Sits between the UI and the remote provider. For each forecast kind the
operating mode decides whether a read is answered from a mock scenario, from
the cache, or from the provider (which then refreshes the cache).
"""
import logging
import math
import re
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from dateutil import tz

from utils.metrics import forecast_read_counter, provider_call_counter, provider_call_duration

from .cache import ForecastKind, TemporalCacheStore, create_forecast_cache
from .dev_mode import DevModeConfig, DevModeSelector, OperatingMode
from .errors import InvalidDateError, InvalidLocationError, NoCachedDataError
from .keys import cache_key, cache_key_for_date
from .models import (
    CurrentWeather,
    DailyForecast,
    HourlyForecast,
    Location,
    MockScenario,
    ScenarioSummary,
)
from .normalize import MAX_DAILY_ENTRIES, hourly_for_local_day, normalize_current, normalize_daily
from .provider import WeatherProviderBase

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
HOURS_PER_DAY = 24


def validate_location(location: Location) -> None:
    """Reject non-finite or out-of-range coordinates."""
    lat, lng = location.lat, location.lng
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidLocationError("Coordinates must be finite numbers")
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise InvalidLocationError(
            "Invalid coordinates: latitude must be -90 to 90, "
            "longitude must be -180 to 180"
        )


def validate_date(date: str) -> None:
    if not isinstance(date, str) or not DATE_PATTERN.match(date):
        raise InvalidDateError("Invalid date format. Use YYYY-MM-DD")
    try:
        datetime.strptime(date, "%Y-%m-%d")
    except ValueError:
        raise InvalidDateError(f"Invalid calendar date: {date}")


def synthesize_hourly_for_day(scenario: MockScenario, date: str) -> List[HourlyForecast]:
    """
    24 consecutive hours starting at local midnight of ``date`` in the
    scenario's timezone, cycling through the scenario's hourly template.
    """
    zone = tz.gettz(scenario.timezone) or tz.UTC
    midnight = datetime.strptime(date, "%Y-%m-%d").replace(tzinfo=zone)
    base = int(midnight.timestamp())
    template = scenario.hourly_forecast
    return [
        template[i % len(template)].model_copy(update={"timestamp": base + i * 3600})
        for i in range(HOURS_PER_DAY)
    ]


class ForecastService:
    def __init__(
        self,
        provider: WeatherProviderBase,
        cache: Optional[TemporalCacheStore] = None,
        dev_mode: Optional[DevModeSelector] = None,
    ):
        self.provider = provider
        self.cache = cache or create_forecast_cache()
        self.dev_mode = dev_mode or DevModeSelector()

    def _log(self, config: DevModeConfig, message: str, **extra: Any) -> None:
        level = logging.INFO if config.logging else logging.DEBUG
        logger.log(level, message, extra={"mode": config.mode.value, **extra})

    def _read_through(
        self,
        kind: ForecastKind,
        key: str,
        location: Location,
        from_scenario: Callable[[MockScenario], Any],
        fetch: Callable[[], Any],
    ) -> Any:
        config = self.dev_mode.current_config()

        if config.mode is OperatingMode.MOCK:
            scenario = self.dev_mode.active_scenario()
            self._log(config, f"Returning mock data for scenario {scenario.id}", kind=kind.value)
            forecast_read_counter.labels(kind=kind.value, source="mock").inc()
            return from_scenario(scenario)

        if config.mode in (OperatingMode.OFFLINE, OperatingMode.CACHE_FIRST):
            cached = self.cache.get(kind, key)
            if cached is not None:
                self._log(config, f"Cache hit for {key}", kind=kind.value, status="cache_hit")
                forecast_read_counter.labels(kind=kind.value, source="cache").inc()
                return cached
            if config.mode is OperatingMode.OFFLINE:
                self._log(config, f"No cached data for {key}", kind=kind.value, status="offline_miss")
                forecast_read_counter.labels(kind=kind.value, source="offline_miss").inc()
                raise NoCachedDataError(kind.value, key)
            self._log(config, f"Cache miss for {key}", kind=kind.value, status="cache_miss")

        self._log(config, f"Fetching {kind.value} from provider", kind=kind.value, status="fetch")
        start_time = time.time()
        try:
            data = fetch()
        except Exception:
            provider_call_counter.labels(kind=kind.value, status="error").inc()
            raise
        finally:
            provider_call_duration.labels(kind=kind.value).observe(time.time() - start_time)

        provider_call_counter.labels(kind=kind.value, status="success").inc()
        forecast_read_counter.labels(kind=kind.value, source="provider").inc()
        self.cache.put(kind, key, data, location=location)
        self._log(config, f"Cached {kind.value} for {key}", kind=kind.value, status="cached")
        return data

    def get_current_weather(self, location: Location) -> CurrentWeather:
        validate_location(location)
        return self._read_through(
            ForecastKind.CURRENT_WEATHER,
            cache_key(location),
            location,
            lambda scenario: scenario.current_weather,
            lambda: normalize_current(self.provider.fetch_current(location.lat, location.lng)),
        )

    def get_hourly_forecast_for_day(self, location: Location, date: str) -> List[HourlyForecast]:
        """Hourly records for one local calendar day at ``location``."""
        validate_location(location)
        validate_date(date)
        hours = self._read_through(
            ForecastKind.HOURLY_FORECAST_BY_DATE,
            cache_key_for_date(location, date),
            location,
            lambda scenario: synthesize_hourly_for_day(scenario, date),
            lambda: hourly_for_local_day(
                self.provider.fetch_hourly(location.lat, location.lng), date
            ),
        )
        return list(hours)

    def get_daily_forecast(self, location: Location) -> List[DailyForecast]:
        validate_location(location)
        days = self._read_through(
            ForecastKind.DAILY_FORECAST,
            cache_key(location),
            location,
            lambda scenario: scenario.daily_forecast[:MAX_DAILY_ENTRIES],
            lambda: normalize_daily(self.provider.fetch_daily(location.lat, location.lng)),
        )
        return list(days)

    def set_dev_mode(self, **changes: Any) -> None:
        self.dev_mode.set_mode(**changes)
        logger.info(
            "Dev mode updated",
            extra={"mode": self.dev_mode.current_config().mode.value, "task": "dev_mode"},
        )

    def get_dev_mode(self) -> DevModeConfig:
        return self.dev_mode.current_config()

    def get_available_scenarios(self) -> List[ScenarioSummary]:
        return self.dev_mode.available_scenarios()

    def clear(self) -> None:
        self.cache.clear()

    def get_cache_stats(self) -> Dict[str, Dict[str, int]]:
        return self.cache.stats()
