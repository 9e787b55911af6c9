"""
Reshape raw One Call payloads into the canonical forecast records.
"""
import math
from datetime import datetime, tzinfo
from typing import Any, List, Mapping, Optional

from dateutil import tz

from .errors import MalformedPayloadError
from .models import CurrentWeather, DailyForecast, HourlyForecast

MAX_DAILY_ENTRIES = 7


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def precipitation_percent(pop: Optional[float]) -> int:
    """Convert a [0, 1] probability into a whole-number percentage."""
    return round_half_up((pop or 0) * 100)


def _amount(value: Any) -> float:
    # hourly/current report {"1h": mm}, daily reports a bare number
    if isinstance(value, Mapping):
        value = value.get("1h")
    return float(value) if value else 0.0


def precipitation_intensity(record: Mapping[str, Any]) -> float:
    return _amount(record.get("rain")) or _amount(record.get("snow"))


def _condition(record: Mapping[str, Any]) -> Mapping[str, Any]:
    conditions = record["weather"]
    if not conditions:
        raise MalformedPayloadError("Empty weather condition list")
    return conditions[0]


def resolve_timezone(payload: Mapping[str, Any]) -> tzinfo:
    """Timezone of the forecast location: IANA name, then fixed offset, then UTC."""
    name = payload.get("timezone")
    if name:
        zone = tz.gettz(name)
        if zone is not None:
            return zone
    offset = payload.get("timezone_offset")
    if offset is not None:
        return tz.tzoffset(None, int(offset))
    return tz.UTC


def local_date(timestamp: int, zone: tzinfo) -> str:
    return datetime.fromtimestamp(timestamp, tz=zone).strftime("%Y-%m-%d")


def normalize_current(payload: Mapping[str, Any]) -> CurrentWeather:
    try:
        current = payload["current"]
        condition = _condition(current)
        return CurrentWeather(
            temperature=round_half_up(current["temp"]),
            feels_like=round_half_up(current["feels_like"]),
            humidity=current["humidity"],
            pressure=current["pressure"],
            wind_speed=round_half_up(current["wind_speed"]),
            wind_direction=current["wind_deg"],
            visibility=round_half_up(current.get("visibility", 0) / 1000),
            uv_index=current.get("uvi", 0),
            description=condition["description"],
            icon=condition["icon"],
            timestamp=current["dt"],
        )
    except (KeyError, TypeError, IndexError, ValueError) as e:
        raise MalformedPayloadError(f"Malformed current conditions payload: {e!r}") from e


def normalize_hour(hour: Mapping[str, Any]) -> HourlyForecast:
    condition = _condition(hour)
    return HourlyForecast(
        timestamp=hour["dt"],
        temperature=round_half_up(hour["temp"]),
        feels_like=round_half_up(hour["feels_like"]),
        humidity=hour["humidity"],
        precipitation_probability=precipitation_percent(hour.get("pop")),
        precipitation_intensity=precipitation_intensity(hour),
        wind_speed=round_half_up(hour["wind_speed"]),
        wind_direction=hour["wind_deg"],
        description=condition["description"],
        icon=condition["icon"],
    )


def hourly_for_local_day(payload: Mapping[str, Any], date: str) -> List[HourlyForecast]:
    """
    Hours of ``payload`` that fall on ``date`` in the location's own timezone.

    Provider timestamps are absolute (UTC epoch seconds); filtering on a UTC
    slice would leak hours from the neighbouring day whenever the local and
    UTC dates differ.
    """
    try:
        zone = resolve_timezone(payload)
        return [
            normalize_hour(hour)
            for hour in payload["hourly"]
            if local_date(hour["dt"], zone) == date
        ]
    except (KeyError, TypeError, IndexError, ValueError) as e:
        raise MalformedPayloadError(f"Malformed hourly payload: {e!r}") from e


def normalize_daily(payload: Mapping[str, Any]) -> List[DailyForecast]:
    try:
        zone = resolve_timezone(payload)
        days: List[DailyForecast] = []
        for day in payload["daily"][:MAX_DAILY_ENTRIES]:
            condition = _condition(day)
            days.append(
                DailyForecast(
                    date=local_date(day["dt"], zone),
                    timestamp=day["dt"],
                    temperature_high=round_half_up(day["temp"]["max"]),
                    temperature_low=round_half_up(day["temp"]["min"]),
                    precipitation_probability=precipitation_percent(day.get("pop")),
                    precipitation_intensity=precipitation_intensity(day),
                    wind_speed=round_half_up(day["wind_speed"]),
                    wind_direction=day["wind_deg"],
                    humidity=day["humidity"],
                    uv_index=day.get("uvi", 0),
                    description=condition["description"],
                    icon=condition["icon"],
                )
            )
        return days
    except (KeyError, TypeError, IndexError, ValueError) as e:
        raise MalformedPayloadError(f"Malformed daily payload: {e!r}") from e

