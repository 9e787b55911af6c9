"""
Static table of mock weather scenarios used in mock mode.

Each scenario is a fully populated bundle (current conditions, a 24 hour
template and up to 7 days) so the UI can be exercised against weather
extremes without touching the network.
"""
import math
import time
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from dateutil import tz

from .models import (
    CurrentWeather,
    DailyForecast,
    HourlyForecast,
    Location,
    MockScenario,
    ScenarioSummary,
)
from .normalize import round_half_up

DEFAULT_SCENARIO_ID = "normal-chicago"

_NOW = int(time.time())
_HOUR = 3600
_DAY = 86400


def _day_string(offset_days: int, zone_name: str) -> str:
    """Local calendar date in ``zone_name``, ``offset_days`` after today."""
    today = datetime.fromtimestamp(_NOW, tz=tz.gettz(zone_name)).date()
    return (today + timedelta(days=offset_days)).strftime("%Y-%m-%d")


def _hours(count: int, build: Callable[[int], dict]) -> List[HourlyForecast]:
    return [HourlyForecast(timestamp=_NOW + i * _HOUR, **build(i)) for i in range(count)]


def _days(
    count: int, zone_name: str, build: Callable[[int], dict]
) -> List[DailyForecast]:
    return [
        DailyForecast(date=_day_string(i, zone_name), timestamp=_NOW + i * _DAY, **build(i))
        for i in range(count)
    ]


_CHICAGO_DESCRIPTIONS = [
    ("partly cloudy", "02d"),
    ("sunny", "01d"),
    ("cloudy", "04d"),
    ("light rain", "10d"),
    ("sunny", "01d"),
    ("partly cloudy", "02d"),
    ("clear sky", "01d"),
]


def _normal_chicago() -> MockScenario:
    return MockScenario(
        id="normal-chicago",
        name="Normal Chicago Weather",
        description="Typical Chicago weather with complete data",
        location=Location(lat=41.8781, lng=-87.6298, name="Chicago, IL"),
        timezone="America/Chicago",
        current_weather=CurrentWeather(
            temperature=72,
            feels_like=75,
            humidity=65,
            pressure=1013,
            wind_speed=8,
            wind_direction=180,
            visibility=10,
            uv_index=3,
            description="partly cloudy",
            icon="02d",
            timestamp=_NOW,
        ),
        hourly_forecast=_hours(
            24,
            lambda i: dict(
                temperature=round_half_up(72 + math.sin(i * 0.3) * 10),
                feels_like=round_half_up(75 + math.sin(i * 0.3) * 10),
                humidity=round_half_up(65 + math.cos(i * 0.2) * 15),
                precipitation_probability=round_half_up(max(0, math.sin(i * 0.4) * 30)),
                precipitation_intensity=0,
                wind_speed=round_half_up(8 + math.cos(i * 0.1) * 5),
                wind_direction=round_half_up(180 + math.sin(i * 0.1) * 45),
                description="partly cloudy" if i < 12 else "clear sky",
                icon="02d" if i < 12 else "01n",
            ),
        ),
        daily_forecast=_days(
            7,
            "America/Chicago",
            lambda i: dict(
                temperature_high=round_half_up(78 + math.sin(i * 0.5) * 8),
                temperature_low=round_half_up(58 + math.sin(i * 0.5) * 6),
                precipitation_probability=round_half_up(max(0, math.sin(i * 0.7) * 40)),
                precipitation_intensity=0,
                wind_speed=round_half_up(8 + math.cos(i * 0.3) * 4),
                wind_direction=round_half_up(180 + math.sin(i * 0.2) * 30),
                humidity=round_half_up(65 + math.cos(i * 0.4) * 10),
                uv_index=round(3 + math.sin(i * 0.6) * 2, 1),
                description=_CHICAGO_DESCRIPTIONS[i][0],
                icon=_CHICAGO_DESCRIPTIONS[i][1],
            ),
        ),
    )


def _extreme_heat() -> MockScenario:
    return MockScenario(
        id="extreme-heat",
        name="Extreme Heat Wave",
        description="Desert-like conditions with extreme temperatures",
        location=Location(lat=36.1699, lng=-115.1398, name="Las Vegas, NV"),
        timezone="America/Los_Angeles",
        current_weather=CurrentWeather(
            temperature=118,
            feels_like=125,
            humidity=8,
            pressure=1008,
            wind_speed=15,
            wind_direction=225,
            visibility=5,
            uv_index=11,
            description="clear sky",
            icon="01d",
            timestamp=_NOW,
        ),
        hourly_forecast=_hours(
            24,
            lambda i: dict(
                temperature=round_half_up(110 + math.sin(i * 0.26) * 8),
                feels_like=round_half_up(120 + math.sin(i * 0.26) * 10),
                humidity=round_half_up(8 + abs(math.sin(i * 0.3) * 5)),
                precipitation_probability=0,
                precipitation_intensity=0,
                wind_speed=round_half_up(12 + math.cos(i * 0.2) * 8),
                wind_direction=round_half_up(225 + math.sin(i * 0.15) * 30),
                description="clear sky",
                icon="01d" if 6 <= i <= 18 else "01n",
            ),
        ),
        daily_forecast=_days(
            7,
            "America/Los_Angeles",
            lambda i: dict(
                temperature_high=round_half_up(118 + math.sin(i * 0.3) * 5),
                temperature_low=round_half_up(95 + math.sin(i * 0.3) * 8),
                precipitation_probability=0,
                precipitation_intensity=0,
                wind_speed=round_half_up(15 + math.cos(i * 0.2) * 5),
                wind_direction=round_half_up(225 + math.sin(i * 0.1) * 20),
                humidity=round_half_up(8 + abs(math.sin(i * 0.4) * 5)),
                uv_index=11,
                description="clear sky",
                icon="01d",
            ),
        ),
    )


def _extreme_cold() -> MockScenario:
    return MockScenario(
        id="extreme-cold",
        name="Arctic Blast",
        description="Sub-zero temperatures with wind chill",
        location=Location(lat=64.8378, lng=-147.7164, name="Fairbanks, AK"),
        timezone="America/Anchorage",
        current_weather=CurrentWeather(
            temperature=-25,
            feels_like=-45,
            humidity=78,
            pressure=1035,
            wind_speed=25,
            wind_direction=350,
            visibility=2,
            uv_index=0,
            description="snow",
            icon="13d",
            timestamp=_NOW,
        ),
        hourly_forecast=_hours(
            24,
            lambda i: dict(
                temperature=round_half_up(-20 + math.sin(i * 0.1) * 8),
                feels_like=round_half_up(-40 + math.sin(i * 0.1) * 12),
                humidity=round_half_up(75 + math.cos(i * 0.2) * 10),
                precipitation_probability=85,
                precipitation_intensity=0.5,
                wind_speed=round_half_up(20 + math.cos(i * 0.15) * 10),
                wind_direction=round_half_up(350 + math.sin(i * 0.1) * 20),
                description="heavy snow",
                icon="13d",
            ),
        ),
        daily_forecast=_days(
            7,
            "America/Anchorage",
            lambda i: dict(
                temperature_high=round_half_up(-15 + math.sin(i * 0.2) * 5),
                temperature_low=round_half_up(-35 + math.sin(i * 0.2) * 8),
                precipitation_probability=85,
                precipitation_intensity=0.5,
                wind_speed=round_half_up(25 + math.cos(i * 0.15) * 8),
                wind_direction=round_half_up(350 + math.sin(i * 0.1) * 15),
                humidity=round_half_up(80 + math.cos(i * 0.3) * 10),
                uv_index=0,
                description="heavy snow",
                icon="13d",
            ),
        ),
    )


def _hurricane() -> MockScenario:
    return MockScenario(
        id="hurricane",
        name="Hurricane Conditions",
        description="Severe storm with high winds and heavy rain",
        location=Location(lat=25.7617, lng=-80.1918, name="Miami, FL"),
        timezone="America/New_York",
        current_weather=CurrentWeather(
            temperature=78,
            feels_like=85,
            humidity=95,
            pressure=950,
            wind_speed=85,
            wind_direction=90,
            visibility=1,
            uv_index=0,
            description="heavy intensity rain",
            icon="10d",
            timestamp=_NOW,
        ),
        hourly_forecast=_hours(
            24,
            lambda i: dict(
                temperature=round_half_up(76 + math.sin(i * 0.2) * 4),
                feels_like=round_half_up(85 + math.sin(i * 0.2) * 6),
                humidity=round_half_up(92 + math.cos(i * 0.3) * 5),
                precipitation_probability=100,
                precipitation_intensity=round(15 + math.cos(i * 0.4) * 8, 2),
                wind_speed=round_half_up(75 + math.sin(i * 0.25) * 15),
                wind_direction=round_half_up(90 + math.sin(i * 0.1) * 60),
                description="heavy intensity rain",
                icon="10d",
            ),
        ),
        daily_forecast=_days(
            7,
            "America/New_York",
            lambda i: dict(
                temperature_high=round_half_up(82 + math.sin(i * 0.3) * 3),
                temperature_low=round_half_up(72 + math.sin(i * 0.3) * 3),
                precipitation_probability=100,
                precipitation_intensity=round(12 + math.cos(i * 0.4) * 5, 2),
                wind_speed=round_half_up(85 + math.sin(i * 0.2) * 10),
                wind_direction=round_half_up(90 + math.sin(i * 0.1) * 40),
                humidity=round_half_up(95 + math.cos(i * 0.2) * 3),
                uv_index=0,
                description="heavy intensity rain",
                icon="10d",
            ),
        ),
    )


def _missing_data() -> MockScenario:
    # Sparse on purpose: 8 hourly records, 3 days, blank descriptions
    return MockScenario(
        id="missing-data",
        name="Incomplete Data",
        description="API response with missing or null fields",
        location=Location(lat=0, lng=0, name="Unknown Location"),
        timezone="UTC",
        current_weather=CurrentWeather(
            temperature=68,
            feels_like=68,
            humidity=0,
            pressure=0,
            wind_speed=0,
            wind_direction=0,
            visibility=0,
            uv_index=0,
            description="unknown",
            icon="",
            timestamp=_NOW,
        ),
        hourly_forecast=_hours(
            8,
            lambda i: dict(
                temperature=65 + i * 2,
                feels_like=65 + i * 2,
                humidity=0,
                precipitation_probability=0,
                precipitation_intensity=0,
                wind_speed=0,
                wind_direction=0,
                description="",
                icon="",
            ),
        ),
        daily_forecast=_days(
            3,
            "UTC",
            lambda i: dict(
                temperature_high=70 + i * 5 if i < 2 else 0,
                temperature_low=50 + i * 3 if i < 2 else 0,
                precipitation_probability=0,
                precipitation_intensity=0,
                wind_speed=0,
                wind_direction=0,
                humidity=0,
                uv_index=0,
                description="unknown" if i == 0 else "",
                icon="",
            ),
        ),
    )


MOCK_SCENARIOS: List[MockScenario] = [
    _normal_chicago(),
    _extreme_heat(),
    _extreme_cold(),
    _hurricane(),
    _missing_data(),
]

_BY_ID: Dict[str, MockScenario] = {scenario.id: scenario for scenario in MOCK_SCENARIOS}


def get_scenario(scenario_id: str) -> Optional[MockScenario]:
    return _BY_ID.get(scenario_id)


def scenario_summaries() -> List[ScenarioSummary]:
    """Id, name and description of every scenario, without the payloads."""
    return [scenario.summary() for scenario in MOCK_SCENARIOS]
