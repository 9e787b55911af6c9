"""
Shared fixtures: a controllable clock and One Call payload builders.
"""
import pytest

# 2022-01-02T00:00:00 America/Chicago (CST, UTC-6)
CHICAGO_MIDNIGHT_JAN_2 = 1641103200
# 2022-01-02T00:00:00Z
UTC_MIDNIGHT_JAN_2 = 1641081600


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, now: int = 1_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def conditions(description="clear sky", icon="01d"):
    return [{"id": 800, "main": "Clear", "description": description, "icon": icon}]


def hourly_record(dt, temp=30.5, pop=0.2, **overrides):
    record = {
        "dt": dt,
        "temp": temp,
        "feels_like": 25.2,
        "humidity": 70,
        "pop": pop,
        "wind_speed": 10.4,
        "wind_deg": 200,
        "weather": conditions("light snow", "13n"),
    }
    record.update(overrides)
    return record


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def current_payload():
    return {
        "lat": 41.8781,
        "lon": -87.6298,
        "timezone": "America/Chicago",
        "timezone_offset": -21600,
        "current": {
            "dt": 1641081600,
            "temp": 72.4,
            "feels_like": 74.5,
            "humidity": 65,
            "pressure": 1013,
            "wind_speed": 8.6,
            "wind_deg": 180,
            "visibility": 10000,
            "uvi": 3.2,
            "weather": conditions("partly cloudy", "02d"),
        },
    }


@pytest.fixture
def hourly_payload():
    """72 hours starting at 2022-01-01 12:00 Chicago time."""
    start = CHICAGO_MIDNIGHT_JAN_2 - 12 * 3600
    return {
        "lat": 41.8781,
        "lon": -87.6298,
        "timezone": "America/Chicago",
        "timezone_offset": -21600,
        "hourly": [hourly_record(start + i * 3600) for i in range(72)],
    }


@pytest.fixture
def daily_payload():
    """Eight days, each stamped at local noon starting 2022-01-02."""
    noon = CHICAGO_MIDNIGHT_JAN_2 + 12 * 3600
    return {
        "lat": 41.8781,
        "lon": -87.6298,
        "timezone": "America/Chicago",
        "timezone_offset": -21600,
        "daily": [
            {
                "dt": noon + i * 86400,
                "temp": {"min": 20.4, "max": 35.6, "day": 30.0},
                "feels_like": {"day": 25.0},
                "humidity": 60,
                "pop": 0.47,
                "rain": 1.2,
                "wind_speed": 12.5,
                "wind_deg": 270,
                "uvi": 1.5,
                "weather": conditions("light rain", "10d"),
            }
            for i in range(8)
        ],
    }
