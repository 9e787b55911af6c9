"""
Data model shared by the cache, the orchestrator and the API.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
    name: str = ""


class RecentLocation(Location):
    last_used: int
    usage_count: int


class CurrentWeather(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature: int
    feels_like: int
    humidity: int
    pressure: int
    wind_speed: int
    wind_direction: int
    visibility: int
    uv_index: float
    description: str
    icon: str
    timestamp: int


class HourlyForecast(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int
    temperature: int
    feels_like: int
    humidity: int
    precipitation_probability: int
    precipitation_intensity: float
    wind_speed: int
    wind_direction: int
    description: str
    icon: str


class DailyForecast(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    timestamp: int
    temperature_high: int
    temperature_low: int
    precipitation_probability: int
    precipitation_intensity: float
    wind_speed: int
    wind_direction: int
    humidity: int
    uv_index: float
    description: str
    icon: str


class ScenarioSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str


class MockScenario(BaseModel):
    """Canned weather bundle used instead of live data in mock mode."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    location: Location
    timezone: str
    current_weather: CurrentWeather
    hourly_forecast: List[HourlyForecast]
    daily_forecast: List[DailyForecast]

    def summary(self) -> ScenarioSummary:
        return ScenarioSummary(id=self.id, name=self.name, description=self.description)


class LocationSearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
    name: str
    display_name: str
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    type: str = "address"
