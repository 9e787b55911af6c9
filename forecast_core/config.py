"""
Environment-driven settings.
"""
import os
from dataclasses import dataclass
from typing import Optional

ONECALL_URL = "https://api.openweathermap.org/data/3.0/onecall"
NOMINATIM_URL = "https://nominatim.openstreetmap.org"


@dataclass(frozen=True)
class Settings:
    openweather_api_key: str = ""
    openweather_base_url: str = ONECALL_URL
    request_timeout: float = 15.0
    env: str = "local"
    dev_mode: Optional[str] = None
    mock_scenario: Optional[str] = None
    log_level: str = "INFO"
    api_key: Optional[str] = None
    location_store_path: Optional[str] = None
    nominatim_base_url: str = NOMINATIM_URL
    port: int = 8000

    @property
    def is_local(self) -> bool:
        return self.env == "local"


def load_settings() -> Settings:
    """Build settings from environment variables."""
    return Settings(
        openweather_api_key=os.getenv("OPENWEATHER_API_KEY", ""),
        openweather_base_url=os.getenv("OPENWEATHER_BASE_URL", ONECALL_URL),
        request_timeout=float(os.getenv("WEATHER_REQUEST_TIMEOUT", "15")),
        env=os.getenv("ENV", "local"),
        dev_mode=os.getenv("WEATHER_DEV_MODE") or None,
        mock_scenario=os.getenv("WEATHER_MOCK_SCENARIO") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        api_key=os.getenv("API_KEY") or None,
        location_store_path=os.getenv("LOCATION_STORE_PATH") or None,
        nominatim_base_url=os.getenv("NOMINATIM_BASE_URL", NOMINATIM_URL),
        port=int(os.getenv("PORT", "8000")),
    )
