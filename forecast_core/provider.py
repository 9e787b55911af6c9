"""
Weather data provider using the OpenWeatherMap One Call API.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from .config import ONECALL_URL
from .errors import ProviderNotConfiguredError

logger = logging.getLogger(__name__)


class WeatherProviderBase(ABC):
    """
    Remote source of raw forecast payloads.

    Implementations return the provider's JSON body untouched; reshaping is
    done by the orchestrator. Failures propagate to the caller as-is.
    """

    @abstractmethod
    def fetch_current(self, lat: float, lng: float) -> Dict[str, Any]:
        pass

    @abstractmethod
    def fetch_hourly(self, lat: float, lng: float) -> Dict[str, Any]:
        pass

    @abstractmethod
    def fetch_daily(self, lat: float, lng: float) -> Dict[str, Any]:
        pass


class OpenWeatherProvider(WeatherProviderBase):
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = ONECALL_URL,
        timeout: float = 15.0,
        units: str = "imperial",
    ):
        self.api_key = api_key or ""
        self.base_url = base_url
        self.timeout = timeout
        self.units = units

    def fetch_current(self, lat: float, lng: float) -> Dict[str, Any]:
        return self._onecall(lat, lng, exclude="minutely,alerts")

    def fetch_hourly(self, lat: float, lng: float) -> Dict[str, Any]:
        return self._onecall(lat, lng, exclude="current,minutely,daily,alerts")

    def fetch_daily(self, lat: float, lng: float) -> Dict[str, Any]:
        return self._onecall(lat, lng, exclude="current,minutely,hourly,alerts")

    def _onecall(self, lat: float, lng: float, exclude: str) -> Dict[str, Any]:
        """
        Issue one One Call request.

        Network, HTTP and JSON decoding errors are logged and re-raised
        unchanged; there is no retry here.
        """
        if not self.api_key:
            raise ProviderNotConfiguredError("OpenWeatherMap API key not configured")

        params = {
            "lat": lat,
            "lon": lng,
            "appid": self.api_key,
            "units": self.units,
            "exclude": exclude,
        }

        try:
            response = requests.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f"OpenWeatherMap API error: {e}")
            raise
