"""
Tests for Prometheus metrics collection.
"""
from unittest.mock import Mock

import requests
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from conftest import FakeClock
from api.main import create_app
from forecast_core.cache import create_forecast_cache
from forecast_core.config import Settings
from forecast_core.dev_mode import DevModeConfig, DevModeSelector, OperatingMode
from forecast_core.geocoding import GeocodingService
from forecast_core.location_storage import LocationStorageService
from forecast_core.provider import WeatherProviderBase
from forecast_core.service import ForecastService
from utils.metrics import set_app_info


def sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestPrometheusMetrics:
    def setup_method(self):
        self.provider = Mock(spec=WeatherProviderBase)
        self.service = ForecastService(
            provider=self.provider,
            cache=create_forecast_cache(clock=FakeClock()),
            dev_mode=DevModeSelector(DevModeConfig(mode=OperatingMode.CACHE_FIRST)),
        )
        app = create_app(
            settings=Settings(env="test"),
            service=self.service,
            geocoder=Mock(spec=GeocodingService),
            location_storage=LocationStorageService({}),
        )
        self.client = TestClient(app)

    def test_metrics_endpoint_format(self):
        response = self.client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert "# HELP" in response.text
        assert "# TYPE" in response.text
        assert "weatherdash_requests_total" in response.text

    def test_app_info(self):
        set_app_info(version="1.0.0", environment="test")

        assert "weatherdash_app_info_info" in self.client.get("/metrics").text

    def test_health_check_counter(self):
        before = sample("weatherdash_health_checks_total", status="ok")

        self.client.get("/health")

        assert sample("weatherdash_health_checks_total", status="ok") == before + 1

    def test_request_counter_collapses_path_parameters(self, current_payload):
        self.provider.fetch_current.return_value = current_payload
        labels = dict(method="GET", endpoint="/api/weather/current", status_code="200")
        before = sample("weatherdash_requests_total", **labels)

        self.client.get("/api/weather/current/41.8781/-87.6298")
        self.client.get("/api/weather/current/40.7128/-74.0060")

        assert sample("weatherdash_requests_total", **labels) == before + 2

    def test_metrics_endpoint_not_counted(self):
        labels = dict(method="GET", endpoint="/metrics", status_code="200")
        before = sample("weatherdash_requests_total", **labels)

        self.client.get("/metrics")

        assert sample("weatherdash_requests_total", **labels) == before

    def test_forecast_read_sources(self, daily_payload):
        self.provider.fetch_daily.return_value = daily_payload
        provider_before = sample(
            "weatherdash_forecast_reads_total", kind="dailyForecast", source="provider"
        )
        cache_before = sample(
            "weatherdash_forecast_reads_total", kind="dailyForecast", source="cache"
        )

        self.client.get("/api/weather/daily/41.8781/-87.6298")
        self.client.get("/api/weather/daily/41.8781/-87.6298")

        assert sample(
            "weatherdash_forecast_reads_total", kind="dailyForecast", source="provider"
        ) == provider_before + 1
        assert sample(
            "weatherdash_forecast_reads_total", kind="dailyForecast", source="cache"
        ) == cache_before + 1

    def test_provider_error_metrics(self):
        self.provider.fetch_current.side_effect = requests.Timeout("timed out")
        calls_before = sample(
            "weatherdash_provider_calls_total", kind="currentWeather", status="error"
        )
        errors_before = sample("weatherdash_errors_total", error_type="fetch_failed")
        duration_before = sample(
            "weatherdash_provider_call_duration_seconds_count", kind="currentWeather"
        )

        response = self.client.get("/api/weather/current/41.8781/-87.6298")

        assert response.status_code == 502
        assert sample(
            "weatherdash_provider_calls_total", kind="currentWeather", status="error"
        ) == calls_before + 1
        assert sample("weatherdash_errors_total", error_type="fetch_failed") == errors_before + 1
        assert sample(
            "weatherdash_provider_call_duration_seconds_count", kind="currentWeather"
        ) == duration_before + 1
