"""
Prometheus metrics for the weather dashboard API and forecast core.
"""
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Histogram,
    Info,
    generate_latest,
)

# Application info metric
app_info = Info(
    "weatherdash_app_info",
    "Application information for the weather dashboard",
)

# Request metrics
request_counter = Counter(
    "weatherdash_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"],
)

request_duration = Histogram(
    "weatherdash_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Forecast reads by where the answer came from (mock, cache, provider, offline_miss)
forecast_read_counter = Counter(
    "weatherdash_forecast_reads_total",
    "Forecast reads by kind and source",
    ["kind", "source"],
)

# Remote provider metrics
provider_call_counter = Counter(
    "weatherdash_provider_calls_total",
    "Total number of weather provider calls",
    ["kind", "status"],
)

provider_call_duration = Histogram(
    "weatherdash_provider_call_duration_seconds",
    "Weather provider call duration in seconds",
    ["kind"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)

# Error metrics
error_counter = Counter(
    "weatherdash_errors_total",
    "Total number of errors returned by the API",
    ["error_type"],
)

# Health metrics
health_check_counter = Counter(
    "weatherdash_health_checks_total",
    "Total number of health check requests",
    ["status"],
)


def set_app_info(version: str, environment: str = "production"):
    """Set application information."""
    app_info.info(
        {"version": version, "environment": environment, "application": "weather-dash"}
    )


def get_metrics() -> bytes:
    """Get all metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    """Get the content type for Prometheus metrics."""
    return CONTENT_TYPE_LATEST
