"""
FastAPI application exposing the forecast core to the dashboard UI.
"""
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Callable, List, Optional

import requests
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from forecast_core.config import Settings, load_settings
from forecast_core.dev_mode import DevModeConfig, DevModeSelector, OperatingMode, default_dev_mode_config
from forecast_core.errors import (
    GeocodingError,
    InvalidDateError,
    InvalidLocationError,
    MalformedPayloadError,
    NoCachedDataError,
    ProviderNotConfiguredError,
    UnknownScenarioError,
)
from forecast_core.geocoding import GeocodingService
from forecast_core.location_storage import JsonFileStore, LocationStorageService
from forecast_core.models import (
    CurrentWeather,
    DailyForecast,
    HourlyForecast,
    Location,
    LocationSearchResult,
    RecentLocation,
    ScenarioSummary,
)
from forecast_core.provider import OpenWeatherProvider
from forecast_core.service import ForecastService
from utils.metrics import (
    error_counter,
    get_content_type,
    get_metrics,
    health_check_counter,
    request_counter,
    request_duration,
    set_app_info,
)

from .logging_config import log_request, setup_logging
from .security import verify_api_key_header

APP_VERSION = "1.0.0"

logger = logging.getLogger(__name__)

# Metric labels collapse the dynamic path segments of these routes
ENDPOINT_PREFIXES = [
    "/api/weather/current",
    "/api/weather/hourly",
    "/api/weather/daily",
    "/api/locations/reverse",
]


class HealthResponse(BaseModel):
    ok: bool


class ErrorResponse(BaseModel):
    error: str
    hint: str


class DevModeUpdate(BaseModel):
    mode: Optional[OperatingMode] = None
    scenario_id: Optional[str] = None
    logging: Optional[bool] = None


def build_forecast_service(settings: Settings) -> ForecastService:
    provider = OpenWeatherProvider(
        api_key=settings.openweather_api_key,
        base_url=settings.openweather_base_url,
        timeout=settings.request_timeout,
    )
    return ForecastService(
        provider=provider,
        dev_mode=DevModeSelector(default_dev_mode_config(settings)),
    )


def build_location_storage(settings: Settings) -> LocationStorageService:
    if settings.location_store_path:
        return LocationStorageService(JsonFileStore(settings.location_store_path))
    return LocationStorageService()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan event handler."""
    settings: Settings = app.state.settings
    logger.info("Weather dashboard API starting up")

    config = app.state.forecast_service.get_dev_mode()
    logger.info(
        f"Configuration: ENV={settings.env}, mode={config.mode.value}, "
        f"scenario={config.scenario_id}"
    )
    if settings.openweather_api_key:
        logger.info("OPENWEATHER_API_KEY is configured")
    else:
        logger.warning("OPENWEATHER_API_KEY is not set; live fetches will fail")

    set_app_info(version=APP_VERSION, environment=settings.env)

    yield

    logger.info("Weather dashboard API shut down")


def get_forecast_service(request: Request) -> ForecastService:
    return request.app.state.forecast_service


def get_geocoder(request: Request) -> GeocodingService:
    return request.app.state.geocoder


def get_location_storage(request: Request) -> LocationStorageService:
    return request.app.state.location_storage


def _timed(task: str, operation: Callable[[], Any]) -> Any:
    """Run one weather operation and log its outcome with timing."""
    request_id = str(uuid.uuid4())
    start_time = time.time()
    try:
        result = operation()
    except Exception as e:
        duration_ms = int((time.time() - start_time) * 1000)
        log_request(logger, request_id, task, duration_ms, "error", f"{task} failed: {e}")
        raise
    duration_ms = int((time.time() - start_time) * 1000)
    log_request(logger, request_id, task, duration_ms, "success", f"{task} completed")
    return result


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    health_check_counter.labels(status="ok").inc()
    return HealthResponse(ok=True)


@router.get("/metrics")
async def metrics_endpoint():
    """Prometheus metrics endpoint."""
    return Response(content=get_metrics(), media_type=get_content_type())


@router.get("/api/weather/current/{lat}/{lng}", response_model=CurrentWeather)
async def current_weather(
    lat: float, lng: float, service: ForecastService = Depends(get_forecast_service)
):
    location = Location(lat=lat, lng=lng)
    return _timed("current_weather", lambda: service.get_current_weather(location))


@router.get("/api/weather/hourly/{lat}/{lng}/{date}", response_model=List[HourlyForecast])
async def hourly_forecast(
    lat: float,
    lng: float,
    date: str,
    service: ForecastService = Depends(get_forecast_service),
):
    location = Location(lat=lat, lng=lng)
    return _timed(
        "hourly_forecast", lambda: service.get_hourly_forecast_for_day(location, date)
    )


@router.get("/api/weather/daily/{lat}/{lng}", response_model=List[DailyForecast])
async def daily_forecast(
    lat: float, lng: float, service: ForecastService = Depends(get_forecast_service)
):
    location = Location(lat=lat, lng=lng)
    return _timed("daily_forecast", lambda: service.get_daily_forecast(location))


@router.get("/api/dev-mode", response_model=DevModeConfig)
async def get_dev_mode(service: ForecastService = Depends(get_forecast_service)):
    return service.get_dev_mode()


@router.put("/api/dev-mode", response_model=DevModeConfig)
async def update_dev_mode(
    update: DevModeUpdate,
    service: ForecastService = Depends(get_forecast_service),
    api_key: Optional[str] = Depends(verify_api_key_header),
):
    service.set_dev_mode(**update.model_dump(exclude_none=True))
    return service.get_dev_mode()


@router.get("/api/dev-mode/scenarios", response_model=List[ScenarioSummary])
async def list_scenarios(service: ForecastService = Depends(get_forecast_service)):
    return service.get_available_scenarios()


@router.get("/api/cache")
async def cache_stats(service: ForecastService = Depends(get_forecast_service)):
    return service.get_cache_stats()


@router.delete("/api/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(
    service: ForecastService = Depends(get_forecast_service),
    api_key: Optional[str] = Depends(verify_api_key_header),
):
    service.clear()
    logger.info("Forecast cache cleared", extra={"task": "cache_clear"})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/api/locations/search", response_model=List[LocationSearchResult])
async def search_locations(
    q: str = Query(..., min_length=1, max_length=200, pattern=r"\S"),
    limit: int = Query(5, ge=1, le=20),
    countrycodes: Optional[str] = None,
    language: Optional[str] = None,
    geocoder: GeocodingService = Depends(get_geocoder),
):
    return geocoder.search_locations(q, limit=limit, countrycodes=countrycodes, language=language)


@router.get("/api/locations/reverse/{lat}/{lng}", response_model=LocationSearchResult)
async def reverse_geocode(
    lat: float, lng: float, geocoder: GeocodingService = Depends(get_geocoder)
):
    return geocoder.reverse_geocode(lat, lng)


@router.get("/api/locations/current", response_model=Optional[Location])
async def get_current_location(
    storage: LocationStorageService = Depends(get_location_storage),
):
    return storage.get_current_location()


@router.put("/api/locations/current", response_model=Location)
async def set_current_location(
    location: Location, storage: LocationStorageService = Depends(get_location_storage)
):
    storage.set_current_location(location)
    return location


@router.get("/api/locations/recent", response_model=List[RecentLocation])
async def get_recent_locations(
    storage: LocationStorageService = Depends(get_location_storage),
):
    return storage.get_recent_locations()


@router.post("/api/locations/recent", response_model=List[RecentLocation])
async def add_recent_location(
    location: Location, storage: LocationStorageService = Depends(get_location_storage)
):
    storage.add_recent_location(location)
    return storage.get_recent_locations()


def _error_response(status_code: int, error: str, hint: str) -> JSONResponse:
    error_counter.labels(error_type=error).inc()
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, hint=hint).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Custom HTTP exception handler for consistent error responses."""
        if isinstance(exc.detail, dict):
            content = exc.detail
        else:
            content = {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(InvalidLocationError)
    @app.exception_handler(InvalidDateError)
    async def invalid_request_handler(request: Request, exc: ValueError):
        return _error_response(status.HTTP_400_BAD_REQUEST, "invalid_request", str(exc))

    @app.exception_handler(UnknownScenarioError)
    async def unknown_scenario_handler(request: Request, exc: UnknownScenarioError):
        return _error_response(status.HTTP_400_BAD_REQUEST, "unknown_scenario", str(exc))

    @app.exception_handler(NoCachedDataError)
    async def no_cached_data_handler(request: Request, exc: NoCachedDataError):
        return _error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE, "no_cached_data", str(exc)
        )

    @app.exception_handler(MalformedPayloadError)
    @app.exception_handler(requests.RequestException)
    async def fetch_failed_handler(request: Request, exc: Exception):
        logger.error(f"Weather provider request failed: {exc}")
        return _error_response(
            status.HTTP_502_BAD_GATEWAY, "fetch_failed", "Failed to fetch weather data"
        )

    @app.exception_handler(ProviderNotConfiguredError)
    async def provider_not_configured_handler(
        request: Request, exc: ProviderNotConfiguredError
    ):
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "provider_not_configured", str(exc)
        )

    @app.exception_handler(GeocodingError)
    async def geocoding_failed_handler(request: Request, exc: GeocodingError):
        return _error_response(status.HTTP_502_BAD_GATEWAY, "geocoding_failed", str(exc))


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[ForecastService] = None,
    geocoder: Optional[GeocodingService] = None,
    location_storage: Optional[LocationStorageService] = None,
) -> FastAPI:
    """Build the API around explicitly constructed core services."""
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Weather Dash API",
        description="Cached forecasts, mock scenarios and saved locations",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.forecast_service = service or build_forecast_service(settings)
    app.state.geocoder = geocoder or GeocodingService(base_url=settings.nominatim_base_url)
    app.state.location_storage = location_storage or build_location_storage(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Collect Prometheus metrics for HTTP requests."""
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        path = request.url.path
        endpoint = next((p for p in ENDPOINT_PREFIXES if path.startswith(p)), path)

        request_counter.labels(
            method=request.method, endpoint=endpoint, status_code=response.status_code
        ).inc()
        request_duration.labels(method=request.method, endpoint=endpoint).observe(duration)

        return response

    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=app.state.settings.port,
        log_level="info",
        reload=False,
    )
