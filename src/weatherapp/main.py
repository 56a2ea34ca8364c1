from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from .adapters.weather import OpenMeteoWeatherAdapter, WeatherAdapterError
from .domain.freshness import is_stale
from .domain.models import UnitPreferences
from .domain.view import WeatherView, build_weather_view
from .location.service import LocationService
from .scheduler import build_scheduler, run_weather_refresh_job
from .services.weather import WeatherService
from .settings import AppSettings, load_settings
from .storage.db import initialize_database
from .storage.preferences import load_preferences, save_preferences

LOGGER = logging.getLogger(__name__)


def _get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _get_service(request: Request) -> WeatherService:
    return request.app.state.weather_service


def _get_locations(request: Request) -> LocationService:
    return request.app.state.locations


def _get_preferences(request: Request) -> UnitPreferences:
    return request.app.state.preferences


def _build_weather_service(settings: AppSettings) -> WeatherService:
    provider = settings.yaml.weather.provider
    if provider != "open_meteo":
        raise ValueError(f"Unsupported weather provider: {provider}")
    adapter = OpenMeteoWeatherAdapter(
        forecast_days=settings.yaml.weather.forecast_days,
        past_days=settings.yaml.weather.past_days,
    )
    return WeatherService(adapter, cooldown=settings.cooldown, db_path=settings.db_path)


@asynccontextmanager
async def lifespan(application: FastAPI):
    settings = load_settings()
    initialize_database(settings.db_path)
    preferences = load_preferences(settings.db_path, settings.yaml.preferences)
    service = _build_weather_service(settings)
    locations = LocationService(settings.db_path, language=preferences.locale)

    scheduler = None
    if settings.yaml.refresh.enabled:
        run_weather_refresh_job(settings, service, locations)
        scheduler = build_scheduler(settings, service, locations)
        scheduler.start()

    application.state.settings = settings
    application.state.preferences = preferences
    application.state.weather_service = service
    application.state.locations = locations
    application.state.scheduler = scheduler
    application.state.started_at_utc = datetime.now(timezone.utc)

    try:
        yield
    finally:
        if scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=False)


app = FastAPI(title="Weather App", version="0.1.0", lifespan=lifespan)


@app.get("/health", response_class=JSONResponse)
async def health(request: Request) -> JSONResponse:
    settings = _get_settings(request)
    service = _get_service(request)
    scheduler = request.app.state.scheduler
    snapshot = service.current
    location = service.location

    snapshot_info = None
    if snapshot is not None:
        snapshot_info = {
            "location_label": location.label if location is not None else None,
            "observed_at": snapshot.current.timestamp.isoformat(),
            "timezone": snapshot.timezone_name,
            "is_stale": is_stale(snapshot, snapshot.local_now(), service.cooldown),
        }

    return JSONResponse(
        {
            "status": "ok",
            "service": "weatherapp",
            "environment": settings.env.weatherapp_env,
            "timezone": settings.env.weatherapp_timezone,
            "scheduler_running": bool(scheduler is not None and scheduler.running),
            "cooldown_minutes": settings.yaml.weather.cooldown_minutes,
            "snapshot": snapshot_info,
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        }
    )


@app.get("/weather", response_model=WeatherView)
def weather(
    request: Request,
    city: str | None = None,
    selected_day: int | None = Query(default=None, ge=0),
) -> WeatherView:
    settings = _get_settings(request)
    locations = _get_locations(request)

    if city is not None and city.strip():
        location = locations.resolve_city(city)
    else:
        location = locations.resolve(settings.yaml.location)
    if location is None:
        raise HTTPException(status_code=404, detail="Location unavailable")

    try:
        snapshot = _get_service(request).get_weather(location)
    except WeatherAdapterError as exc:
        LOGGER.warning("Weather request for '%s' failed: %s", location.label, exc)
        raise HTTPException(status_code=502, detail="Weather provider unavailable") from exc

    try:
        return build_weather_view(
            snapshot,
            _get_preferences(request),
            now=snapshot.local_now(),
            location_label=location.label,
            selected_day=selected_day,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.get("/preferences", response_model=UnitPreferences)
async def get_preferences(request: Request) -> UnitPreferences:
    return _get_preferences(request)


@app.put("/preferences", response_model=UnitPreferences)
def apply_preferences(request: Request, preferences: UnitPreferences) -> UnitPreferences:
    settings = _get_settings(request)
    save_preferences(settings.db_path, preferences)
    request.app.state.preferences = preferences
    _get_locations(request).language = preferences.locale
    return preferences
