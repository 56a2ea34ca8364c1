from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from .adapters.weather import WeatherAdapterError
from .location.service import LocationService
from .services.weather import WeatherService
from .settings import AppSettings
from .storage.cache import prune_expired_entries

LOGGER = logging.getLogger(__name__)

CACHE_PRUNE_INTERVAL_MINUTES = 60


def run_weather_refresh_job(
    settings: AppSettings,
    service: WeatherService,
    locations: LocationService,
) -> None:
    location = locations.resolve(settings.yaml.location)
    if location is None:
        LOGGER.warning("Weather refresh skipped: no location available")
        return

    if not service.needs_update(location):
        LOGGER.debug("Weather refresh skipped: snapshot for '%s' is still fresh", location.label)
        return

    try:
        snapshot = service.get_weather(location)
    except WeatherAdapterError:
        LOGGER.exception("Weather refresh job failed")
        return

    LOGGER.info(
        "Weather refresh job updated snapshot for '%s' (observed %s)",
        location.label,
        snapshot.current.timestamp.isoformat(),
    )


def run_cache_prune_job(settings: AppSettings) -> None:
    removed = prune_expired_entries(settings.db_path)
    if removed:
        LOGGER.info("Cache prune job removed %d expired entries", removed)


def build_scheduler(
    settings: AppSettings,
    service: WeatherService,
    locations: LocationService,
) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone=settings.timezone)
    scheduler.add_job(
        run_weather_refresh_job,
        "interval",
        kwargs={"settings": settings, "service": service, "locations": locations},
        minutes=settings.yaml.refresh.interval_minutes,
        jitter=settings.yaml.refresh.jitter_seconds,
        id="weather_refresh_job",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=120,
    )
    scheduler.add_job(
        run_cache_prune_job,
        "interval",
        kwargs={"settings": settings},
        minutes=CACHE_PRUNE_INTERVAL_MINUTES,
        id="cache_prune_job",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=300,
    )
    return scheduler
