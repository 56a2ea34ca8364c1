from __future__ import annotations

import json
import logging
from http.client import HTTPException
from pathlib import Path
from typing import Any
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from pydantic import ValidationError

from ..domain.i18n import DEFAULT_LOCALE, normalize_locale
from ..domain.models import Location
from ..settings import LocationSettings
from ..storage.cache import get_cache_payload, set_cache_entry

LOGGER = logging.getLogger(__name__)

LOCATION_CACHE_KEY = "location.current"
CITY_CACHE_KEY_PREFIX = "location.city:"
LOCATION_CACHE_TTL_SECONDS = 24 * 60 * 60

IP_GEOLOCATION_URL = "https://ipapi.co/json/"
OPEN_METEO_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
DEFAULT_TIMEOUT_SECONDS = 10
USER_AGENT = "weatherapp/0.1"


def _fetch_json(url: str) -> dict[str, Any]:
    # Lookup failures mean "no location", never an error for the caller.
    request = Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urlopen(request, timeout=DEFAULT_TIMEOUT_SECONDS) as response:
            payload = json.loads(response.read().decode("utf-8"))
    except (OSError, ValueError, HTTPException) as exc:
        LOGGER.info("Location lookup request failed: %s", exc)
        return {}

    if not isinstance(payload, dict):
        return {}
    return payload


def _coerce_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _join_label(*parts: Any, fallback: str) -> str:
    texts = [part.strip() for part in parts if isinstance(part, str) and part.strip()]
    return ", ".join(texts) if texts else fallback


def _build_location(lat: Any, lon: Any, label: str) -> Location | None:
    latitude = _coerce_float(lat)
    longitude = _coerce_float(lon)
    if latitude is None or longitude is None:
        return None
    try:
        return Location(latitude=latitude, longitude=longitude, label=label)
    except ValidationError:
        LOGGER.warning("Discarding out-of-range coordinates %s, %s for '%s'", lat, lon, label)
        return None


class LocationService:
    """Resolves coordinates from the device's network location or a typed city name.

    Every resolver returns ``None`` when no location is available so the caller
    can fall back, e.g. to asking the user for a city.
    """

    def __init__(self, db_path: Path, *, language: str = DEFAULT_LOCALE) -> None:
        self._db_path = Path(db_path)
        self._language = normalize_locale(language)

    @property
    def language(self) -> str:
        return self._language

    @language.setter
    def language(self, value: str) -> None:
        self._language = normalize_locale(value)

    def _cached(self, key: str) -> Location | None:
        payload = get_cache_payload(self._db_path, key)
        if not isinstance(payload, dict):
            return None
        try:
            return Location.model_validate(payload)
        except ValidationError:
            return None

    def _remember(self, key: str, location: Location, *, source: str) -> None:
        set_cache_entry(
            self._db_path,
            key,
            {**location.model_dump(mode="json"), "source": source},
            ttl_seconds=LOCATION_CACHE_TTL_SECONDS,
        )

    def resolve_current(self) -> Location | None:
        payload = _fetch_json(IP_GEOLOCATION_URL)
        label = _join_label(payload.get("city"), payload.get("country_name"), fallback="Current location")
        location = _build_location(payload.get("latitude"), payload.get("longitude"), label)
        if location is None:
            LOGGER.info("Device location is unavailable")
        return location

    def resolve_city(self, city: str) -> Location | None:
        query = city.strip()
        if not query:
            return None

        cache_key = f"{CITY_CACHE_KEY_PREFIX}{query.casefold()}"
        cached = self._cached(cache_key)
        if cached is not None:
            return cached

        params = urlencode(
            {
                "name": query,
                "count": 1,
                "language": self._language,
                "format": "json",
            }
        )
        payload = _fetch_json(f"{OPEN_METEO_GEOCODING_URL}?{params}")
        results = payload.get("results")
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            LOGGER.warning("No geocoding match for city '%s'", query)
            return None

        result = results[0]
        label = _join_label(result.get("name"), result.get("country_code"), fallback=query)
        location = _build_location(result.get("latitude"), result.get("longitude"), label)
        if location is None:
            LOGGER.warning("Geocoding match for city '%s' had no usable coordinates", query)
            return None

        self._remember(cache_key, location, source="city")
        return location

    def resolve(self, settings: LocationSettings) -> Location | None:
        cached = self._cached(LOCATION_CACHE_KEY)
        if cached is not None:
            return cached

        if settings.mode == "auto":
            detected = self.resolve_current()
            if detected is not None:
                self._remember(LOCATION_CACHE_KEY, detected, source="ip")
                return detected

        fallback = self.resolve_city(settings.fallback_city)
        if fallback is not None:
            self._remember(LOCATION_CACHE_KEY, fallback, source="fallback_city")
            return fallback

        LOGGER.warning(
            "Unable to resolve a location (mode=%s, fallback_city=%s)",
            settings.mode,
            settings.fallback_city,
        )
        return None
