from __future__ import annotations

import json
import logging
from http.client import HTTPException
from typing import Any
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from pydantic import ValidationError

from ...domain.models import Location, WeatherSnapshot
from .base import WeatherAdapterError

LOGGER = logging.getLogger(__name__)

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_TIMEOUT_SECONDS = 10
USER_AGENT = "weatherapp/0.1"

CURRENT_VARIABLES = (
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "precipitation",
    "weather_code",
    "wind_speed_10m",
    "surface_pressure",
)
HOURLY_VARIABLES = (
    "temperature_2m",
    "apparent_temperature",
    "weather_code",
)
DAILY_VARIABLES = (
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "sunrise",
    "sunset",
    "uv_index_max",
    "precipitation_sum",
    "precipitation_probability_max",
    "wind_speed_10m_max",
)

MAX_FORECAST_DAYS = 16
MAX_PAST_DAYS = 7


def _fetch_json(url: str) -> dict[str, Any]:
    request = Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urlopen(request, timeout=DEFAULT_TIMEOUT_SECONDS) as response:
            payload = json.loads(response.read().decode("utf-8"))
    except (OSError, ValueError, HTTPException) as exc:
        raise WeatherAdapterError("Failed to fetch forecast from Open-Meteo") from exc

    if not isinstance(payload, dict):
        raise WeatherAdapterError("Unexpected Open-Meteo response shape")
    return payload


class OpenMeteoWeatherAdapter:
    def __init__(
        self,
        *,
        forecast_days: int = 14,
        past_days: int = 1,
        timezone_name: str = "auto",
    ) -> None:
        self._forecast_days = min(max(forecast_days, 1), MAX_FORECAST_DAYS)
        self._past_days = min(max(past_days, 0), MAX_PAST_DAYS)
        self._timezone_name = timezone_name

    def build_url(self, location: Location) -> str:
        params = {
            "latitude": f"{location.latitude:.5f}",
            "longitude": f"{location.longitude:.5f}",
            "current": ",".join(CURRENT_VARIABLES),
            "hourly": ",".join(HOURLY_VARIABLES),
            "daily": ",".join(DAILY_VARIABLES),
            "timezone": self._timezone_name,
            "forecast_days": str(self._forecast_days),
            "past_days": str(self._past_days),
        }
        return f"{OPEN_METEO_FORECAST_URL}?{urlencode(params)}"

    def get_weather(self, location: Location) -> WeatherSnapshot:
        payload = _fetch_json(self.build_url(location))
        if payload.get("error"):
            reason = payload.get("reason") or "unknown reason"
            raise WeatherAdapterError(f"Open-Meteo rejected the request: {reason}")

        try:
            snapshot = WeatherSnapshot.model_validate(payload)
        except ValidationError as exc:
            raise WeatherAdapterError("Open-Meteo response did not match the forecast shape") from exc

        LOGGER.debug(
            "Parsed Open-Meteo forecast for '%s': %d hourly, %d daily entries",
            location.label,
            len(snapshot.hourly),
            len(snapshot.daily),
        )
        return snapshot
