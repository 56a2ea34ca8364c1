from __future__ import annotations

from typing import Protocol

from ...domain.models import Location, WeatherSnapshot


class WeatherAdapterError(RuntimeError):
    """Raised when a forecast cannot be fetched or does not match the snapshot shape."""


class WeatherAdapter(Protocol):
    def get_weather(self, location: Location) -> WeatherSnapshot:
        """Fetch a complete snapshot (current, hourly and daily) for ``location``."""
