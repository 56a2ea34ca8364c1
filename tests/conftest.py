from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Callable
from zoneinfo import ZoneInfo

import pytest

from weatherapp.domain.models import Location, WeatherSnapshot
from weatherapp.settings import AppSettings, EnvSettings, WeatherAppYamlSettings

CONDITION_CYCLE = (0, 2, 45, 61, 71, 95)


def build_payload(
    *,
    current_time: str = "2024-01-01T10:00",
    current_code: int = 71,
    hourly_start: datetime = datetime(2024, 1, 1, 0, 0),
    hours: int = 48,
    first_day: date = date(2023, 12, 31),
    days: int = 3,
) -> dict[str, Any]:
    """Open-Meteo shaped forecast payload with one past day, as the app requests it."""
    hourly_times = [hourly_start + timedelta(hours=index) for index in range(hours)]
    day_list = [first_day + timedelta(days=index) for index in range(days)]
    return {
        "latitude": 61.5,
        "longitude": 23.75,
        "generationtime_ms": 0.41,
        "utc_offset_seconds": 7200,
        "timezone": "Europe/Helsinki",
        "timezone_abbreviation": "EET",
        "elevation": 110.0,
        "current_units": {"time": "iso8601", "temperature_2m": "°C"},
        "current": {
            "time": current_time,
            "interval": 900,
            "temperature_2m": -3.5,
            "relative_humidity_2m": 87,
            "apparent_temperature": -8.1,
            "precipitation": 0.2,
            "weather_code": current_code,
            "wind_speed_10m": 14.4,
            "surface_pressure": 1004.2,
        },
        "hourly": {
            "time": [moment.strftime("%Y-%m-%dT%H:%M") for moment in hourly_times],
            "temperature_2m": [round(-6.0 + 0.5 * index, 1) for index in range(hours)],
            "apparent_temperature": [round(-10.0 + 0.5 * index, 1) for index in range(hours)],
            "weather_code": [CONDITION_CYCLE[index % len(CONDITION_CYCLE)] for index in range(hours)],
        },
        "daily": {
            "time": [day.isoformat() for day in day_list],
            "weather_code": [CONDITION_CYCLE[(index + 4) % len(CONDITION_CYCLE)] for index in range(days)],
            "temperature_2m_max": [-1.0 + index for index in range(days)],
            "temperature_2m_min": [-8.0 + index for index in range(days)],
            "sunrise": [f"{day.isoformat()}T09:05" for day in day_list],
            "sunset": [f"{day.isoformat()}T15:10" for day in day_list],
            "uv_index_max": [0.1 * (index + 1) for index in range(days)],
            "precipitation_sum": [0.0] + [12.5 - 2.5 * index for index in range(1, days)],
            "precipitation_probability_max": [None] + [40 + 10 * index for index in range(1, days)],
            "wind_speed_10m_max": [20.0 + index for index in range(days)],
        },
    }


@pytest.fixture
def payload_factory() -> Callable[..., dict[str, Any]]:
    return build_payload


@pytest.fixture
def snapshot() -> WeatherSnapshot:
    return WeatherSnapshot.model_validate(build_payload())


@pytest.fixture
def tampere() -> Location:
    return Location(latitude=61.4978, longitude=23.761, label="Tampere, FI")


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "weatherapp.db"


@pytest.fixture
def app_settings(tmp_path: Path, db_path: Path) -> AppSettings:
    config_path = tmp_path / "weatherapp.yaml"
    config_path.write_text("", encoding="utf-8")
    return AppSettings(
        env=EnvSettings(weatherapp_env="test"),
        yaml=WeatherAppYamlSettings.model_validate(
            {
                "location": {"mode": "fixed", "fallback_city": "Tampere"},
                "refresh": {"enabled": False},
            }
        ),
        project_root=tmp_path,
        config_path=config_path,
        db_path=db_path,
        timezone=ZoneInfo("Europe/Helsinki"),
    )


class FakeWeatherAdapter:
    def __init__(self, snapshot: WeatherSnapshot | None = None, error: Exception | None = None) -> None:
        self.snapshot = snapshot
        self.error = error
        self.requested: list[Location] = []

    def get_weather(self, location: Location) -> WeatherSnapshot:
        self.requested.append(location)
        if self.error is not None:
            raise self.error
        assert self.snapshot is not None
        return self.snapshot


@pytest.fixture
def fake_adapter(snapshot: WeatherSnapshot) -> FakeWeatherAdapter:
    return FakeWeatherAdapter(snapshot)


@pytest.fixture
def adapter_factory() -> type[FakeWeatherAdapter]:
    return FakeWeatherAdapter
