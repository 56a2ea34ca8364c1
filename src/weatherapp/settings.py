from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import UnitPreferences

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class WeatherSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    provider: Literal["open_meteo"] = "open_meteo"
    cooldown_minutes: int = Field(default=15, ge=1, le=1440)
    forecast_days: int = Field(default=14, ge=1, le=16)
    past_days: int = Field(default=1, ge=0, le=7)


class LocationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mode: Literal["auto", "fixed"] = "auto"
    fallback_city: str = "Tampere"

    @field_validator("fallback_city")
    @classmethod
    def validate_fallback_city(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("location.fallback_city must not be empty")
        return text


class RefreshSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    interval_minutes: int = Field(default=5, ge=1, le=60)
    jitter_seconds: int = Field(default=15, ge=0, le=300)


class WeatherAppYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    weather: WeatherSettings = Field(default_factory=WeatherSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    refresh: RefreshSettings = Field(default_factory=RefreshSettings)
    preferences: UnitPreferences = Field(default_factory=UnitPreferences)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weatherapp_env: Literal["dev", "test", "prod"] = "dev"
    weatherapp_timezone: str = "Europe/Helsinki"
    weatherapp_config_path: Path = Path("config/weatherapp.yaml")
    weatherapp_db_path: Path = Path("data/weatherapp.db")

    @field_validator("weatherapp_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value


class AppSettings(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    env: EnvSettings
    yaml: WeatherAppYamlSettings
    project_root: Path
    config_path: Path
    db_path: Path
    timezone: ZoneInfo

    @property
    def cooldown(self) -> timedelta:
        return timedelta(minutes=self.yaml.weather.cooldown_minutes)


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def load_yaml_settings(path: Path) -> WeatherAppYamlSettings:
    if not path.exists():
        raise FileNotFoundError(f"Weather app config file not found: {path}")

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Weather app config must be a YAML mapping at the top level")
    return WeatherAppYamlSettings.model_validate(raw_config)


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    env = EnvSettings()
    config_path = _resolve_project_path(env.weatherapp_config_path)
    return AppSettings(
        env=env,
        yaml=load_yaml_settings(config_path),
        project_root=PROJECT_ROOT,
        config_path=config_path,
        db_path=_resolve_project_path(env.weatherapp_db_path),
        timezone=ZoneInfo(env.weatherapp_timezone),
    )
