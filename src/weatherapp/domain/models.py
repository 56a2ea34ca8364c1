from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import NamedTuple, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .i18n import DEFAULT_LOCALE, normalize_locale

_WIRE_CONFIG = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


def _require_local(value: datetime, *, field_name: str) -> datetime:
    if value.tzinfo is not None:
        raise ValueError(f"{field_name} must be a local date-time without an offset")
    return value


def _require_increasing(values: Sequence[date | datetime], *, field_name: str) -> None:
    for previous, current in zip(values, values[1:]):
        if current <= previous:
            raise ValueError(f"{field_name} must be strictly increasing ({previous} >= {current})")


def _require_equal_lengths(section: str, **series: Sequence[object]) -> None:
    lengths = {name: len(values) for name, values in series.items()}
    if len(set(lengths.values())) > 1:
        raise ValueError(f"{section} series must all have the same length, got {lengths}")


class HourlyPoint(NamedTuple):
    time: datetime
    temperature_c: float
    condition_code: int


class CurrentWeather(BaseModel):
    model_config = _WIRE_CONFIG

    timestamp: datetime = Field(alias="time")
    temperature_c: float = Field(alias="temperature_2m")
    humidity_pct: int = Field(alias="relative_humidity_2m", ge=0, le=100)
    feels_like_c: float = Field(alias="apparent_temperature")
    precipitation_mm: float = Field(alias="precipitation", ge=0)
    condition_code: NonNegativeInt = Field(alias="weather_code")
    wind_speed_kmh: float = Field(alias="wind_speed_10m", ge=0)
    pressure_hpa: float = Field(alias="surface_pressure")

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, value: datetime) -> datetime:
        return _require_local(value, field_name="current.time")


class HourlyForecast(BaseModel):
    model_config = _WIRE_CONFIG

    timestamps: tuple[datetime, ...] = Field(alias="time")
    temperatures_c: tuple[float, ...] = Field(alias="temperature_2m")
    feels_like_c: tuple[float, ...] = Field(alias="apparent_temperature")
    condition_codes: tuple[NonNegativeInt, ...] = Field(alias="weather_code")

    @field_validator("timestamps")
    @classmethod
    def validate_timestamps(cls, values: tuple[datetime, ...]) -> tuple[datetime, ...]:
        for value in values:
            _require_local(value, field_name="hourly.time")
        _require_increasing(values, field_name="hourly.time")
        return values

    @model_validator(mode="after")
    def validate_series_lengths(self) -> HourlyForecast:
        _require_equal_lengths(
            "hourly",
            time=self.timestamps,
            temperature_2m=self.temperatures_c,
            apparent_temperature=self.feels_like_c,
            weather_code=self.condition_codes,
        )
        return self

    def __len__(self) -> int:
        return len(self.timestamps)


class DailyForecast(BaseModel):
    model_config = _WIRE_CONFIG

    timestamps: tuple[date, ...] = Field(alias="time")
    condition_codes: tuple[NonNegativeInt, ...] = Field(alias="weather_code")
    max_temps_c: tuple[float, ...] = Field(alias="temperature_2m_max")
    min_temps_c: tuple[float, ...] = Field(alias="temperature_2m_min")
    sunrise: tuple[datetime, ...]
    sunset: tuple[datetime, ...]
    uv_index_max: tuple[float | None, ...]
    rain_amount_mm: tuple[float, ...] = Field(alias="precipitation_sum")
    rain_chance_pct: tuple[int | None, ...] = Field(alias="precipitation_probability_max")
    wind_speed_max_kmh: tuple[float, ...] = Field(alias="wind_speed_10m_max")

    @field_validator("timestamps")
    @classmethod
    def validate_timestamps(cls, values: tuple[date, ...]) -> tuple[date, ...]:
        _require_increasing(values, field_name="daily.time")
        return values

    @field_validator("sunrise", "sunset")
    @classmethod
    def validate_sun_times(
        cls, values: tuple[datetime, ...], info: ValidationInfo
    ) -> tuple[datetime, ...]:
        field_name = f"daily.{info.field_name}"
        for value in values:
            _require_local(value, field_name=field_name)
        _require_increasing(values, field_name=field_name)
        return values

    @model_validator(mode="after")
    def validate_series_lengths(self) -> DailyForecast:
        _require_equal_lengths(
            "daily",
            time=self.timestamps,
            weather_code=self.condition_codes,
            temperature_2m_max=self.max_temps_c,
            temperature_2m_min=self.min_temps_c,
            sunrise=self.sunrise,
            sunset=self.sunset,
            uv_index_max=self.uv_index_max,
            precipitation_sum=self.rain_amount_mm,
            precipitation_probability_max=self.rain_chance_pct,
            wind_speed_10m_max=self.wind_speed_max_kmh,
        )
        return self

    def __len__(self) -> int:
        return len(self.timestamps)

    def index_of(self, day: date) -> int | None:
        try:
            return self.timestamps.index(day)
        except ValueError:
            return None


class WeatherSnapshot(BaseModel):
    """One fetched forecast payload for a single location.

    Timestamps are naive local date-times in the location's timezone, exactly
    as the provider returns them with ``timezone=auto``. ``utc_offset_seconds``
    relates that local frame to UTC.
    """

    model_config = _WIRE_CONFIG

    latitude: float | None = None
    longitude: float | None = None
    timezone_name: str = Field(default="GMT", alias="timezone")
    utc_offset_seconds: int = 0
    current: CurrentWeather
    hourly: HourlyForecast
    daily: DailyForecast

    def to_local(self, moment: datetime) -> datetime:
        """Express ``moment`` in the snapshot's naive local frame."""
        if moment.tzinfo is None:
            return moment
        shifted = moment.astimezone(timezone.utc) + timedelta(seconds=self.utc_offset_seconds)
        return shifted.replace(tzinfo=None)

    def local_now(self) -> datetime:
        return self.to_local(datetime.now(timezone.utc))


class Location(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    label: str

    @field_validator("label")
    @classmethod
    def validate_label(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("location label must not be empty")
        return text

    def same_place(self, other: Location, *, precision: int = 4) -> bool:
        return round(self.latitude, precision) == round(other.latitude, precision) and round(
            self.longitude, precision
        ) == round(other.longitude, precision)


class UnitPreferences(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    use_fahrenheit: bool = False
    use_miles: bool = False
    use_inches: bool = False
    locale: str = DEFAULT_LOCALE
    dark_theme: bool = False

    @field_validator("locale", mode="before")
    @classmethod
    def validate_locale(cls, value: object) -> str:
        return normalize_locale(value if isinstance(value, str) else None)
