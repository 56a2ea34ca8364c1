"""On-demand view model derived from a snapshot and the user's preferences.

Nothing here is cached or observed: callers rebuild the view whenever the
snapshot or the preferences change.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from .conditions import ConditionKind, IconKey, condition_for
from .freshness import clock_label, last_updated_label
from .i18n import condition_text, translate
from .models import DailyForecast, UnitPreferences, WeatherSnapshot
from .units import format_display, to_display_precip, to_display_speed, to_display_temp
from .windowing import HourlyWindow, day_window, next_day_window

MISSING_VALUE = "--"


class CurrentView(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature: str
    feels_like: str
    condition: str
    condition_kind: ConditionKind
    icon: IconKey
    last_updated: str


class HourlyCardView(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: datetime
    time_label: str
    temperature: str
    condition: str
    icon: IconKey


class DailyRowView(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    day_label: str
    max_temp: str
    min_temp: str
    condition: str
    icon: IconKey
    rain_chance: str


class DetailsView(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    rain_amount: str
    humidity: str
    uv_index: str
    sunrise: str
    sunset: str
    wind_speed: str
    pressure: str


class WeatherView(BaseModel):
    model_config = ConfigDict(frozen=True)

    location_label: str | None = None
    locale: str
    current: CurrentView
    hourly: list[HourlyCardView]
    daily: list[DailyRowView]
    details: DetailsView | None = None


def _temperature(value: float, prefs: UnitPreferences, *, decimals: int = 1) -> str:
    return format_display(to_display_temp(value, prefs), decimals)


def _build_current(snapshot: WeatherSnapshot, prefs: UnitPreferences) -> CurrentView:
    current = snapshot.current
    kind, icon = condition_for(current.condition_code)
    return CurrentView(
        temperature=_temperature(current.temperature_c, prefs),
        feels_like=_temperature(current.feels_like_c, prefs),
        condition=condition_text(kind, prefs.locale),
        condition_kind=kind,
        icon=icon,
        last_updated=last_updated_label(snapshot),
    )


def _build_hourly(
    window: HourlyWindow, prefs: UnitPreferences, now: datetime
) -> list[HourlyCardView]:
    cards: list[HourlyCardView] = []
    for point in window:
        kind, icon = condition_for(point.condition_code)
        cards.append(
            HourlyCardView(
                time=point.time,
                time_label=clock_label(point.time, now, locale=prefs.locale),
                temperature=_temperature(point.temperature_c, prefs, decimals=0),
                condition=condition_text(kind, prefs.locale),
                icon=icon,
            )
        )
    return cards


def _build_daily(daily: DailyForecast, prefs: UnitPreferences) -> list[DailyRowView]:
    rows: list[DailyRowView] = []
    for index, day in enumerate(daily.timestamps):
        kind, icon = condition_for(daily.condition_codes[index])
        rain_chance = daily.rain_chance_pct[index]
        rows.append(
            DailyRowView(
                day=day,
                day_label=translate(f"weekday.{day.weekday()}", prefs.locale),
                max_temp=_temperature(daily.max_temps_c[index], prefs, decimals=0),
                min_temp=_temperature(daily.min_temps_c[index], prefs, decimals=0),
                condition=condition_text(kind, prefs.locale),
                icon=icon,
                rain_chance=f"{rain_chance}%" if rain_chance is not None else MISSING_VALUE,
            )
        )
    return rows


def _resolve_day_index(snapshot: WeatherSnapshot, selected_day: int | None) -> int | None:
    count = len(snapshot.daily)
    if selected_day is not None:
        if not 0 <= selected_day < count:
            raise ValueError(f"selected_day must be between 0 and {count - 1}, got {selected_day}")
        return selected_day
    if count == 0:
        return None
    today = snapshot.daily.index_of(snapshot.current.timestamp.date())
    return today if today is not None else 0


def _build_details(
    snapshot: WeatherSnapshot, prefs: UnitPreferences, now: datetime, index: int
) -> DetailsView:
    daily = snapshot.daily
    current = snapshot.current
    uv_index = daily.uv_index_max[index]
    return DetailsView(
        day=daily.timestamps[index],
        rain_amount=format_display(to_display_precip(daily.rain_amount_mm[index], prefs)),
        humidity=f"{current.humidity_pct}%",
        uv_index=f"{uv_index:.1f}" if uv_index is not None else MISSING_VALUE,
        sunrise=clock_label(daily.sunrise[index], now, locale=prefs.locale),
        sunset=clock_label(daily.sunset[index], now, locale=prefs.locale),
        wind_speed=format_display(to_display_speed(current.wind_speed_kmh, prefs)),
        pressure=f"{current.pressure_hpa:.0f} hPa",
    )


def build_weather_view(
    snapshot: WeatherSnapshot,
    prefs: UnitPreferences,
    *,
    now: datetime,
    location_label: str | None = None,
    selected_day: int | None = None,
) -> WeatherView:
    local_now = snapshot.to_local(now)
    day_index = _resolve_day_index(snapshot, selected_day)
    if selected_day is None:
        window = next_day_window(snapshot.hourly, local_now)
    else:
        window = day_window(snapshot.hourly, snapshot.daily.timestamps[selected_day])
    details = None
    if day_index is not None:
        details = _build_details(snapshot, prefs, local_now, day_index)

    return WeatherView(
        location_label=location_label,
        locale=prefs.locale,
        current=_build_current(snapshot, prefs),
        hourly=_build_hourly(window, prefs, local_now),
        daily=_build_daily(snapshot.daily, prefs),
        details=details,
    )
