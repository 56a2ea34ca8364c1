from .conditions import ConditionKind, IconKey, classify, condition_for, icon_key_for
from .freshness import DEFAULT_COOLDOWN, clock_label, is_stale, last_updated_label
from .models import (
    CurrentWeather,
    DailyForecast,
    HourlyForecast,
    HourlyPoint,
    Location,
    UnitPreferences,
    WeatherSnapshot,
)
from .units import DisplayValue, to_display_precip, to_display_speed, to_display_temp
from .windowing import HourlyWindow, day_window, next_day_window

__all__ = [
    "DEFAULT_COOLDOWN",
    "ConditionKind",
    "CurrentWeather",
    "DailyForecast",
    "DisplayValue",
    "HourlyForecast",
    "HourlyPoint",
    "HourlyWindow",
    "IconKey",
    "Location",
    "UnitPreferences",
    "WeatherSnapshot",
    "classify",
    "clock_label",
    "condition_for",
    "day_window",
    "icon_key_for",
    "is_stale",
    "last_updated_label",
    "next_day_window",
    "to_display_precip",
    "to_display_speed",
    "to_display_temp",
]
