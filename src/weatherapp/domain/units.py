from __future__ import annotations

from typing import NamedTuple

from .models import UnitPreferences

CELSIUS_LABEL = "°C"
FAHRENHEIT_LABEL = "°F"
KMH_LABEL = "km/h"
MPH_LABEL = "mph"
MM_LABEL = "mm"
INCH_LABEL = "in"

KMH_TO_MPH = 0.621371
MM_TO_INCHES = 0.0393701


class DisplayValue(NamedTuple):
    value: float
    unit: str


def to_display_temp(celsius: float, prefs: UnitPreferences) -> DisplayValue:
    if prefs.use_fahrenheit:
        return DisplayValue(celsius * 9 / 5 + 32, FAHRENHEIT_LABEL)
    return DisplayValue(float(celsius), CELSIUS_LABEL)


def to_display_speed(kmh: float, prefs: UnitPreferences) -> DisplayValue:
    if prefs.use_miles:
        return DisplayValue(kmh * KMH_TO_MPH, MPH_LABEL)
    return DisplayValue(float(kmh), KMH_LABEL)


def to_display_precip(mm: float, prefs: UnitPreferences) -> DisplayValue:
    if prefs.use_inches:
        return DisplayValue(mm * MM_TO_INCHES, INCH_LABEL)
    return DisplayValue(float(mm), MM_LABEL)


def format_display(display: DisplayValue, decimals: int = 1) -> str:
    return f"{display.value:.{decimals}f} {display.unit}"
