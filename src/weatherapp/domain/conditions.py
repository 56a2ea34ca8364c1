"""Weather code classification.

Codes follow the WMO interpretation used by Open-Meteo
(https://open-meteo.com/en/docs). ``CONDITION_TABLE`` is the only place the
ranges live; both the semantic kind and the icon are read from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

LOGGER = logging.getLogger(__name__)


class ConditionKind(str, Enum):
    CLEAR_SKY = "clear_sky"
    PARTLY_CLOUDY = "partly_cloudy"
    FOG = "fog"
    DRIZZLE = "drizzle"
    FREEZING_DRIZZLE = "freezing_drizzle"
    RAIN = "rain"
    FREEZING_RAIN = "freezing_rain"
    SNOW = "snow"
    SNOW_GRAINS = "snow_grains"
    RAIN_SHOWERS = "rain_showers"
    SNOW_SHOWERS = "snow_showers"
    THUNDERSTORM = "thunderstorm"
    HEAVY_HAIL = "heavy_hail"
    UNKNOWN = "unknown"


class IconKey(str, Enum):
    CLEAR_SKY = "weather-clear"
    PARTLY_CLOUDY = "weather-partly-cloudy"
    FOG = "weather-fog"
    DRIZZLE = "weather-drizzle"
    FREEZING_DRIZZLE = "weather-freezing-drizzle"
    RAIN = "weather-rain"
    FREEZING_RAIN = "weather-freezing-rain"
    SNOW = "weather-snow"
    SNOW_GRAINS = "weather-snow-grains"
    RAIN_SHOWERS = "weather-rain-showers"
    SNOW_SHOWERS = "weather-snow-showers"
    THUNDERSTORM = "weather-thunderstorm"
    HEAVY_HAIL = "weather-hail"
    UNKNOWN = "weather-unknown"


@dataclass(frozen=True, slots=True)
class ConditionRange:
    low: int
    high: int
    kind: ConditionKind
    icon: IconKey

    def contains(self, code: int) -> bool:
        return self.low <= code <= self.high


# Inclusive ranges, first match wins.
CONDITION_TABLE: tuple[ConditionRange, ...] = (
    ConditionRange(0, 0, ConditionKind.CLEAR_SKY, IconKey.CLEAR_SKY),
    ConditionRange(1, 3, ConditionKind.PARTLY_CLOUDY, IconKey.PARTLY_CLOUDY),
    ConditionRange(45, 48, ConditionKind.FOG, IconKey.FOG),
    ConditionRange(51, 55, ConditionKind.DRIZZLE, IconKey.DRIZZLE),
    ConditionRange(56, 57, ConditionKind.FREEZING_DRIZZLE, IconKey.FREEZING_DRIZZLE),
    ConditionRange(61, 65, ConditionKind.RAIN, IconKey.RAIN),
    ConditionRange(66, 67, ConditionKind.FREEZING_RAIN, IconKey.FREEZING_RAIN),
    ConditionRange(71, 75, ConditionKind.SNOW, IconKey.SNOW),
    ConditionRange(77, 77, ConditionKind.SNOW_GRAINS, IconKey.SNOW_GRAINS),
    ConditionRange(80, 82, ConditionKind.RAIN_SHOWERS, IconKey.RAIN_SHOWERS),
    ConditionRange(85, 86, ConditionKind.SNOW_SHOWERS, IconKey.SNOW_SHOWERS),
    ConditionRange(95, 96, ConditionKind.THUNDERSTORM, IconKey.THUNDERSTORM),
    ConditionRange(99, 99, ConditionKind.HEAVY_HAIL, IconKey.HEAVY_HAIL),
)


def _lookup(code: int) -> ConditionRange | None:
    for entry in CONDITION_TABLE:
        if entry.contains(code):
            return entry
    LOGGER.warning("Unrecognized weather code %s, treating it as unknown", code)
    return None


def condition_for(code: int) -> tuple[ConditionKind, IconKey]:
    """Kind and icon for ``code`` from a single table lookup."""
    entry = _lookup(code)
    if entry is None:
        return ConditionKind.UNKNOWN, IconKey.UNKNOWN
    return entry.kind, entry.icon


def classify(code: int) -> ConditionKind:
    entry = _lookup(code)
    return entry.kind if entry is not None else ConditionKind.UNKNOWN


def icon_key_for(code: int) -> IconKey:
    entry = _lookup(code)
    return entry.icon if entry is not None else IconKey.UNKNOWN
