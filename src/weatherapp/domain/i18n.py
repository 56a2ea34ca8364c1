from __future__ import annotations

from .conditions import ConditionKind, classify

DEFAULT_LOCALE = "en"

CATALOGS: dict[str, dict[str, str]] = {
    "en": {
        "now": "Now",
        "condition.clear_sky": "Clear sky",
        "condition.partly_cloudy": "Partly cloudy",
        "condition.fog": "Fog",
        "condition.drizzle": "Drizzle",
        "condition.freezing_drizzle": "Freezing drizzle",
        "condition.rain": "Rain",
        "condition.freezing_rain": "Freezing rain",
        "condition.snow": "Snow",
        "condition.snow_grains": "Snow grains",
        "condition.rain_showers": "Rain showers",
        "condition.snow_showers": "Snow showers",
        "condition.thunderstorm": "Thunderstorm",
        "condition.heavy_hail": "Heavy hail",
        "condition.unknown": "Unknown",
        "weekday.0": "Mon",
        "weekday.1": "Tue",
        "weekday.2": "Wed",
        "weekday.3": "Thu",
        "weekday.4": "Fri",
        "weekday.5": "Sat",
        "weekday.6": "Sun",
    },
    "fi": {
        "now": "Nyt",
        "condition.clear_sky": "Selkeää",
        "condition.partly_cloudy": "Puolipilvistä",
        "condition.fog": "Sumua",
        "condition.drizzle": "Tihkusadetta",
        "condition.freezing_drizzle": "Jäätävää tihkua",
        "condition.rain": "Sadetta",
        "condition.freezing_rain": "Jäätävää sadetta",
        "condition.snow": "Lumisadetta",
        "condition.snow_grains": "Lumijyväsiä",
        "condition.rain_showers": "Sadekuuroja",
        "condition.snow_showers": "Lumikuuroja",
        "condition.thunderstorm": "Ukkosta",
        "condition.heavy_hail": "Voimakasta raesadetta",
        "condition.unknown": "Tuntematon",
        "weekday.0": "ma",
        "weekday.1": "ti",
        "weekday.2": "ke",
        "weekday.3": "to",
        "weekday.4": "pe",
        "weekday.5": "la",
        "weekday.6": "su",
    },
}

SUPPORTED_LOCALES: tuple[str, ...] = tuple(CATALOGS)


def normalize_locale(value: str | None) -> str:
    """Map identifiers such as ``fi_FI`` or ``en-GB`` onto a catalog locale."""
    if not value or not value.strip():
        return DEFAULT_LOCALE
    language = value.strip().replace("-", "_").split("_", 1)[0].lower()
    if language in CATALOGS:
        return language
    return DEFAULT_LOCALE


def translate(key: str, locale: str = DEFAULT_LOCALE) -> str:
    catalog = CATALOGS.get(normalize_locale(locale), {})
    if key in catalog:
        return catalog[key]
    return CATALOGS[DEFAULT_LOCALE].get(key, key)


def condition_text(kind: ConditionKind, locale: str = DEFAULT_LOCALE) -> str:
    return translate(f"condition.{kind.value}", locale)


def describe_condition(code: int, locale: str = DEFAULT_LOCALE) -> str:
    return condition_text(classify(code), locale)
