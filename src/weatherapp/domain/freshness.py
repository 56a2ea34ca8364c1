from __future__ import annotations

from datetime import datetime, timedelta

from .i18n import DEFAULT_LOCALE, translate
from .models import WeatherSnapshot

DEFAULT_COOLDOWN = timedelta(minutes=15)
CLOCK_FORMAT = "%H:%M"


def is_stale(
    snapshot: WeatherSnapshot,
    now: datetime,
    cooldown: timedelta = DEFAULT_COOLDOWN,
) -> bool:
    """Return True once ``now`` is strictly past the snapshot time plus ``cooldown``.

    ``now`` may be naive (already in the snapshot's local frame) or timezone
    aware, in which case it is shifted by the snapshot's UTC offset.
    """
    return snapshot.to_local(now) > snapshot.current.timestamp + cooldown


def last_updated_label(snapshot: WeatherSnapshot) -> str:
    return snapshot.current.timestamp.strftime(CLOCK_FORMAT)


def clock_label(timestamp: datetime, now: datetime, *, locale: str = DEFAULT_LOCALE) -> str:
    # Same hour of the day, not within sixty minutes.
    if timestamp.hour == now.hour:
        return translate("now", locale)
    return timestamp.strftime(CLOCK_FORMAT)
