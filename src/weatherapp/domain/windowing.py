from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Iterator

from .models import HourlyForecast, HourlyPoint

WINDOW_LEAD = timedelta(hours=1)
WINDOW_SPAN = timedelta(hours=24)


class HourlyWindow:
    """Lazy, restartable selection of hourly points.

    Every iteration walks the underlying series again, so the same window can
    be consumed any number of times. The forecast itself is never copied.
    """

    def __init__(self, hourly: HourlyForecast, predicate: Callable[[datetime], bool]) -> None:
        self._hourly = hourly
        self._predicate = predicate

    def __iter__(self) -> Iterator[HourlyPoint]:
        hourly = self._hourly
        for index, moment in enumerate(hourly.timestamps):
            if self._predicate(moment):
                yield HourlyPoint(
                    time=moment,
                    temperature_c=hourly.temperatures_c[index],
                    condition_code=hourly.condition_codes[index],
                )


def next_day_window(hourly: HourlyForecast, now: datetime) -> HourlyWindow:
    start = now - WINDOW_LEAD
    end = start + WINDOW_SPAN
    return HourlyWindow(hourly, lambda moment: start < moment < end)


def day_window(hourly: HourlyForecast, day: date) -> HourlyWindow:
    return HourlyWindow(hourly, lambda moment: moment.date() == day)
