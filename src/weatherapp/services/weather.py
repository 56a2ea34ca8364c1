"""Holds the one snapshot currently on display and decides when to refetch it."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from pathlib import Path

from pydantic import ValidationError

from ..adapters.weather import WeatherAdapter
from ..domain.freshness import DEFAULT_COOLDOWN, is_stale
from ..domain.models import Location, WeatherSnapshot
from ..storage.cache import get_cache_entry, set_cache_entry

LOGGER = logging.getLogger(__name__)

SNAPSHOT_CACHE_KEY = "weather.snapshot"


class WeatherService:
    def __init__(
        self,
        adapter: WeatherAdapter,
        *,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        db_path: Path | None = None,
    ) -> None:
        self._adapter = adapter
        self._cooldown = cooldown
        self._db_path = db_path
        self._lock = threading.Lock()
        self._held: tuple[Location, WeatherSnapshot] | None = None
        if db_path is not None:
            self._held = self._restore(db_path)

    @property
    def cooldown(self) -> timedelta:
        return self._cooldown

    @property
    def current(self) -> WeatherSnapshot | None:
        held = self._held
        return held[1] if held is not None else None

    @property
    def location(self) -> Location | None:
        held = self._held
        return held[0] if held is not None else None

    def needs_update(self, location: Location, now: datetime | None = None) -> bool:
        held = self._held
        if held is None:
            return True
        held_location, snapshot = held
        if not held_location.same_place(location):
            return True
        reference = snapshot.local_now() if now is None else now
        return is_stale(snapshot, reference, self._cooldown)

    def get_weather(self, location: Location, now: datetime | None = None) -> WeatherSnapshot:
        """Return a fresh snapshot for ``location``, fetching only when required.

        Adapter errors propagate unchanged and leave the held snapshot as it was.
        """
        with self._lock:
            if not self.needs_update(location, now):
                LOGGER.debug("Reusing weather snapshot for '%s'", location.label)
                return self._held[1]

            LOGGER.info(
                "Fetching weather for '%s' (%.4f, %.4f)",
                location.label,
                location.latitude,
                location.longitude,
            )
            snapshot = self._adapter.get_weather(location)
            self._held = (location, snapshot)
            if self._db_path is not None:
                self._persist(self._db_path, location, snapshot)
            return snapshot

    def _persist(self, db_path: Path, location: Location, snapshot: WeatherSnapshot) -> None:
        set_cache_entry(
            db_path,
            SNAPSHOT_CACHE_KEY,
            {
                "location": location.model_dump(mode="json"),
                "snapshot": snapshot.model_dump(mode="json", by_alias=True),
            },
            ttl_seconds=int(self._cooldown.total_seconds()),
        )

    @staticmethod
    def _restore(db_path: Path) -> tuple[Location, WeatherSnapshot] | None:
        # Expired entries are still restored; is_stale decides about reuse.
        entry = get_cache_entry(db_path, SNAPSHOT_CACHE_KEY)
        if entry is None or not isinstance(entry.payload, dict):
            return None
        try:
            location = Location.model_validate(entry.payload.get("location"))
            snapshot = WeatherSnapshot.model_validate(entry.payload.get("snapshot"))
        except ValidationError:
            LOGGER.warning("Ignoring unreadable persisted weather snapshot", exc_info=True)
            return None
        LOGGER.info("Restored persisted weather snapshot for '%s'", location.label)
        return location, snapshot
