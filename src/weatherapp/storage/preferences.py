from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from ..domain.models import UnitPreferences
from .db import open_db

LOGGER = logging.getLogger(__name__)

PREFERENCES_KEY = "user"


def load_preferences(db_path: Path, defaults: UnitPreferences | None = None) -> UnitPreferences:
    """Return the applied preferences, or ``defaults`` when none were saved yet."""
    fallback = defaults if defaults is not None else UnitPreferences()
    with open_db(db_path) as connection:
        row = connection.execute(
            "SELECT json FROM preferences WHERE key = ?",
            (PREFERENCES_KEY,),
        ).fetchone()

    if row is None:
        return fallback

    try:
        stored = json.loads(row["json"])
    except json.JSONDecodeError:
        LOGGER.warning("Stored preferences are not valid JSON, using defaults")
        return fallback
    if not isinstance(stored, dict):
        LOGGER.warning("Stored preferences are not an object, using defaults")
        return fallback

    try:
        return UnitPreferences.model_validate({**fallback.model_dump(), **stored})
    except ValidationError:
        LOGGER.warning("Stored preferences failed validation, using defaults", exc_info=True)
        return fallback


def save_preferences(db_path: Path, preferences: UnitPreferences) -> None:
    with open_db(db_path) as connection:
        connection.execute(
            """
            INSERT INTO preferences (key, json, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                json=excluded.json,
                updated_at=excluded.updated_at
            """,
            (
                PREFERENCES_KEY,
                preferences.model_dump_json(),
                datetime.now(timezone.utc).isoformat(),
            ),
        )
        connection.commit()
    LOGGER.info("Saved preferences: %s", preferences.model_dump())
