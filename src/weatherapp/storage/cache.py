from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .db import open_db


def _utc(value: datetime | None = None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(slots=True)
class CacheEntry:
    key: str
    payload: Any
    fetched_at: datetime
    ttl_seconds: int

    def age_seconds(self, now: datetime | None = None) -> float:
        return (_utc(now) - self.fetched_at).total_seconds()

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.age_seconds(now) > self.ttl_seconds


def set_cache_entry(
    db_path: Path,
    key: str,
    payload: Any,
    *,
    ttl_seconds: int,
    fetched_at: datetime | None = None,
) -> None:
    if ttl_seconds < 0:
        raise ValueError("ttl_seconds must be >= 0")

    with open_db(db_path) as connection:
        connection.execute(
            """
            INSERT INTO cache_entries (key, json, fetched_at, ttl_seconds)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                json=excluded.json,
                fetched_at=excluded.fetched_at,
                ttl_seconds=excluded.ttl_seconds
            """,
            (
                key,
                json.dumps(payload, ensure_ascii=False, separators=(",", ":")),
                _utc(fetched_at).isoformat(),
                ttl_seconds,
            ),
        )
        connection.commit()


def get_cache_entry(db_path: Path, key: str) -> CacheEntry | None:
    with open_db(db_path) as connection:
        row = connection.execute(
            "SELECT key, json, fetched_at, ttl_seconds FROM cache_entries WHERE key = ?",
            (key,),
        ).fetchone()

    if row is None:
        return None
    return CacheEntry(
        key=row["key"],
        payload=json.loads(row["json"]),
        fetched_at=_utc(datetime.fromisoformat(row["fetched_at"])),
        ttl_seconds=int(row["ttl_seconds"]),
    )


def get_cache_payload(db_path: Path, key: str, *, allow_expired: bool = False) -> Any | None:
    entry = get_cache_entry(db_path, key)
    if entry is None:
        return None
    if entry.is_expired() and not allow_expired:
        return None
    return entry.payload


def prune_expired_entries(db_path: Path, *, now: datetime | None = None) -> int:
    reference = _utc(now)
    expired: list[str] = []

    with open_db(db_path) as connection:
        rows = connection.execute("SELECT key, fetched_at, ttl_seconds FROM cache_entries").fetchall()
        for row in rows:
            fetched_at = _utc(datetime.fromisoformat(row["fetched_at"]))
            if (reference - fetched_at).total_seconds() > int(row["ttl_seconds"]):
                expired.append(row["key"])
        connection.executemany("DELETE FROM cache_entries WHERE key = ?", [(key,) for key in expired])
        connection.commit()

    return len(expired)
