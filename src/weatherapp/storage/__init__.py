from .cache import (
    CacheEntry,
    get_cache_entry,
    get_cache_payload,
    prune_expired_entries,
    set_cache_entry,
)
from .db import initialize_database
from .preferences import load_preferences, save_preferences

__all__ = [
    "CacheEntry",
    "get_cache_entry",
    "get_cache_payload",
    "initialize_database",
    "load_preferences",
    "prune_expired_entries",
    "save_preferences",
    "set_cache_entry",
]
