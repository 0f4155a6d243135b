"""In-memory response cache with per-entry TTL."""

import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable


@dataclass
class CacheEntry:
    value: Any
    stored_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.stored_at < self.ttl


class ResponseCache:
    """
    Provider responses keyed by request identity.

    Expired entries are kept so callers can fall back to them when every
    live attempt fails.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry] = {}

    def get(self, key: Hashable) -> tuple[Any, bool]:
        """
        Look up a cached value.

        Returns:
            (value, is_fresh). value is None when nothing was ever stored.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None, False
        return entry.value, entry.is_fresh(self._clock())

    def get_fresh(self, key: Hashable) -> Any:
        value, fresh = self.get(key)
        return value if fresh else None

    def put(self, key: Hashable, value: Any, ttl: float) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock(), ttl=ttl)

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def get_cache_status(self) -> dict[str, dict]:
        """Age and freshness of every cached entry."""
        now = self._clock()
        return {
            str(key): {
                "age_seconds": round(now - entry.stored_at, 1),
                "ttl": entry.ttl,
                "fresh": entry.is_fresh(now),
            }
            for key, entry in self._entries.items()
        }
