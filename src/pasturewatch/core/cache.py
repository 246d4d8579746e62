"""Caller-owned result cache.

The analytics are pure, so caching belongs to whoever calls them. A
`ResultCache` is an ordinary value: the caller creates it, passes it around
and decides when to clear it. Nothing here is module-global.

Timestamps are supplied by the caller (seconds, e.g. `time.monotonic()`),
which keeps expiry deterministic under test.
"""

from dataclasses import dataclass, field
from typing import Any

from pasturewatch.core.config import Settings, settings

DEFAULT_TTL_SECONDS = 300.0  # 5 minutes


def make_key(*parts: Any, **filters: Any) -> tuple:
    """Build a cache key from a period and filter parameters.

    Keyword filters are sorted so the key does not depend on argument order.
    """
    return (*parts, *sorted(filters.items()))


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload with the time it was stored."""

    key: tuple
    timestamp: float
    payload: Any

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return 0 <= now - self.timestamp < ttl_seconds


@dataclass
class ResultCache:
    """Explicit TTL cache keyed by period and filters."""

    ttl_seconds: float = DEFAULT_TTL_SECONDS
    entries: dict[tuple, CacheEntry] = field(default_factory=dict)

    def __post_init__(self):
        if self.ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "ResultCache":
        """Empty cache with the TTL from application settings (CACHE_TTL_SECONDS)."""
        source = source or settings
        return cls(ttl_seconds=source.cache_ttl_seconds)

    def get(self, key: tuple, now: float) -> Any | None:
        """Return the cached payload, or None if missing or expired."""
        entry = self.entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(now, self.ttl_seconds):
            del self.entries[key]
            return None
        return entry.payload

    def put(self, key: tuple, payload: Any, now: float) -> CacheEntry:
        entry = CacheEntry(key=key, timestamp=now, payload=payload)
        self.entries[key] = entry
        return entry

    def invalidate(self, key: tuple | None = None) -> None:
        """Drop one entry, or everything when no key is given."""
        if key is None:
            self.entries.clear()
        else:
            self.entries.pop(key, None)

    def purge_expired(self, now: float) -> int:
        """Remove expired entries. Returns how many were dropped."""
        expired = [k for k, e in self.entries.items() if not e.is_fresh(now, self.ttl_seconds)]
        for k in expired:
            del self.entries[k]
        return len(expired)
