"""
CacheManager - In-memory cache of successful GET responses.

Features:
- TTL per entry, checked lazily on lookup (no background sweep)
- Last write wins; set() always resets the expiry
- Optional size bound with oldest-first eviction (unbounded by default)
- Injectable clock for deterministic expiry

Mutations are synchronous. The client runs on a single event loop and never
awaits in the middle of a cache operation, so no lock is needed.
"""

import json
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable

from loguru import logger


@dataclass
class CacheEntry:
    """A single cache entry with metadata."""

    data: Any
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Readable only while now < expires_at."""
        return now >= self.expires_at


class CacheManager:
    """
    Keyed response cache with expiry.

    Usage:
        cache = CacheManager(ttl=timedelta(minutes=5))

        key = cache.generate_key(url, params)
        cached = cache.get(key)
        if cached is None:
            cached = await fetch()
            cache.set(key, cached)
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=5),
        max_size: int | None = None,
        clock: Callable[[], float] = time.time,
        debug: bool = False,
    ):
        self._memory: dict[str, CacheEntry] = {}
        self._ttl = ttl
        self._max_size = max_size
        self._clock = clock
        self._debug = debug
        self._stats = CacheStats()

    @staticmethod
    def generate_key(url: str, params: dict[str, Any] | None = None) -> str:
        """
        Generate a cache key from the full URL and query params.

        Params are serialized in the order given, so the same filters passed
        in a different order produce a different key.
        """
        param_string = json.dumps(params, default=str) if params else ""
        return f"{url}:{param_string}"

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None on miss or expiry."""
        entry = self._memory.get(key)
        if entry is None:
            self._stats.misses += 1
            return None

        if entry.is_expired(self._clock()):
            del self._memory[key]
            self._stats.misses += 1
            self._stats.expirations += 1
            self._log(f"EXPIRED: {key[:80]}")
            return None

        self._stats.hits += 1
        self._log(f"HIT: {key[:80]}")
        return entry.data

    def set(self, key: str, data: Any) -> None:
        """Store data under key, replacing any prior entry."""
        now = self._clock()
        entry = CacheEntry(
            data=data,
            created_at=now,
            expires_at=now + self._ttl.total_seconds(),
        )

        if (
            self._max_size is not None
            and key not in self._memory
            and len(self._memory) >= self._max_size
        ):
            self._evict_oldest()

        self._memory[key] = entry
        self._log(f"SET: {key[:80]} (TTL: {self._ttl.total_seconds()}s)")

    def delete(self, key: str) -> bool:
        """Delete a specific key from cache."""
        if key in self._memory:
            del self._memory[key]
            self._log(f"DELETE: {key[:80]}")
            return True
        return False

    def invalidate(self, pattern: str) -> int:
        """
        Invalidate all keys containing a substring.

        Returns:
            Number of entries invalidated
        """
        keys_to_delete = [k for k in self._memory if pattern in k]
        for key in keys_to_delete:
            del self._memory[key]

        if keys_to_delete:
            self._log(f"INVALIDATE: {len(keys_to_delete)} entries matching '{pattern}'")

        return len(keys_to_delete)

    def clear(self) -> None:
        """Clear all cache entries."""
        count = len(self._memory)
        self._memory.clear()
        self._log(f"CLEAR: {count} entries removed")

    def _evict_oldest(self) -> None:
        oldest_key = min(self._memory, key=lambda k: self._memory[k].created_at)
        del self._memory[oldest_key]
        self._stats.evictions += 1
        self._log(f"EVICT: {oldest_key[:80]}")

    def __len__(self) -> int:
        return len(self._memory)

    def __contains__(self, key: str) -> bool:
        return key in self._memory

    def get_stats(self) -> "CacheStats":
        """Get cache statistics."""
        self._stats.size = len(self._memory)
        self._stats.max_size = self._max_size
        return self._stats

    def _log(self, message: str) -> None:
        """Log debug message if debug mode is enabled."""
        if self._debug:
            logger.debug(f"[CacheManager] {message}")


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    expirations: int = 0
    evictions: int = 0
    size: int = 0
    max_size: int | None = None

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "expirations": self.expirations,
            "evictions": self.evictions,
            "size": self.size,
            "max_size": self.max_size,
            "hit_rate": f"{self.hit_rate:.2%}",
        }
