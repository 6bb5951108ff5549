"""
Caching of fetched probability series.

The cache is an explicit object owned by the caller (one per process, per
batch, or per test) rather than module state. How long entries live is decided
by an injected expiry policy; the clock is injectable too so expiry can be
tested without sleeping.
"""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable, Generic, Hashable, Protocol, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


class ExpiryPolicy(Protocol):
    """Decides whether an entry stored at ``stored_at`` is still fresh at ``now``."""

    def is_fresh(self, stored_at: float, now: float) -> bool:
        ...


class NoExpiry:
    """Entries never expire (finished games do not change)."""

    def is_fresh(self, stored_at: float, now: float) -> bool:
        return True


class TTLPolicy:
    """Entries expire ``ttl_seconds`` after they were stored."""

    def __init__(self, ttl_seconds: float):
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be non-negative, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds

    def is_fresh(self, stored_at: float, now: float) -> bool:
        return now - stored_at < self.ttl_seconds


class ProbabilityCache(Generic[V]):
    """
    Key -> value store for probability series, keyed by match identifier.

    Usage:
        cache = ProbabilityCache(TTLPolicy(300))
        series = cache.get_or_load("401772839", fetch_series)

    Thread-safe: batch scoring may share one cache across workers.
    """

    def __init__(
        self,
        policy: ExpiryPolicy | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.policy = policy or NoExpiry()
        self.clock = clock
        self._entries: dict[Hashable, tuple[float, V]] = {}
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> V | None:
        """Return a fresh cached value, or None (expired entries are dropped)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None

            stored_at, value = entry
            if not self.policy.is_fresh(stored_at, self.clock()):
                del self._entries[key]
                self.misses += 1
                return None

            self.hits += 1
            return value

    def put(self, key: Hashable, value: V) -> None:
        with self._lock:
            self._entries[key] = (self.clock(), value)

    def get_or_load(self, key: Hashable, loader: Callable[[Hashable], V | None]) -> V | None:
        """
        Return the cached value for key, loading and storing it on a miss.

        Loader results of None are not cached, so a failed fetch is retried
        next time.
        """
        value = self.get(key)
        if value is not None:
            return value

        value = loader(key)
        if value is not None:
            self.put(key, value)
        else:
            logger.debug(f"Loader returned no series for {key}")
        return value

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None
