"""
CacheRef - a shared, swappable handle on the "current" cache value.

PersistentLRUCache values are immutable, so many threads can read the same
value with no coordination. What they cannot do on their own is agree on
which value is current. CacheRef owns that one piece of shared state: each
operation runs against the current value and publishes the result under a
lock, so no update is lost between two writers.

    ref = CacheRef.with_capacity(2)
    ref.put("a", 1)
    snapshot = ref.current        # stays valid whatever happens next
    ref.put("b", 2)
"""

import threading
from typing import Generic, Optional, TypeVar

from .lru import Eviction, PersistentLRUCache

K = TypeVar("K")
V = TypeVar("V")


class CacheRef(Generic[K, V]):
    """
    Thread-safe holder for a PersistentLRUCache.

    Reads of `current` never block. get/put/remove serialise on a lock
    because a hit also produces a new value (refreshed recency).
    """

    def __init__(self, cache: PersistentLRUCache[K, V]):
        self._cache = cache
        self._lock = threading.Lock()
        self._evictions = 0
        self._removals = 0

    @classmethod
    def with_capacity(cls, capacity: int) -> "CacheRef[K, V]":
        return cls(PersistentLRUCache(capacity))

    @property
    def current(self) -> PersistentLRUCache[K, V]:
        """The most recently published cache value."""
        return self._cache

    @property
    def evictions(self) -> int:
        """
        Pairs the cache pushed out through put(): capacity evictions, changed
        values on replace, and offers refused by a zero-capacity cache.
        Explicit remove() calls are counted in `removals` instead.
        """
        return self._evictions

    @property
    def removals(self) -> int:
        """Number of keys dropped by remove() through this ref so far."""
        return self._removals

    def get(self, key: K) -> Optional[V]:
        """Value for `key` (refreshing its recency), or None on a miss."""
        with self._lock:
            result = self._cache.get(key)
            if result is None:
                return None
            self._cache = result.cache
            return result.value

    def put(self, key: K, value: V) -> Optional[Eviction[K, V]]:
        """Store `value` under `key`; returns whatever the cache evicted."""
        with self._lock:
            self._cache, evicted = self._cache.put(key, value)
            if evicted is not None:
                self._evictions += 1
            return evicted

    def remove(self, key: K) -> Optional[Eviction[K, V]]:
        """Drop `key`; returns the removed pair, or None if it was absent."""
        with self._lock:
            self._cache, removed = self._cache.remove(key)
            if removed is not None:
                self._removals += 1
            return removed

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key) -> bool:
        return key in self._cache

    def __repr__(self) -> str:
        return (
            f"CacheRef({self._cache!r}, "
            f"evictions={self._evictions}, "
            f"removals={self._removals})"
        )
