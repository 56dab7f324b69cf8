"""
PersistentLRUCache - a bounded key/value cache that never changes in place.

KEY CONCEPT: Persistent values
Every operation that would normally mutate a cache returns a NEW cache value
instead. The value you started from is still there, unchanged, and can keep
being used:

    c0 = PersistentLRUCache(capacity=2)
    c1, _ = c0.put("a", 1)       # c0 is still empty
    c2, _ = c1.put("b", 2)       # c1 still holds only "a"

KEY CONCEPT: Logical timestamps
Recency is tracked with an integer stamp instead of wall-clock time. Each
insert, update or hit takes the next stamp, so no two entries ever share
one and "least recently used" is never ambiguous:

    stamp -> key            key -> stamp
    {0: "a", 1: "b"}        {"a": 0, "b": 1}
    get("a")  ->  {1: "b", 2: "a"}   (b is now the LRU entry)

The stamp -> key dict only ever gains keys larger than the ones it holds, so
its insertion order IS ascending stamp order and the LRU entry is always the
first item.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Generic, Iterable, Iterator, Mapping, NamedTuple, Optional, TypeVar

from ..config import CacheConfig
from ..errors import InvalidCapacityError, check_capacity

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class Eviction(NamedTuple, Generic[K, V]):
    """A (key, value) pair pushed out of, or refused by, a cache."""
    key: K
    value: V


class GetResult(NamedTuple, Generic[K, V]):
    """Result of a cache hit: the refreshed cache and the stored value."""
    cache: "PersistentLRUCache[K, V]"
    value: V


class PutResult(NamedTuple, Generic[K, V]):
    """Result of a put/remove: the new cache and what (if anything) left it."""
    cache: "PersistentLRUCache[K, V]"
    evicted: Optional[Eviction[K, V]]


@dataclass(frozen=True, init=False, repr=False, eq=False)
class PersistentLRUCache(Generic[K, V]):
    """
    Immutable LRU cache with a fixed capacity.

    Usage:
        cache = PersistentLRUCache(capacity=2)
        cache, _ = cache.put("a", 1)
        cache, _ = cache.put("b", 2)
        cache, value = cache.get("a")          # refreshes "a"
        cache, evicted = cache.put("c", 3)     # evicted == ("b", 2)

    Attributes:
        capacity: Maximum number of entries (zero means "keep nothing")
        next_stamp: Stamp the next insert/update/hit will receive
    """
    _config: CacheConfig
    _entries: dict[K, V]     # key -> value
    _stamps: dict[K, int]    # key -> stamp
    _order: dict[int, K]     # stamp -> key, ascending
    _next_stamp: int

    def __init__(
        self,
        capacity: Optional[int] = None,
        *,
        config: Optional[CacheConfig] = None,
    ):
        """
        Args:
            capacity: Maximum number of entries (default 128)
            config: Full configuration; if capacity is also given the two
                must agree

        Raises:
            InvalidCapacityError: capacity is invalid or contradicts config
        """
        if config is None:
            config = CacheConfig() if capacity is None else CacheConfig(capacity=capacity)
        else:
            check_capacity(config.capacity)
            if capacity is not None:
                check_capacity(capacity)
                if capacity != config.capacity:
                    raise InvalidCapacityError(
                        capacity,
                        f"capacity {capacity!r} conflicts with "
                        f"config.capacity={config.capacity!r}",
                    )
        _set = object.__setattr__
        _set(self, "_config", config)
        _set(self, "_entries", {})
        _set(self, "_stamps", {})
        _set(self, "_order", {})
        _set(self, "_next_stamp", 0)

    @classmethod
    def empty(cls, capacity: int) -> "PersistentLRUCache[K, V]":
        """An empty cache holding at most `capacity` entries."""
        return cls(capacity)

    @classmethod
    def from_config(cls, config: CacheConfig) -> "PersistentLRUCache[K, V]":
        return cls(config=config)

    def _derive(
        self,
        entries: dict[K, V],
        stamps: dict[K, int],
        order: dict[int, K],
        next_stamp: int,
    ) -> "PersistentLRUCache[K, V]":
        """Build a sibling value sharing this one's config."""
        new = object.__new__(type(self))
        _set = object.__setattr__
        _set(new, "_config", self._config)
        _set(new, "_entries", entries)
        _set(new, "_stamps", stamps)
        _set(new, "_order", order)
        _set(new, "_next_stamp", next_stamp)
        return new

    # -- Core operations ----------------------------------------------------

    def get(self, key: K) -> Optional[GetResult[K, V]]:
        """
        Look up `key`, refreshing its recency on a hit.

        Returns:
            GetResult(cache, value) on a hit, None on a miss. A miss leaves
            nothing to replace, so callers keep using the cache they have.
        """
        if key not in self._entries:
            return None

        stamp = self._next_stamp
        stamps = dict(self._stamps)
        order = dict(self._order)

        del order[stamps[key]]
        order[stamp] = key
        stamps[key] = stamp

        # entries are untouched by a hit, so the dict is shared as-is
        new = self._derive(self._entries, stamps, order, stamp + 1)
        return GetResult(new, self._entries[key])

    def put(self, key: K, value: V) -> PutResult[K, V]:
        """
        Store `value` under `key` with a fresh stamp.

        Eviction rules:
        - capacity 0: nothing is stored, the offered pair comes back as evicted
        - existing key: the old pair is evicted only if the value changed
        - full cache, new key: the least recently used pair is evicted
        - otherwise nothing is evicted

        Returns:
            PutResult(cache, evicted)
        """
        if self.capacity <= 0:
            evicted = Eviction(key, value)
            self._report(evicted, "disabled")
            return PutResult(self, evicted)

        stamp = self._next_stamp
        entries = dict(self._entries)
        stamps = dict(self._stamps)
        order = dict(self._order)

        evicted = None
        if key in entries:
            old = entries[key]
            del order[stamps[key]]
            if old != value:
                evicted = Eviction(key, old)
                self._report(evicted, "replaced")
        elif len(entries) >= self.capacity:
            lru_stamp, lru_key = next(iter(order.items()))
            del order[lru_stamp]
            del stamps[lru_key]
            evicted = Eviction(lru_key, entries.pop(lru_key))
            self._report(evicted, "capacity")

        entries[key] = value
        stamps[key] = stamp
        order[stamp] = key

        return PutResult(self._derive(entries, stamps, order, stamp + 1), evicted)

    def remove(self, key: K) -> PutResult[K, V]:
        """
        Drop `key` from the cache.

        Nothing is inserted, so the stamp counter does not move. Removing an
        absent key returns this same cache and no eviction.
        """
        if key not in self._entries:
            return PutResult(self, None)

        entries = dict(self._entries)
        stamps = dict(self._stamps)
        order = dict(self._order)

        del order[stamps.pop(key)]
        evicted = Eviction(key, entries.pop(key))
        self._report(evicted, "removed")

        return PutResult(self._derive(entries, stamps, order, self._next_stamp), evicted)

    # -- Read-only views (never touch recency) ------------------------------

    def peek(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Value for `key` without refreshing it, or `default`."""
        return self._entries.get(key, default)

    def stamp_of(self, key: K) -> Optional[int]:
        return self._stamps.get(key)

    def lru_entry(self) -> Optional[Eviction[K, V]]:
        """The pair the next at-capacity insert of a new key would evict."""
        if not self._order:
            return None
        key = next(iter(self._order.values()))
        return Eviction(key, self._entries[key])

    def usage_order(self) -> tuple[tuple[int, K], ...]:
        """(stamp, key) pairs, least recently used first."""
        return tuple(self._order.items())

    def keys(self) -> Iterator[K]:
        return iter(self._order.values())

    def values(self) -> Iterator[V]:
        return (self._entries[key] for key in self._order.values())

    def items(self) -> Iterator[tuple[K, V]]:
        """(key, value) pairs, least recently used first."""
        return ((key, self._entries[key]) for key in self._order.values())

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def capacity(self) -> int:
        return self._config.capacity

    @property
    def next_stamp(self) -> int:
        return self._next_stamp

    @property
    def entries(self) -> Mapping[K, V]:
        """Read-only view of key -> value."""
        return MappingProxyType(self._entries)

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.capacity

    def __contains__(self, key) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return self.keys()

    def __eq__(self, other) -> bool:
        # Stamps are bookkeeping; two caches are equal when they would behave
        # the same from here on.
        if not isinstance(other, PersistentLRUCache):
            return NotImplemented
        return (
            self.capacity == other.capacity
            and list(self.items()) == list(other.items())
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"PersistentLRUCache(capacity={self.capacity}, "
            f"size={len(self)}, "
            f"next_stamp={self._next_stamp})"
        )

    def _report(self, evicted: Eviction[K, V], reason: str) -> None:
        if self._config.log_evictions:
            logger.debug(
                "%s: evicted key=%r (%s)", self._config.name, evicted.key, reason
            )


def get(cache: PersistentLRUCache[K, V], key: K) -> Optional[GetResult[K, V]]:
    """Function form of PersistentLRUCache.get."""
    return cache.get(key)


def put(cache: PersistentLRUCache[K, V], key: K, value: V) -> PutResult[K, V]:
    """Function form of PersistentLRUCache.put."""
    return cache.put(key, value)


def from_items(
    capacity: Optional[int],
    items: Iterable[tuple[K, V]],
    config: Optional[CacheConfig] = None,
) -> PersistentLRUCache[K, V]:
    """
    Convenience function: fold put() over `items`, starting empty.

    Pass `capacity=None` to take the capacity from `config`; passing both
    with different capacities raises InvalidCapacityError.

    Usage:
        cache = from_items(2, [("a", 1), ("b", 2), ("c", 3)])
        list(cache.keys())  # ["b", "c"]
    """
    cache = PersistentLRUCache(capacity, config=config)
    for key, value in items:
        cache, _ = cache.put(key, value)
    return cache
