"""
Configuration for persistent LRU caches.

A config is a plain frozen dataclass: every option is explicit and typed, and
an invalid capacity is rejected the moment the config is built rather than on
first use.
"""

from dataclasses import dataclass

from .errors import check_capacity


@dataclass(frozen=True)
class CacheConfig:
    """
    Configuration for a PersistentLRUCache.

    The capacity is fixed for the lifetime of a cache value and of every value
    derived from it. Zero is allowed: such a cache never retains anything and
    reports every offered pair as evicted.
    """
    # Maximum number of entries kept before LRU eviction kicks in
    capacity: int = 128

    # Label used in log records, handy when several caches share a process
    name: str = "lru"

    # Emit a DEBUG record every time an eviction is reported
    log_evictions: bool = True

    def __post_init__(self):
        check_capacity(self.capacity)
