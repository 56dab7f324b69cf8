"""
persistent-lru - Immutable least-recently-used caches for Python.

Every update returns a new cache value and leaves the old one intact, so a
cache can be shared across threads, kept as a snapshot, or rolled back by
simply holding on to an earlier value.

Main components:
- PersistentLRUCache: Bounded cache; get/put/remove return new values
- CacheRef: Thread-safe "current value" holder for shared use
- CacheConfig: Capacity and logging options
"""

from .cache import (
    CacheRef,
    Eviction,
    GetResult,
    PersistentLRUCache,
    PutResult,
    from_items,
    get,
    put,
)
from .config import CacheConfig
from .errors import InvalidCapacityError

__version__ = "0.1.0"

__all__ = [
    # Config
    "CacheConfig",
    "InvalidCapacityError",
    # Cache
    "PersistentLRUCache",
    "Eviction",
    "GetResult",
    "PutResult",
    "from_items",
    "get",
    "put",
    # Shared reference
    "CacheRef",
]
