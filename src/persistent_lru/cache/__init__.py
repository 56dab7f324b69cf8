"""
Cache components for persistent-lru.

Components:
- PersistentLRUCache: immutable, bounded key/value cache with LRU eviction
- Eviction / GetResult / PutResult: operation results
- CacheRef: thread-safe handle that publishes the current cache value
"""

from .lru import (
    Eviction,
    GetResult,
    PersistentLRUCache,
    PutResult,
    from_items,
    get,
    put,
)
from .ref import CacheRef

__all__ = [
    "CacheRef",
    "Eviction",
    "GetResult",
    "PersistentLRUCache",
    "PutResult",
    "from_items",
    "get",
    "put",
]
