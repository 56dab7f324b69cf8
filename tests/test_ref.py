"""
Tests for CacheRef.

Run with: pytest tests/test_ref.py -v
"""

import threading

import pytest

from persistent_lru.cache.lru import PersistentLRUCache
from persistent_lru.cache.ref import CacheRef


class TestCacheRef:
    """Tests for the shared cache handle."""

    def test_put_and_get(self):
        """Values stored through the ref can be read back."""
        ref = CacheRef.with_capacity(2)

        assert ref.put("a", 1) is None
        assert ref.get("a") == 1
        assert ref.get("missing") is None

    def test_eviction_counted(self):
        """Evictions are returned and counted."""
        ref = CacheRef.with_capacity(1)
        ref.put("a", 1)

        evicted = ref.put("b", 2)

        assert evicted == ("a", 1)
        assert ref.evictions == 1
        assert "a" not in ref
        assert len(ref) == 1

    def test_get_publishes_refresh(self):
        """A hit through the ref updates recency of the current value."""
        ref = CacheRef.with_capacity(2)
        ref.put("a", 1)
        ref.put("b", 2)

        ref.get("a")
        evicted = ref.put("c", 3)

        assert evicted == ("b", 2)

    def test_snapshot_survives_updates(self):
        """Values read from current stay unchanged."""
        ref = CacheRef(PersistentLRUCache(2))
        ref.put("a", 1)
        snapshot = ref.current

        ref.put("b", 2)
        ref.remove("a")

        assert dict(snapshot.entries) == {"a": 1}
        assert dict(ref.current.entries) == {"b": 2}

    def test_remove(self):
        """remove returns the dropped pair."""
        ref = CacheRef.with_capacity(2)
        ref.put("a", 1)

        assert ref.remove("a") == ("a", 1)
        assert ref.remove("a") is None
        assert ref.removals == 1
        assert ref.evictions == 0

    def test_removals_separate_from_evictions(self):
        """Evictions count only what the cache pushed out on put."""
        ref = CacheRef.with_capacity(1)
        ref.put("a", 1)
        ref.put("b", 2)
        ref.remove("b")

        assert ref.evictions == 1
        assert ref.removals == 1
        assert len(ref) == 0

    def test_concurrent_puts(self):
        """No update is lost when several threads put at once."""
        ref = CacheRef.with_capacity(8)
        per_thread = 200
        threads = [
            threading.Thread(
                target=lambda t=t: [ref.put((t, i), i) for i in range(per_thread)]
            )
            for t in range(4)
        ]

        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert ref.current.next_stamp == 4 * per_thread
        assert len(ref) == 8
        assert ref.evictions == 4 * per_thread - 8

    def test_repr(self):
        """Ref has readable repr."""
        ref = CacheRef.with_capacity(3)

        assert "evictions=0" in repr(ref)
        assert "removals=0" in repr(ref)
        assert "capacity=3" in repr(ref)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
