"""
Unit tests for the bounded FIFO cache.
"""

import pytest

from wikibingo.config import MAX_ARTICLE_CACHE_SIZE, MAX_REDIRECT_CACHE_SIZE
from wikibingo.wikipedia.cache import BoundedCache


class TestBoundedCache:
    """Test storage, keys and eviction."""

    def test_keys_are_normalized(self):
        cache = BoundedCache(10)
        cache.put("New York", "New York City")
        assert cache.get("new_york") == "New York City"
        assert "NEW   YORK" in cache

    def test_miss_returns_none(self):
        cache = BoundedCache(10)
        assert cache.get("Nothing") is None

    def test_never_exceeds_capacity(self):
        cache = BoundedCache(5)
        for i in range(20):
            cache.put(f"Title {i}", i)
            assert len(cache) <= 5

    def test_evicts_oldest_first(self):
        cache = BoundedCache(3)
        for name in ("A", "B", "C", "D"):
            cache.put(name, name)
        assert cache.keys() == ["b", "c", "d"]

    def test_reads_do_not_refresh_position(self):
        cache = BoundedCache(2)
        cache.put("A", 1)
        cache.put("B", 2)
        cache.get("A")
        cache.put("C", 3)
        assert "A" not in cache
        assert "B" in cache

    def test_overwrite_keeps_position(self):
        cache = BoundedCache(2)
        cache.put("A", 1)
        cache.put("B", 2)
        cache.put("a", 10)
        cache.put("C", 3)
        assert cache.get("A") is None
        assert cache.get("B") == 2

    def test_clear_and_stats(self):
        cache = BoundedCache(2, name="test")
        cache.put("A", 1)
        cache.get("A")
        cache.get("B")
        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5
        cache.clear()
        assert len(cache) == 0

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            BoundedCache(0)

    def test_default_capacities(self):
        assert MAX_REDIRECT_CACHE_SIZE == 200
        assert MAX_ARTICLE_CACHE_SIZE == 100
