"""
Bounded in-memory caches for redirect and article lookups.

Entries are keyed by normalized title and evicted oldest-first once the
cache grows past its capacity. Reads do not refresh an entry's position.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Generic, Iterator, TypeVar

from wikibingo.wikipedia.titles import normalize_title

logger = logging.getLogger(__name__)

V = TypeVar("V")


class BoundedCache(Generic[V]):
    """
    Insertion-ordered cache with FIFO eviction.

    One instance is created per game session and handed to the component
    that owns it, so every test and every game starts from an empty cache.
    """

    def __init__(self, max_size: int, name: str = "cache") -> None:
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries kept
            name: Label used in log messages
        """
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self.name = name
        self._entries: OrderedDict[str, V] = OrderedDict()
        self._hits = 0
        self._misses = 0

    def get(self, title: str) -> V | None:
        key = normalize_title(title)
        if key in self._entries:
            self._hits += 1
            logger.debug(f"{self.name} HIT: {key}")
            return self._entries[key]
        self._misses += 1
        logger.debug(f"{self.name} MISS: {key}")
        return None

    def put(self, title: str, value: V) -> None:
        """Store a value; overwriting keeps the original insertion position."""
        key = normalize_title(title)
        self._entries[key] = value

        while len(self._entries) > self.max_size:
            evicted_key, _ = self._entries.popitem(last=False)
            logger.debug(f"{self.name} evicted: {evicted_key}")

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def keys(self) -> list[str]:
        """Normalized keys, oldest first."""
        return list(self._entries)

    def __contains__(self, title: object) -> bool:
        return isinstance(title, str) and normalize_title(title) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def get_stats(self) -> dict:
        """Return cache statistics."""
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "max_size": self.max_size,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total else 0.0,
        }
