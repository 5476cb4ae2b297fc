"""Bounded similarity cache shared across header matching tasks."""

import threading
from collections import deque
from typing import Any, Optional


def pair_key(text_a: str, text_b: str) -> str:
    """Order-independent key for a pair of compared strings."""
    first, second = sorted((text_a, text_b))
    return f"{first}||{second}"


class SimilarityCache:
    """In-memory cache for similarity scores and embedding vectors.

    Eviction is strict FIFO by insertion order: once ``capacity`` entries are
    stored, inserting a new key drops the oldest inserted key, no matter how
    often it has been read. The insertion queue is kept apart from the entry
    map so eviction order is explicit.

    Thread-safe implementation using a lock around every read and insert.
    """

    def __init__(self, capacity: int = 1000):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._entries: dict[str, Any] = {}
        self._order: deque[str] = deque()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: str) -> Optional[Any]:
        """
        Retrieve a cached value.

        Args:
            key: The cache key (use pair_key for pairwise scores)

        Returns:
            The cached value, or None if absent
        """
        with self._lock:
            if key in self._entries:
                self._hits += 1
                return self._entries[key]
            self._misses += 1
            return None

    def put(self, key: str, value: Any) -> None:
        """
        Store a value, evicting the oldest entry if the cache is full.

        Re-storing an existing key replaces its value without moving it in
        the eviction queue.
        """
        with self._lock:
            if key in self._entries:
                self._entries[key] = value
                return

            while len(self._entries) >= self._capacity:
                oldest = self._order.popleft()
                del self._entries[oldest]
                self._evictions += 1

            self._entries[key] = value
            self._order.append(key)

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def keys(self) -> list[str]:
        """Keys from oldest to newest insertion."""
        with self._lock:
            return list(self._order)

    def clear(self) -> None:
        """Clear all entries and counters."""
        with self._lock:
            self._entries.clear()
            self._order.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def size(self) -> int:
        """Get the current cache size."""
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "capacity": self._capacity,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate": self._hits / lookups if lookups else 0.0,
            }
