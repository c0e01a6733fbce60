"""Bounded LRU cache for pod metadata."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Hashable, Optional

CacheKey = tuple[str, str]


class ThreadSafeLRUCache:
    """Fixed-capacity key/value store evicting the least recently used entry.

    Both ``get`` and ``put`` count as use. ``None`` is reserved to signal a
    miss, so it cannot be stored; callers store an empty dict for "known,
    no labels".
    """

    def __init__(self, capacity: int) -> None:
        """Initialize the cache.

        Args:
            capacity: Maximum number of entries (must be >= 1)

        Raises:
            ValueError: If capacity is smaller than 1
        """
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._data: OrderedDict[Hashable, dict[str, str]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[dict[str, str]]:
        """Get a value and mark it as most recently used.

        Args:
            key: Cache key

        Returns:
            Cached value or None on miss
        """
        with self._lock:
            value = self._data.get(key)
            if value is None:
                return None
            self._data.move_to_end(key)
            return value

    def put(self, key: Hashable, value: dict[str, str]) -> None:
        """Insert or overwrite a value, evicting the oldest entry when full.

        Args:
            key: Cache key
            value: Value to store (never None)

        Raises:
            ValueError: If value is None
        """
        if value is None:
            raise ValueError("Cannot cache None, store an empty mapping instead")
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
            elif len(self._data) >= self.capacity:
                self._data.popitem(last=False)
            self._data[key] = value

    def keys(self) -> list[Hashable]:
        """Snapshot of keys from least to most recently used."""
        with self._lock:
            return list(self._data.keys())

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: object) -> bool:
        # does not touch recency
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


def make_cache_key(namespace: str, pod_name: str) -> CacheKey:
    """Create a cache key for a pod.

    Args:
        namespace: Pod namespace
        pod_name: Pod name

    Returns:
        Cache key tuple
    """
    return (namespace, pod_name)
