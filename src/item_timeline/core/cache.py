"""Thread-safe LRU memoisation used by the lookup helpers."""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

__all__ = ["LRUCache", "CacheStats", "DEFAULT_CACHE_SIZE"]

_K = TypeVar("_K", bound=Hashable)
_V = TypeVar("_V")

DEFAULT_CACHE_SIZE = 256


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Snapshot of cache effectiveness counters."""

    hits: int
    misses: int
    size: int
    maxsize: int


class LRUCache(Generic[_K, _V]):
    """Bounded ``key -> value`` memo evicting the least recently used entry.

    A ``maxsize`` of ``0`` disables storage; every lookup then calls the
    factory.
    """

    __slots__ = ("_maxsize", "_data", "_lock", "_hits", "_misses")

    def __init__(self, *, maxsize: int = DEFAULT_CACHE_SIZE) -> None:
        size = int(maxsize)
        if size < 0:
            raise ValueError("maxsize must be >= 0")
        self._maxsize = size
        self._data: "OrderedDict[_K, _V]" = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def get_or_create(self, key: _K, factory: Callable[[], _V]) -> _V:
        """Return the cached value for ``key`` or store ``factory()``."""

        with self._lock:
            if key in self._data:
                self._hits += 1
                self._data.move_to_end(key)
                return self._data[key]
            self._misses += 1
            value = factory()
            if self._maxsize == 0:
                return value
            self._data[key] = value
            while len(self._data) > self._maxsize:
                self._data.popitem(last=False)
            return value

    def invalidate(self, predicate: Callable[[_K], bool]) -> int:
        """Drop the entries whose key matches ``predicate``; return how many."""

        with self._lock:
            doomed = [key for key in self._data if predicate(key)]
            for key in doomed:
                del self._data[key]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                size=len(self._data),
                maxsize=self._maxsize,
            )
