# SymKernel - Simplification Cache
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Process-wide bounded LRU cache of simplified expressions.

The cache is created on first use and emptied with ``clear_cache()``. Keys
are built by the simplifier from the expression plus the float/exact kind of
its numeric leaves, since ``Const(2) == Const(2.0)`` structurally. All
access goes through a lock; a caller that finds the lock held skips the cache
instead of waiting.
"""

from __future__ import annotations
from collections import OrderedDict
import logging
import threading
from typing import Hashable, NamedTuple, Optional

from .expr import Expr

logger = logging.getLogger(__name__)


class CacheInfo(NamedTuple):
    hits: int
    misses: int
    evictions: int
    bypasses: int
    size: int
    maxsize: int


class SimplifyCache:
    """Bounded LRU map from expression to simplified expression."""

    def __init__(self, maxsize: int = 1024):
        self.maxsize = maxsize
        self._data: OrderedDict[Hashable, Expr] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.bypasses = 0

    def get(self, key: Hashable) -> Optional[Expr]:
        if not self._lock.acquire(blocking=False):
            self.bypasses += 1
            return None
        try:
            value = self._data.get(key)
            if value is None:
                self.misses += 1
                return None
            self._data.move_to_end(key)
            self.hits += 1
            return value
        finally:
            self._lock.release()

    def put(self, key: Hashable, value: Expr) -> None:
        if self.maxsize <= 0:
            return
        if not self._lock.acquire(blocking=False):
            self.bypasses += 1
            return
        try:
            if key in self._data:
                self._data.move_to_end(key)
                self._data[key] = value
                return
            while len(self._data) >= self.maxsize:
                self._data.popitem(last=False)
                self.evictions += 1
            self._data[key] = value
        finally:
            self._lock.release()

    def resize(self, maxsize: int) -> None:
        with self._lock:
            self.maxsize = maxsize
            while len(self._data) > max(maxsize, 0):
                self._data.popitem(last=False)
                self.evictions += 1

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self.hits = self.misses = self.evictions = self.bypasses = 0

    def __len__(self) -> int:
        return len(self._data)

    def info(self) -> CacheInfo:
        return CacheInfo(self.hits, self.misses, self.evictions, self.bypasses,
                         len(self._data), self.maxsize)


_cache: Optional[SimplifyCache] = None
_init_lock = threading.Lock()


def get_cache(maxsize: int = 1024) -> SimplifyCache:
    """The process-wide cache, created on first use."""
    global _cache
    if _cache is None:
        with _init_lock:
            if _cache is None:
                logger.debug("Creating simplification cache (maxsize=%d)", maxsize)
                _cache = SimplifyCache(maxsize)
    if _cache.maxsize != maxsize:
        _cache.resize(maxsize)
    return _cache


def clear_cache() -> None:
    """Drop every cached entry and reset the counters."""
    if _cache is not None:
        _cache.clear()


def cache_info() -> CacheInfo:
    if _cache is None:
        return CacheInfo(0, 0, 0, 0, 0, 0)
    return _cache.info()
