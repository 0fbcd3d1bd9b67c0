"""
SIQS Result Cache

In-memory cache of SIQS results keyed by rounded location and Bortle scale.
Entries expire after a TTL and the least recently used entry is evicted
when the cache is full.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from cachetools import TTLCache

from stargazer.api.siqs.calculator import SiqsResult


logger = logging.getLogger(__name__)


__all__ = [
    "CacheKey",
    "CacheStats",
    "SiqsCache",
]


CacheKey = tuple[float, float, float]


@dataclass(frozen=True)
class CacheStats:
    """Cache counters."""

    hits: int
    misses: int
    size: int
    max_entries: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class SiqsCache:
    """
    TTL + LRU cache for SIQS results.

    Coordinates are rounded to ``precision`` decimal places (4 places is
    about 11 m) and the Bortle scale to one decimal, so nearby requests
    share an entry.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_entries: int = 100,
        precision: int = 4,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.precision = precision
        self._cache: TTLCache[CacheKey, SiqsResult] = TTLCache(maxsize=max_entries, ttl=ttl_seconds, timer=timer)
        self._hits = 0
        self._misses = 0

    def make_key(self, latitude: float, longitude: float, bortle: float) -> CacheKey:
        return (round(latitude, self.precision), round(longitude, self.precision), round(bortle, 1))

    def get(self, latitude: float, longitude: float, bortle: float) -> SiqsResult | None:
        key = self.make_key(latitude, longitude, bortle)
        result = self._cache.get(key)
        if result is None:
            self._misses += 1
            logger.debug(f"SIQS cache miss for {key}")
            return None
        self._hits += 1
        logger.debug(f"SIQS cache hit for {key}")
        return result

    def set(self, latitude: float, longitude: float, bortle: float, result: SiqsResult) -> None:
        self._cache[self.make_key(latitude, longitude, bortle)] = result

    def invalidate(self, latitude: float, longitude: float, bortle: float) -> bool:
        """Remove one entry. Returns True if it was present."""
        return self._cache.pop(self.make_key(latitude, longitude, bortle), None) is not None

    def clear(self) -> None:
        self._cache.clear()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        # Drop expired entries before counting
        self._cache.expire()
        return len(self._cache)

    def stats(self) -> CacheStats:
        return CacheStats(hits=self._hits, misses=self._misses, size=len(self), max_entries=self.max_entries)
