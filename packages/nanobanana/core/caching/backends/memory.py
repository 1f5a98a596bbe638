"""Bounded in-memory LRU tier for the image cache."""

from __future__ import annotations

import logging
from collections import OrderedDict

from nanobanana.core.caching.models import CacheEntry, CacheKey, CacheLimits

logger = logging.getLogger(__name__)


class MemoryLRUCache:
    """
    In-memory cache bounded by entry count and aggregate byte cost.

    When either bound is exceeded, least-recently-used entries are evicted
    until both bounds hold. Lookups refresh recency.
    """

    def __init__(self, limits: CacheLimits | None = None) -> None:
        self.limits = limits or CacheLimits()
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._total_cost = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key.fingerprint in self._entries

    @property
    def total_cost(self) -> int:
        """Aggregate byte cost of resident entries."""
        return self._total_cost

    def get(self, key: CacheKey) -> CacheEntry | None:
        """Return the entry for key and mark it most recently used."""
        entry = self._entries.get(key.fingerprint)
        if entry is None:
            return None
        self._entries.move_to_end(key.fingerprint)
        return entry

    def put(self, entry: CacheEntry) -> None:
        """Insert or replace an entry, then evict down to the limits."""
        fingerprint = entry.key.fingerprint
        previous = self._entries.pop(fingerprint, None)
        if previous is not None:
            self._total_cost -= previous.cost

        self._entries[fingerprint] = entry
        self._total_cost += entry.cost
        self._evict()

    def remove(self, key: CacheKey) -> None:
        """Drop an entry if present."""
        entry = self._entries.pop(key.fingerprint, None)
        if entry is not None:
            self._total_cost -= entry.cost

    def clear(self) -> None:
        """Drop all entries."""
        self._entries.clear()
        self._total_cost = 0

    def _evict(self) -> None:
        while self._entries and (
            len(self._entries) > self.limits.count_limit
            or self._total_cost > self.limits.cost_limit_bytes
        ):
            fingerprint, evicted = self._entries.popitem(last=False)
            self._total_cost -= evicted.cost
            logger.debug("Evicted %s from memory cache (%d bytes)", fingerprint[:12], evicted.cost)
