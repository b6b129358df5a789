"""Query cache for derived results.

Aggregation functions never cache; callers that recompute the same result
repeatedly (report building, dashboards) hold a QueryCache and invalidate it
when the underlying records change.
"""

import logging
import time
from typing import Any, Callable, Hashable, Optional

logger = logging.getLogger('netball.cache')

CacheKey = tuple[str, Optional[Hashable], tuple]


class CacheEntry:
    """Cached value with an expiry time."""

    def __init__(self, data: Any, valid_until: float):
        self.data = data
        self.valid_until = valid_until

    def is_valid(self, now: float) -> bool:
        return now < self.valid_until


class QueryCache:
    """
    TTL cache keyed by (resource_type, id, params).

    Example:
        cache = QueryCache(ttl_seconds=300)
        totals = cache.get_or_load(
            'season_totals', team_id, lambda: compute_season_totals(...), season=2025
        )
        cache.invalidate('season_totals', team_id)
    """

    def __init__(self, ttl_seconds: int = 300, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(resource_type: str, id: Optional[Hashable] = None, **params) -> CacheKey:
        """Build a cache key; params are order-independent."""
        return (resource_type, id, tuple(sorted(params.items())))

    def get(self, resource_type: str, id: Optional[Hashable] = None, **params) -> Optional[Any]:
        """Cached value, or None when missing or expired."""
        key = self.make_key(resource_type, id, **params)
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        if not entry.is_valid(self._clock()):
            del self._entries[key]
            self.misses += 1
            return None
        self.hits += 1
        return entry.data

    def set(
        self,
        resource_type: str,
        id: Optional[Hashable],
        data: Any,
        ttl: Optional[int] = None,
        **params,
    ) -> None:
        ttl = self.ttl_seconds if ttl is None else ttl
        key = self.make_key(resource_type, id, **params)
        self._entries[key] = CacheEntry(data, self._clock() + ttl)

    def get_or_load(
        self,
        resource_type: str,
        id: Optional[Hashable],
        loader: Callable[[], Any],
        ttl: Optional[int] = None,
        **params,
    ) -> Any:
        """
        Return the cached value, calling ``loader`` to fill the entry on a miss.

        Exceptions from ``loader`` propagate and nothing is cached.
        """
        key = self.make_key(resource_type, id, **params)
        entry = self._entries.get(key)
        if entry is not None and entry.is_valid(self._clock()):
            self.hits += 1
            return entry.data

        self.misses += 1
        logger.debug(f'Cache miss for {key}')
        data = loader()
        self.set(resource_type, id, data, ttl=ttl, **params)
        return data

    def invalidate(self, resource_type: str, id: Optional[Hashable] = None) -> int:
        """
        Drop entries of a resource type, or of one id within it.

        Returns:
            Number of entries removed
        """
        keys = [
            k for k in self._entries if k[0] == resource_type and (id is None or k[1] == id)
        ]
        for key in keys:
            del self._entries[key]
        if keys:
            logger.debug(f'Invalidated {len(keys)} cache entries for {resource_type}')
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> dict[str, int]:
        """Entry counts and hit/miss counters."""
        now = self._clock()
        total = len(self._entries)
        valid = sum(1 for e in self._entries.values() if e.is_valid(now))
        return {
            'total_entries': total,
            'valid_entries': valid,
            'expired_entries': total - valid,
            'hits': self.hits,
            'misses': self.misses,
        }

    def __len__(self) -> int:
        return len(self._entries)
