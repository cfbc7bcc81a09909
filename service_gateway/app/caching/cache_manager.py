"""
Gateway cache manager for book info reads.
"""

from typing import Any, Dict, Optional, TYPE_CHECKING

from shared.logging import get_logger
from .bounded_cache import BoundedCache

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


INFO_CACHE_TYPE = "info"


def info_cache_key(book_id: int) -> str:
    """Cache key for a book info read."""
    return f"info:{book_id}"


class CacheManager:
    """Read cache for the info-by-id path.

    Filled only by successful reads and emptied by invalidation signals from
    catalog replicas. Search results and writes never go through it.
    Capacity and the enabled flag are fixed when the manager is created.
    """

    def __init__(
        self,
        enabled: bool = True,
        max_entries: int = 30,
        *,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.enabled = enabled
        self.cache = BoundedCache(max_entries)
        self.metrics = metrics
        self.logger = get_logger("gateway.cache_manager")
        self.hits = 0
        self.misses = 0
        self.invalidations = 0

    def get_book_info(self, book_id: int) -> Optional[Dict[str, Any]]:
        """Cached info for ``book_id``, or None on a miss."""
        if not self.enabled:
            return None

        cached = self.cache.get(info_cache_key(book_id))
        if cached is None:
            self.misses += 1
            self._count("cache_misses_total")
            self.logger.debug("Cache miss", book_id=book_id)
            return None

        self.hits += 1
        self._count("cache_hits_total")
        self.logger.debug("Cache hit", book_id=book_id)
        return cached

    def set_book_info(self, book_id: int, book: Dict[str, Any]) -> bool:
        """Cache a freshly fetched book; False when caching is disabled."""
        if not self.enabled:
            return False

        evicted = self.cache.put(info_cache_key(book_id), book)
        if evicted:
            self.logger.info("Evicted cache entries", keys=evicted)
        self.logger.info("Cached book info", book_id=book_id, cache_size=len(self.cache))
        self._record_size()
        return True

    def invalidate_book_info(self, book_id: int) -> bool:
        """Drop the cached info for ``book_id``; True when an entry existed."""
        existed = self.cache.invalidate(info_cache_key(book_id))
        self.invalidations += 1
        if self.metrics:
            self.metrics.increment_counter("cache_invalidations_total", existed=str(existed).lower())
        self._record_size()
        self.logger.info("Cache invalidate", book_id=book_id, existed=existed)
        return existed

    def stats(self) -> Dict[str, Any]:
        """Cache counters for the stats endpoint."""
        return {
            "enabled": self.enabled,
            "size": len(self.cache),
            "max_entries": self.cache.max_entries,
            "hits": self.hits,
            "misses": self.misses,
            "invalidations": self.invalidations,
            "evictions": self.cache.evictions,
            "keys": self.cache.keys(),
        }

    def _count(self, metric_name: str) -> None:
        if self.metrics:
            self.metrics.increment_counter(metric_name, cache_type=INFO_CACHE_TYPE)

    def _record_size(self) -> None:
        if self.metrics:
            self.metrics.set_gauge("cache_entries", len(self.cache))
