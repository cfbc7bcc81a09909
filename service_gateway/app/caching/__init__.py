"""
Gateway caching package.

Provides the bounded, in-process read cache used by the gateway for book
info lookups. Entries are dropped by explicit invalidation from catalog
replicas or by insertion-order eviction.
"""

from .bounded_cache import BoundedCache
from .cache_manager import CacheManager, info_cache_key

__all__ = ["BoundedCache", "CacheManager", "info_cache_key"]
