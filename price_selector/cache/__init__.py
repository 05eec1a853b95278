"""
Resolution cache and cache-key derivation.
"""

from .keys import CacheKeyBuilder, build_cache_key
from .resolution_cache import ABSENT, CacheEntry, CacheStats, ResolutionCache

__all__ = [
    "ABSENT",
    "CacheEntry",
    "CacheKeyBuilder",
    "CacheStats",
    "ResolutionCache",
    "build_cache_key",
]
