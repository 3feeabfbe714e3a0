"""
緩存適配器模組

提供不同緩存後端的統一接口實現
"""

from .base import ICacheBackend
from .d1_adapter import D1CacheAdapter
from .redis_adapter import RedisCacheAdapter
from .sqlite_adapter import SQLiteCacheAdapter
from .upstash_adapter import UpstashCacheAdapter

__all__ = [
    "ICacheBackend",
    "D1CacheAdapter",
    "RedisCacheAdapter",
    "SQLiteCacheAdapter",
    "UpstashCacheAdapter",
]
