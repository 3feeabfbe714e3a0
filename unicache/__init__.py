"""
unicache

在 Cloudflare D1、Redis、Upstash Redis 與 SQLite 之上提供同一套異步緩存接口。
"""

from unicache.models.cache_models import (
    CacheItem,
    CacheType,
    GetCacheInfo,
    PutCacheInfo,
    WriteCondition,
    NO_EXPIRATION,
)
from unicache.services.cache import (
    ICacheBackend,
    D1CacheAdapter,
    RedisCacheAdapter,
    SQLiteCacheAdapter,
    UpstashCacheAdapter,
    create_cache_backend,
)

__version__ = "0.1.0"

__all__ = [
    "CacheItem",
    "CacheType",
    "GetCacheInfo",
    "PutCacheInfo",
    "WriteCondition",
    "NO_EXPIRATION",
    "ICacheBackend",
    "D1CacheAdapter",
    "RedisCacheAdapter",
    "SQLiteCacheAdapter",
    "UpstashCacheAdapter",
    "create_cache_backend",
]
