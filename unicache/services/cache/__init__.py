"""
緩存服務模組

提供統一的緩存接口與四種後端：
- D1CacheAdapter: Cloudflare D1（邊緣 SQL）
- RedisCacheAdapter: 自建 Redis
- UpstashCacheAdapter: Upstash Redis（HTTP）
- SQLiteCacheAdapter: 嵌入式 SQLite
- create_cache_backend: 按配置創建適配器（推薦使用）
"""

from .adapters import (
    ICacheBackend,
    D1CacheAdapter,
    RedisCacheAdapter,
    SQLiteCacheAdapter,
    UpstashCacheAdapter,
)
from .factory import create_cache_backend

__all__ = [
    "ICacheBackend",
    "D1CacheAdapter",
    "RedisCacheAdapter",
    "SQLiteCacheAdapter",
    "UpstashCacheAdapter",
    "create_cache_backend",
]
