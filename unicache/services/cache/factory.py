"""
緩存適配器工廠

按配置創建並初始化一個適配器。返回的實例由調用方持有並負責 close()，
模組內不保存任何全局緩存實例。
"""

from typing import Optional

import aiohttp

from unicache.core.config import Settings, settings as default_settings
from unicache.core.exceptions import ConfigurationError
from unicache.core.logging_utils import AppLogger, mask_sensitive_data
from unicache.services.cache.adapters import (
    ICacheBackend,
    D1CacheAdapter,
    RedisCacheAdapter,
    SQLiteCacheAdapter,
    UpstashCacheAdapter,
)

logger = AppLogger(__name__, level=default_settings.LOG_LEVEL.upper()).get_logger()


def _require(value: Optional[str], setting: str, backend: str) -> str:
    if not value:
        raise ConfigurationError(setting, f"使用 {backend} 後端時必須設置")
    return value


def _http_timeout(config: Settings) -> Optional[aiohttp.ClientTimeout]:
    if config.HTTP_TIMEOUT_SECONDS is None:
        return None
    return aiohttp.ClientTimeout(total=config.HTTP_TIMEOUT_SECONDS)


async def create_cache_backend(config: Optional[Settings] = None) -> ICacheBackend:
    """
    創建配置指定的緩存後端

    Args:
        config: 配置，None 時使用模組級 settings

    Returns:
        已初始化的適配器
    """
    config = config or default_settings
    backend = config.CACHE_BACKEND
    logger.info(f"創建緩存後端: {backend}, 配置={mask_sensitive_data(config.model_dump())}")

    if backend == "sqlite":
        return await SQLiteCacheAdapter.create(
            db_path=config.SQLITE_PATH,
            table_name=config.CACHE_TABLE_NAME,
        )

    if backend == "redis":
        adapter = RedisCacheAdapter.from_url(config.REDIS_URL)
        await adapter.initialize()
        return adapter

    if backend == "upstash":
        return UpstashCacheAdapter.create(
            url=_require(config.UPSTASH_REDIS_REST_URL, "UPSTASH_REDIS_REST_URL", backend),
            token=_require(config.UPSTASH_REDIS_REST_TOKEN, "UPSTASH_REDIS_REST_TOKEN", backend),
            timeout=_http_timeout(config),
        )

    if backend == "d1":
        return await D1CacheAdapter.create(
            account_id=_require(config.D1_ACCOUNT_ID, "D1_ACCOUNT_ID", backend),
            database_id=_require(config.D1_DATABASE_ID, "D1_DATABASE_ID", backend),
            api_token=_require(config.D1_API_TOKEN, "D1_API_TOKEN", backend),
            table_name=config.CACHE_TABLE_NAME,
            timeout=_http_timeout(config),
        )

    raise ConfigurationError("CACHE_BACKEND", f"不支持的緩存後端: {backend}")
