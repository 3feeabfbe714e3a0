"""
Redis 緩存適配器

使用 redis.asyncio 實現的自建 Redis 緩存
"""

import logging
from typing import Optional, Any, List

import redis.asyncio as redis
from redis.exceptions import RedisError

from unicache.core.exceptions import CacheConnectionError
from unicache.core.logging_utils import mask_url
from unicache.models.cache_models import CacheItem, GetCacheInfo, PutCacheInfo, WriteCondition
from unicache.services.cache.adapters.base import (
    BaseCacheAdapter,
    normalize_get_info,
    normalize_put_info,
)
from unicache.services.cache.adapters.envelope import build_envelope, escape_glob_prefix, read_envelope
from unicache.services.cache.expiration import expiration_to_milliseconds

logger = logging.getLogger(__name__)

SCAN_BATCH_SIZE = 100


class RedisCacheAdapter(BaseCacheAdapter):
    """
    Redis 緩存適配器

    特點：
    - 原生 TTL：寫入時以 PXAT 設置絕對過期時間，過期由 Redis 自行處理
    - NX / XX 直接交給 SET 命令，單次原子寫入
    - 值為 JSON 信封，保留寫入時的類型
    """

    backend_name = "Redis"

    def __init__(self, redis_client: redis.Redis, name: Optional[str] = None):
        """
        初始化 Redis 緩存

        Args:
            redis_client: 已創建的 redis.asyncio 客戶端（適配器負責關閉）
            name: 適配器名稱
        """
        super().__init__(name=name or "redis")
        self.redis_client = redis_client

    @classmethod
    def from_url(cls, redis_url: str, name: Optional[str] = None, **options: Any) -> "RedisCacheAdapter":
        """以連接 URL 創建，例如 redis://:password@localhost:6379/0"""
        options.setdefault("decode_responses", True)
        client = redis.from_url(redis_url, encoding="utf-8", **options)
        logger.info(f"RedisCacheAdapter 已創建: url={mask_url(redis_url)}")
        return cls(client, name=name)

    @classmethod
    def create(cls, name: Optional[str] = None, **options: Any) -> "RedisCacheAdapter":
        """以連接參數創建，參數直接傳給 redis.asyncio.Redis"""
        options.setdefault("decode_responses", True)
        return cls(redis.Redis(**options), name=name)

    async def initialize(self) -> None:
        """測試連接"""
        try:
            await self.redis_client.ping()
        except RedisError as e:
            logger.error(f"{self.log_prefix} 連接失敗: {e}")
            raise CacheConnectionError(self.backend_name, str(e)) from e
        logger.info(f"{self.log_prefix} 連接成功")

    async def get(self, key: str, info: Optional[GetCacheInfo] = None) -> Optional[CacheItem]:
        """獲取緩存值"""
        raw = await self.redis_client.get(key)
        if raw is None:
            logger.debug(f"{self.log_prefix} 緩存未命中: {key}")
            return None
        logger.debug(f"{self.log_prefix} 緩存命中: {key}")
        return read_envelope(raw, normalize_get_info(info))

    async def put(
        self,
        key: str,
        value: CacheItem,
        info: Optional[PutCacheInfo] = None
    ) -> Optional[bool]:
        """設置緩存值"""
        info = normalize_put_info(info)
        payload, expiration = build_envelope(value, info)
        condition = info.write_condition

        set_kwargs = {
            "pxat": expiration_to_milliseconds(expiration),
            "nx": condition == WriteCondition.NX,
            "xx": condition == WriteCondition.XX,
        }

        if condition is None:
            await self.redis_client.set(key, payload, **set_kwargs)
            logger.debug(f"{self.log_prefix} 緩存已設置: {key}, expiration={expiration}")
            return None

        try:
            result = await self.redis_client.set(key, payload, **set_kwargs)
        except RedisError as e:
            logger.warning(f"{self.log_prefix} 條件寫入未生效 ({condition.value}): {key}, {e}")
            return False

        applied = bool(result)
        logger.debug(f"{self.log_prefix} 條件寫入 ({condition.value}): {key}, applied={applied}")
        return applied

    async def delete(self, key: str) -> None:
        """刪除緩存"""
        await self.redis_client.delete(key)
        logger.debug(f"{self.log_prefix} 緩存已刪除: {key}")

    async def list(self, prefix: Optional[str] = None, limit: Optional[int] = None) -> List[str]:
        """以 SCAN 按前綴列出鍵"""
        if limit is not None and limit <= 0:
            return []

        keys: List[str] = []
        seen = set()
        async for key in self.redis_client.scan_iter(match=escape_glob_prefix(prefix), count=SCAN_BATCH_SIZE):
            if isinstance(key, bytes):
                key = key.decode("utf-8")
            # SCAN 可能返回重複的鍵
            if key in seen:
                continue
            seen.add(key)
            keys.append(key)
            if limit is not None and len(keys) >= limit:
                break
        return keys

    async def close(self) -> None:
        """斷開 Redis 連接"""
        await self.redis_client.aclose()
        logger.info(f"{self.log_prefix} 連接已關閉")
