"""
Upstash Redis 緩存適配器

透過 HTTP REST API 存取的託管 Redis
"""

import logging
from typing import Optional, Any, List

from unicache.core.logging_utils import mask_url
from unicache.models.cache_models import (
    NO_EXPIRATION,
    CacheItem,
    GetCacheInfo,
    PutCacheInfo,
)
from unicache.services.cache.adapters.base import (
    BaseCacheAdapter,
    normalize_get_info,
    normalize_put_info,
)
from unicache.services.cache.adapters.envelope import build_envelope, escape_glob_prefix, read_envelope
from unicache.services.external.upstash_client import UpstashClient, UpstashRedisClient

logger = logging.getLogger(__name__)

SCAN_BATCH_SIZE = 100


class UpstashCacheAdapter(BaseCacheAdapter):
    """
    Upstash 緩存適配器

    與 RedisCacheAdapter 使用相同的信封格式；原生 TTL 以 EXAT（epoch 秒）設置。
    """

    backend_name = "Upstash"

    def __init__(self, client: UpstashClient, name: Optional[str] = None):
        super().__init__(name=name or "upstash")
        self.client = client

    @classmethod
    def create(cls, url: str, token: str, name: Optional[str] = None, **client_options: Any) -> "UpstashCacheAdapter":
        """以 REST URL 與 token 創建"""
        logger.info(f"UpstashCacheAdapter 已創建: url={mask_url(url)}")
        return cls(UpstashRedisClient(url, token, **client_options), name=name)

    async def get(self, key: str, info: Optional[GetCacheInfo] = None) -> Optional[CacheItem]:
        """獲取緩存值"""
        raw = await self.client.command("GET", key)
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

        args: List[Any] = ["SET", key, payload]
        if expiration != NO_EXPIRATION:
            args.extend(["EXAT", expiration])
        if condition is not None:
            args.append(condition.value)

        if condition is None:
            await self.client.command(*args)
            logger.debug(f"{self.log_prefix} 緩存已設置: {key}, expiration={expiration}")
            return None

        try:
            result = await self.client.command(*args)
        except Exception as e:
            logger.warning(f"{self.log_prefix} 條件寫入未生效 ({condition.value}): {key}, {e}")
            return False

        applied = result == "OK"
        logger.debug(f"{self.log_prefix} 條件寫入 ({condition.value}): {key}, applied={applied}")
        return applied

    async def delete(self, key: str) -> None:
        """刪除緩存"""
        await self.client.command("DEL", key)
        logger.debug(f"{self.log_prefix} 緩存已刪除: {key}")

    async def list(self, prefix: Optional[str] = None, limit: Optional[int] = None) -> List[str]:
        """以 SCAN 按前綴列出鍵"""
        if limit is not None and limit <= 0:
            return []

        pattern = escape_glob_prefix(prefix)
        keys: List[str] = []
        seen = set()
        cursor = "0"
        while True:
            cursor, batch = await self.client.command("SCAN", cursor, "MATCH", pattern, "COUNT", SCAN_BATCH_SIZE)
            cursor = str(cursor)
            for key in batch or []:
                if key in seen:
                    continue
                seen.add(key)
                keys.append(key)
                if limit is not None and len(keys) >= limit:
                    return keys
            if cursor == "0":
                break
        return keys

    async def close(self) -> None:
        """關閉 HTTP 會話"""
        await self.client.close()
        logger.info(f"{self.log_prefix} 連接已關閉")
