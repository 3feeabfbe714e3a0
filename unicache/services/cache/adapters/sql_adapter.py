"""
SQL 緩存適配器基類

D1 與 SQLite 共用的緩存邏輯。SQL 後端沒有原生 TTL：
- 過期時間存於 expiration 欄位，-1 表示永不過期
- 讀取時發現已過期的行會被順便刪除（惰性過期）
- NX / XX 先做一次 get 清掉過期行，再用 INSERT（唯一鍵衝突）/ UPDATE（影響行數）判斷條件。
  這兩步之間不是原子的，併發的無條件寫入可能改變結果。
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional, Any, Dict, List, Sequence

from unicache.core.exceptions import CacheNotInitializedError
from unicache.models.cache_models import (
    CacheItem,
    CacheRecord,
    GetCacheInfo,
    PutCacheInfo,
    WriteCondition,
)
from unicache.services.cache.adapters.base import (
    BaseCacheAdapter,
    normalize_get_info,
    normalize_put_info,
)
from unicache.services.cache.codec import cache_item_to_type, decode_cache_item, encode_cache_item
from unicache.services.cache.expiration import calculate_expiration, is_expired
from unicache.services.cache.sql_statements import (
    SQLCacheStatements,
    create_sql_cache_statements,
    insert_params,
    list_params,
    update_params,
    upsert_params,
)

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "CACHES_v2"


class BaseSQLCacheAdapter(BaseCacheAdapter, ABC):
    """
    SQL 緩存適配器基類

    子類只需實現 _open / _fetch_one / _fetch_all / _execute 四個原語。
    """

    def __init__(self, table_name: str = DEFAULT_TABLE_NAME, name: Optional[str] = None):
        super().__init__(name=name)
        self.table_name = table_name
        self._statements: SQLCacheStatements = create_sql_cache_statements(table_name)
        self._initialized = False

    # ---------- 子類實現 ----------

    @abstractmethod
    async def _open(self) -> None:
        """打開連接"""

    @abstractmethod
    async def _fetch_one(self, sql: str, params: Sequence[Any]) -> Optional[Dict[str, Any]]:
        """執行查詢並返回第一行"""

    @abstractmethod
    async def _fetch_all(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        """執行查詢並返回所有行"""

    @abstractmethod
    async def _execute(self, sql: str, params: Sequence[Any]) -> int:
        """執行寫入語句，返回影響的行數"""

    # ---------- 初始化 ----------

    async def initialize(self) -> None:
        """建表與索引（可重複調用）"""
        if self._initialized:
            return
        await self._open()
        await self._execute(self._statements.create, ())
        await self._execute(self._statements.create_index, ())
        self._initialized = True
        logger.info(f"{self.log_prefix} 緩存表已就緒: {self.table_name}")

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise CacheNotInitializedError(self.backend_name)

    # ---------- 緩存接口 ----------

    async def get(self, key: str, info: Optional[GetCacheInfo] = None) -> Optional[CacheItem]:
        """獲取緩存值"""
        self._ensure_initialized()
        info = normalize_get_info(info)

        row = await self._fetch_one(self._statements.get, (key,))
        if not row:
            logger.debug(f"{self.log_prefix} 緩存未命中: {key}")
            return None

        record = CacheRecord(**row)
        if is_expired(record.expiration):
            logger.debug(f"{self.log_prefix} 緩存已過期，刪除: {key}")
            await self.delete(key)
            return None

        logger.debug(f"{self.log_prefix} 緩存命中: {key}")
        return decode_cache_item(record.value, info.type, record.type)

    async def put(
        self,
        key: str,
        value: CacheItem,
        info: Optional[PutCacheInfo] = None
    ) -> Optional[bool]:
        """設置緩存值"""
        self._ensure_initialized()
        info = normalize_put_info(info)

        encoded = encode_cache_item(value)
        cache_type = cache_item_to_type(value).value
        expiration = calculate_expiration(info)
        condition = info.write_condition

        if condition is None:
            await self._execute(
                self._statements.upsert,
                upsert_params(key, encoded, cache_type, expiration),
            )
            logger.debug(f"{self.log_prefix} 緩存已設置: {key}, expiration={expiration}")
            return None

        # 先讀一次，讓已過期但仍在表中的行被刪除，避免擋住 INSERT
        await self.get(key)

        try:
            if condition == WriteCondition.NX:
                changes = await self._execute(
                    self._statements.insert,
                    insert_params(key, encoded, cache_type, expiration),
                )
            else:
                changes = await self._execute(
                    self._statements.update,
                    update_params(key, encoded, cache_type, expiration),
                )
        except Exception as e:
            logger.warning(f"{self.log_prefix} 條件寫入未生效 ({condition.value}): {key}, {e}")
            return False

        applied = changes > 0
        logger.debug(f"{self.log_prefix} 條件寫入 ({condition.value}): {key}, applied={applied}")
        return applied

    async def delete(self, key: str) -> None:
        """刪除緩存"""
        self._ensure_initialized()
        await self._execute(self._statements.delete, (key,))
        logger.debug(f"{self.log_prefix} 緩存已刪除: {key}")

    async def list(self, prefix: Optional[str] = None, limit: Optional[int] = None) -> List[str]:
        """按前綴列出未過期的鍵"""
        self._ensure_initialized()
        sql = self._statements.list_no_limit if limit is None else self._statements.list
        rows = await self._fetch_all(sql, list_params(prefix, time.time(), limit))
        return [row["key"] for row in rows]
