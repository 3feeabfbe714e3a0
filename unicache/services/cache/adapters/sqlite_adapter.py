"""
SQLite 緩存適配器

使用 aiosqlite 實現的嵌入式文件緩存
"""

import logging
from pathlib import Path
from typing import Optional, Any, Dict, List, Sequence, Union

import aiosqlite

from unicache.services.cache.adapters.sql_adapter import BaseSQLCacheAdapter, DEFAULT_TABLE_NAME

logger = logging.getLogger(__name__)

MEMORY_DB_PATH = ":memory:"


class SQLiteCacheAdapter(BaseSQLCacheAdapter):
    """
    SQLite 緩存適配器

    特點：
    - 單文件存儲，無需額外服務
    - 每次寫入後立即提交
    - 過期行在讀取時惰性刪除
    """

    backend_name = "SQLite"

    def __init__(
        self,
        db_path: Union[str, Path] = MEMORY_DB_PATH,
        table_name: str = DEFAULT_TABLE_NAME,
        name: Optional[str] = None
    ):
        """
        初始化 SQLite 緩存

        Args:
            db_path: 資料庫文件路徑，":memory:" 表示內存資料庫
            table_name: 緩存表名稱
            name: 適配器名稱
        """
        super().__init__(table_name=table_name, name=name or "sqlite")
        self.db_path = str(db_path)
        self._db: Optional[aiosqlite.Connection] = None

    @classmethod
    async def create(
        cls,
        db_path: Union[str, Path] = MEMORY_DB_PATH,
        table_name: str = DEFAULT_TABLE_NAME,
        name: Optional[str] = None
    ) -> "SQLiteCacheAdapter":
        """創建並初始化適配器"""
        adapter = cls(db_path=db_path, table_name=table_name, name=name)
        await adapter.initialize()
        return adapter

    async def _open(self) -> None:
        if self._db is not None:
            return
        if self.db_path != MEMORY_DB_PATH:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self.db_path)
        self._db.row_factory = aiosqlite.Row
        logger.info(f"{self.log_prefix} 已連接: {self.db_path}")

    async def _fetch_one(self, sql: str, params: Sequence[Any]) -> Optional[Dict[str, Any]]:
        async with self._db.execute(sql, params) as cursor:
            row = await cursor.fetchone()
        return dict(row) if row else None

    async def _fetch_all(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        async with self._db.execute(sql, params) as cursor:
            rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def _execute(self, sql: str, params: Sequence[Any]) -> int:
        try:
            async with self._db.execute(sql, params) as cursor:
                changes = cursor.rowcount
            await self._db.commit()
        except aiosqlite.Error:
            await self._db.rollback()
            raise
        return changes

    async def close(self) -> None:
        """關閉資料庫連接"""
        if self._db is not None:
            await self._db.close()
            self._db = None
            self._initialized = False
            logger.info(f"{self.log_prefix} 連接已關閉")
