"""
後端適配器測試配置

SQLite 適配器直接使用臨時目錄中的真實資料庫；
D1 適配器使用一個以 aiosqlite 實現的 D1Client，語句在真實 SQLite 上執行。
"""

from typing import Any, Sequence

import aiosqlite
import pytest
import pytest_asyncio

from unicache.core.exceptions import CacheBackendError
from unicache.services.cache.adapters import D1CacheAdapter, SQLiteCacheAdapter
from unicache.services.external.d1_client import D1QueryResult


class SQLiteBackedD1Client:
    """行為與 D1 REST API 一致的本地客戶端：約束衝突時拋出 CacheBackendError"""

    def __init__(self):
        self.db = None
        self.queries = []
        self.closed = False

    async def query(self, sql: str, params: Sequence[Any] = ()) -> D1QueryResult:
        if self.db is None:
            self.db = await aiosqlite.connect(":memory:")
            self.db.row_factory = aiosqlite.Row
        self.queries.append((sql, tuple(params)))
        try:
            async with self.db.execute(sql, params) as cursor:
                rows = [dict(row) for row in await cursor.fetchall()]
                changes = max(cursor.rowcount, 0)
            await self.db.commit()
        except aiosqlite.Error as e:
            await self.db.rollback()
            raise CacheBackendError("D1", "query", str(e)) from e
        return D1QueryResult(rows=rows, changes=changes)

    async def close(self) -> None:
        self.closed = True
        if self.db is not None:
            await self.db.close()
            self.db = None


@pytest.fixture
def d1_client():
    return SQLiteBackedD1Client()


@pytest_asyncio.fixture
async def sqlite_cache(tmp_path):
    """已初始化的 SQLite 緩存"""
    adapter = await SQLiteCacheAdapter.create(db_path=tmp_path / "cache.db")
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture
async def d1_cache(d1_client):
    """已初始化的 D1 緩存"""
    adapter = D1CacheAdapter(d1_client)
    await adapter.initialize()
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture(params=["sqlite", "d1"])
async def sql_cache(request, tmp_path, d1_client):
    """兩種 SQL 後端共用同一組行為測試"""
    if request.param == "sqlite":
        adapter = await SQLiteCacheAdapter.create(db_path=tmp_path / "cache.db")
    else:
        adapter = D1CacheAdapter(d1_client)
        await adapter.initialize()
    yield adapter
    await adapter.close()
