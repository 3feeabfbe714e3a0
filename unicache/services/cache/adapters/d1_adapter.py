"""
D1 緩存適配器

Cloudflare D1（邊緣 SQLite）上的緩存，語句與 SQLite 適配器共用
"""

import logging
from typing import Optional, Any, Dict, List, Sequence

from unicache.services.cache.adapters.sql_adapter import BaseSQLCacheAdapter, DEFAULT_TABLE_NAME
from unicache.services.external.d1_client import D1Client, D1HttpClient

logger = logging.getLogger(__name__)


class D1CacheAdapter(BaseSQLCacheAdapter):
    """D1 緩存適配器，每次調用都經由 D1Client 往返一次"""

    backend_name = "D1"

    def __init__(
        self,
        client: D1Client,
        table_name: str = DEFAULT_TABLE_NAME,
        name: Optional[str] = None
    ):
        super().__init__(table_name=table_name, name=name or "d1")
        self.client = client

    @classmethod
    async def create(
        cls,
        account_id: str,
        database_id: str,
        api_token: str,
        table_name: str = DEFAULT_TABLE_NAME,
        **client_options
    ) -> "D1CacheAdapter":
        """以 REST API 憑證創建並初始化適配器"""
        client = D1HttpClient(account_id, database_id, api_token, **client_options)
        adapter = cls(client, table_name=table_name)
        await adapter.initialize()
        return adapter

    async def _open(self) -> None:
        return None

    async def _fetch_one(self, sql: str, params: Sequence[Any]) -> Optional[Dict[str, Any]]:
        result = await self.client.query(sql, params)
        return result.rows[0] if result.rows else None

    async def _fetch_all(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        result = await self.client.query(sql, params)
        return result.rows

    async def _execute(self, sql: str, params: Sequence[Any]) -> int:
        result = await self.client.query(sql, params)
        return result.changes

    async def close(self) -> None:
        await self.client.close()
        self._initialized = False
        logger.info(f"{self.log_prefix} 連接已關閉")
