"""
Cloudflare D1 HTTP 客戶端

透過 Cloudflare REST API 執行單條參數化 SQL。
只負責傳輸，不包含任何緩存語義。
"""

import asyncio
import logging
from typing import Optional, Any, Dict, List, Protocol, Sequence

import aiohttp
from pydantic import BaseModel, Field

from unicache.core.exceptions import CacheBackendError

logger = logging.getLogger(__name__)

D1_API_BASE_URL = "https://api.cloudflare.com/client/v4"


class D1QueryResult(BaseModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    changes: int = 0


class D1Client(Protocol):
    """D1 適配器依賴的最小能力接口"""

    async def query(self, sql: str, params: Sequence[Any] = ()) -> D1QueryResult:
        ...

    async def close(self) -> None:
        ...


class D1HttpClient:
    """
    D1 REST API 客戶端

    POST /accounts/{account_id}/d1/database/{database_id}/query
    請求體: {"sql": "...", "params": [...]}
    """

    def __init__(
        self,
        account_id: str,
        database_id: str,
        api_token: str,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        base_url: str = D1_API_BASE_URL,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.account_id = account_id
        self.database_id = database_id
        self.base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._timeout = timeout
        self._session = session

    @property
    def query_url(self) -> str:
        return f"{self.base_url}/accounts/{self.account_id}/d1/database/{self.database_id}/query"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            kwargs: Dict[str, Any] = {"headers": {"Authorization": f"Bearer {self._api_token}"}}
            if self._timeout is not None:
                kwargs["timeout"] = self._timeout
            self._session = aiohttp.ClientSession(**kwargs)
        return self._session

    async def query(self, sql: str, params: Sequence[Any] = ()) -> D1QueryResult:
        """執行單條 SQL"""
        session = self._get_session()
        try:
            async with session.post(self.query_url, json={"sql": sql, "params": list(params)}) as resp:
                status = resp.status
                try:
                    payload = await resp.json(content_type=None)
                except ValueError as e:
                    raise CacheBackendError("D1", "query", f"HTTP {status}: 無法解析響應") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise CacheBackendError("D1", "query", f"請求失敗: {e!r}") from e

        if not isinstance(payload, dict):
            raise CacheBackendError("D1", "query", f"HTTP {status}: 響應格式錯誤")

        if status >= 400 or not payload.get("success", False):
            errors = payload.get("errors") or []
            reason = "; ".join(
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in errors
            ) or f"HTTP {status}"
            raise CacheBackendError("D1", "query", reason)

        results = payload.get("result") or []
        first = results[0] if results else {}
        if first.get("success") is False:
            raise CacheBackendError("D1", "query", str(first.get("error", "未知錯誤")))

        meta = first.get("meta") or {}
        return D1QueryResult(rows=first.get("results") or [], changes=meta.get("changes") or 0)

    async def close(self) -> None:
        """關閉 HTTP 會話"""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
