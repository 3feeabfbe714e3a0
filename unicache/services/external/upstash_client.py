"""
Upstash Redis REST 客戶端

把一條 Redis 命令以 JSON 陣列 POST 到 REST 端點，例如 ["SET", "k", "v", "NX"]。
"""

import asyncio
import logging
from typing import Optional, Any, Dict, Protocol

import aiohttp

from unicache.core.exceptions import CacheBackendError

logger = logging.getLogger(__name__)


class UpstashClient(Protocol):
    """Upstash 適配器依賴的最小能力接口"""

    async def command(self, *args: Any) -> Any:
        ...

    async def close(self) -> None:
        ...


class UpstashRedisClient:
    """Upstash REST API 客戶端，響應為 {"result": ...} 或 {"error": "..."}"""

    def __init__(
        self,
        url: str,
        token: str,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.url = url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._session = session

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            kwargs: Dict[str, Any] = {"headers": {"Authorization": f"Bearer {self._token}"}}
            if self._timeout is not None:
                kwargs["timeout"] = self._timeout
            self._session = aiohttp.ClientSession(**kwargs)
        return self._session

    async def command(self, *args: Any) -> Any:
        """執行一條命令並返回 result 欄位"""
        operation = str(args[0]).upper() if args else "UNKNOWN"
        session = self._get_session()
        try:
            async with session.post(self.url, json=[str(arg) for arg in args]) as resp:
                status = resp.status
                try:
                    payload = await resp.json(content_type=None)
                except ValueError as e:
                    raise CacheBackendError("Upstash", operation, f"HTTP {status}: 無法解析響應") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise CacheBackendError("Upstash", operation, f"請求失敗: {e!r}") from e

        if not isinstance(payload, dict):
            raise CacheBackendError("Upstash", operation, f"HTTP {status}: 響應格式錯誤")
        if "error" in payload:
            raise CacheBackendError("Upstash", operation, str(payload["error"]))
        if status >= 400:
            raise CacheBackendError("Upstash", operation, f"HTTP {status}")
        return payload.get("result")

    async def close(self) -> None:
        """關閉 HTTP 會話"""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
