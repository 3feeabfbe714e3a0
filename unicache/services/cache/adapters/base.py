"""
緩存適配器基礎接口

定義所有緩存後端必須實現的統一接口
"""

from typing import Protocol, Optional, List, Union
from abc import abstractmethod

from unicache.models.cache_models import CacheItem, GetCacheInfo, PutCacheInfo


class ICacheBackend(Protocol):
    """
    統一緩存接口

    所有緩存適配器都必須實現這個接口，確保可以無縫切換後端
    """

    @abstractmethod
    async def get(self, key: str, info: Optional[GetCacheInfo] = None) -> Optional[CacheItem]:
        """
        獲取緩存值

        Args:
            key: 緩存鍵
            info: 可選的讀取參數（預期類型）

        Returns:
            緩存的值，不存在、已過期或類型不相容則返回 None
        """
        ...

    @abstractmethod
    async def put(
        self,
        key: str,
        value: CacheItem,
        info: Optional[PutCacheInfo] = None
    ) -> Union[bool, None]:
        """
        設置緩存值

        Args:
            key: 緩存鍵
            value: 要緩存的值
            info: 可選的寫入參數（過期時間、NX/XX 條件）

        Returns:
            有 NX/XX 條件時返回寫入是否生效；無條件寫入返回 None
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        刪除緩存，鍵不存在時不做任何事

        Args:
            key: 緩存鍵
        """
        ...

    @abstractmethod
    async def list(self, prefix: Optional[str] = None, limit: Optional[int] = None) -> List[str]:
        """
        列出鍵

        Args:
            prefix: 鍵前綴，None 表示所有鍵
            limit: 最多返回的數量，None 表示不限制

        Returns:
            鍵列表（順序由後端決定）
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """釋放後端連接"""
        ...


def normalize_put_info(info: Optional[PutCacheInfo]) -> PutCacheInfo:
    return info if info is not None else PutCacheInfo()


def normalize_get_info(info: Optional[GetCacheInfo]) -> GetCacheInfo:
    return info if info is not None else GetCacheInfo()


class BaseCacheAdapter:
    """
    適配器共用部分

    只保存連接 / 會話句柄，不在進程內保存任何緩存內容。
    支持 `async with` 自動關閉連接。
    """

    backend_name = "cache"

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.backend_name

    @property
    def log_prefix(self) -> str:
        return f"[{self.backend_name}:{self.name}]"

    async def initialize(self) -> None:
        """準備後端（建表、測試連接等），預設不需要"""
        return None

    async def close(self) -> None:
        return None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
