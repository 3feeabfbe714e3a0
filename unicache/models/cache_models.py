from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Dict, Any, List, Union

from pydantic import BaseModel, Field

# 調用方可以存入的值：文字、二進位、結構化資料、數字
CacheItem = Union[str, bytes, bytearray, int, float, bool, None, Dict[str, Any], List[Any]]

# 永不過期的哨兵值，SQL 後端直接存入 expiration 欄位
NO_EXPIRATION = -1


class CacheType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    JSON = "json"
    BYTES = "bytes"


class WriteCondition(str, Enum):
    NX = "NX"  # 僅在鍵不存在時寫入
    XX = "XX"  # 僅在鍵存在時寫入


class GetCacheInfo(BaseModel):
    type: Optional[CacheType] = None  # 預期的值類型，None 表示使用存儲時的類型


class PutCacheInfo(BaseModel):
    expiration: Optional[Union[datetime, float]] = None  # 絕對過期時間（epoch 秒或 datetime）
    ttl: Optional[Union[timedelta, float]] = None  # 相對過期時間（秒或 timedelta）
    condition: Optional[str] = None  # "NX" / "XX"，其他值視為無條件寫入

    @property
    def write_condition(self) -> Optional[WriteCondition]:
        """將 condition 正規化；不認識的值返回 None（無條件寫入）"""
        if self.condition in (WriteCondition.NX.value, WriteCondition.XX.value):
            return WriteCondition(self.condition)
        return None


class CacheRecord(BaseModel):
    """SQL 後端中的一行記錄"""
    id: Optional[int] = None
    key: str
    value: Optional[str] = None
    type: Optional[str] = None
    expiration: int = NO_EXPIRATION


class CacheEnvelopeInfo(BaseModel):
    type: CacheType
    expiration: int = NO_EXPIRATION


class CacheEnvelope(BaseModel):
    """Redis 類後端中每個鍵存放的 JSON 信封"""
    info: CacheEnvelopeInfo
    value: str = Field(default="")
