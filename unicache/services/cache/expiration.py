"""
過期時間計算

所有後端共用同一套規則：相對或絕對的過期指令一律換算成 epoch 秒（向上取整），
沒有指令時返回 NO_EXPIRATION。Redis 類後端的原生 TTL 也由這裡換算。
"""

import math
import time
from datetime import datetime, timedelta, timezone
from typing import Optional

from unicache.models.cache_models import NO_EXPIRATION, PutCacheInfo

# 最早的過期時間；-1 是哨兵值，Redis 不接受 0
EARLIEST_EXPIRATION = 1


def _to_epoch_seconds(value) -> float:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            # naive datetime 視為 UTC
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    return float(value)


def _to_seconds(value) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


def calculate_expiration(info: Optional[PutCacheInfo] = None, now: Optional[float] = None) -> int:
    """
    計算絕對過期時間

    Args:
        info: 寫入參數；expiration（絕對）優先於 ttl（相對）
        now: 當前時間（epoch 秒），預設 time.time()

    Returns:
        epoch 秒（至少為 EARLIEST_EXPIRATION），或 NO_EXPIRATION
    """
    if info is None:
        return NO_EXPIRATION
    if info.expiration is not None:
        seconds = _to_epoch_seconds(info.expiration)
    elif info.ttl is not None:
        current = time.time() if now is None else now
        seconds = current + _to_seconds(info.ttl)
    else:
        return NO_EXPIRATION
    return max(math.ceil(seconds), EARLIEST_EXPIRATION)


def is_expired(expiration: Optional[int], now: Optional[float] = None) -> bool:
    """已存的過期時間是否早於當前時間（永不過期的哨兵值永遠返回 False）"""
    if expiration is None or expiration == NO_EXPIRATION:
        return False
    current = time.time() if now is None else now
    return expiration < current


def expiration_to_milliseconds(expiration: int) -> Optional[int]:
    """換算為 Redis PXAT 使用的毫秒時間戳"""
    if expiration == NO_EXPIRATION:
        return None
    return int(expiration) * 1000
