"""
緩存值編解碼

把任意緩存值轉為與後端無關的文字表示，並配合 CacheType 在讀取時還原原始形狀：
- str: 原樣存放
- bytes: base64 文字
- int / float: JSON 數字
- 其他（dict / list / bool / None）: JSON 文字
"""

import base64
import binascii
import json
import logging
from typing import Optional, Union

from unicache.core.exceptions import CacheEncodeError
from unicache.models.cache_models import CacheItem, CacheType

logger = logging.getLogger(__name__)

_BINARY_TYPES = (bytes, bytearray, memoryview)


def cache_item_to_type(item: CacheItem) -> CacheType:
    """根據值的運行時形狀決定 CacheType（同一形狀永遠得到同一類型）"""
    if isinstance(item, str):
        return CacheType.STRING
    if isinstance(item, _BINARY_TYPES):
        return CacheType.BYTES
    # bool 是 int 的子類，但應按 JSON 存放
    if isinstance(item, (int, float)) and not isinstance(item, bool):
        return CacheType.NUMBER
    return CacheType.JSON


def encode_cache_item(item: CacheItem) -> str:
    """
    將緩存值編碼為文字

    NaN 與正負無窮不是合法 JSON 數字，會拋出 CacheEncodeError。
    """
    cache_type = cache_item_to_type(item)
    if cache_type == CacheType.STRING:
        return item
    if cache_type == CacheType.BYTES:
        return base64.b64encode(bytes(item)).decode("ascii")
    try:
        return json.dumps(item, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise CacheEncodeError(type(item).__name__, str(e)) from e


def decode_cache_item(
    value: Optional[str],
    cache_type: Optional[Union[CacheType, str]],
    stored_type: Optional[Union[CacheType, str]] = None,
) -> Optional[CacheItem]:
    """
    將文字還原為緩存值

    Args:
        value: 存放的文字
        cache_type: 調用方預期的類型，None 時使用 stored_type
        stored_type: 寫入時記錄的類型

    Returns:
        還原後的值；類型不相容或內容損壞時返回 None（視為未命中）
    """
    if value is None:
        return None
    try:
        expected = CacheType(cache_type) if cache_type else None
        stored = CacheType(stored_type) if stored_type else None
    except ValueError:
        logger.debug(f"[Codec] 未知的緩存類型: expected={cache_type}, stored={stored_type}")
        return None

    if expected and stored and expected != stored:
        logger.debug(f"[Codec] 類型不相容: expected={expected.value}, stored={stored.value}")
        return None

    effective = expected or stored or CacheType.STRING
    try:
        if effective == CacheType.STRING:
            return value
        if effective == CacheType.BYTES:
            return base64.b64decode(value.encode("ascii"), validate=True)
        if effective == CacheType.NUMBER:
            number = json.loads(value)
            if isinstance(number, bool) or not isinstance(number, (int, float)):
                return None
            return number
        return json.loads(value)
    except (binascii.Error, UnicodeEncodeError, ValueError) as e:
        logger.debug(f"[Codec] 解碼失敗 ({effective.value}): {e}")
        return None
