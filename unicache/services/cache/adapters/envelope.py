"""
Redis 類後端共用的信封格式

每個鍵存一段 JSON：{"info": {"type": ..., "expiration": ...}, "value": "..."}
"""

import json
import logging
from typing import Optional, Tuple, Union

from pydantic import ValidationError

from unicache.models.cache_models import (
    CacheEnvelope,
    CacheEnvelopeInfo,
    CacheItem,
    GetCacheInfo,
    PutCacheInfo,
)
from unicache.services.cache.codec import cache_item_to_type, decode_cache_item, encode_cache_item
from unicache.services.cache.expiration import calculate_expiration

logger = logging.getLogger(__name__)

_GLOB_SPECIAL_CHARS = "\\*?[]"


def build_envelope(value: CacheItem, info: PutCacheInfo) -> Tuple[str, int]:
    """返回 (信封 JSON, 絕對過期時間)"""
    expiration = calculate_expiration(info)
    envelope = CacheEnvelope(
        info=CacheEnvelopeInfo(type=cache_item_to_type(value), expiration=expiration),
        value=encode_cache_item(value),
    )
    return envelope.model_dump_json(), expiration


def read_envelope(raw: Optional[Union[str, bytes]], info: GetCacheInfo) -> Optional[CacheItem]:
    """解析信封並解碼；內容損壞時視為未命中"""
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    try:
        envelope = CacheEnvelope.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as e:
        logger.debug(f"[Envelope] 無法解析緩存信封: {e}")
        return None
    return decode_cache_item(envelope.value, info.type, envelope.info.type)


def escape_glob_prefix(prefix: Optional[str]) -> str:
    """轉義 Redis glob 特殊字元並加上結尾的 *"""
    escaped = "".join(
        f"\\{char}" if char in _GLOB_SPECIAL_CHARS else char
        for char in (prefix or "")
    )
    return f"{escaped}*"
