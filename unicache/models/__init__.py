from .cache_models import (
    CacheItem,
    CacheType,
    CacheRecord,
    CacheEnvelope,
    CacheEnvelopeInfo,
    GetCacheInfo,
    PutCacheInfo,
    WriteCondition,
    NO_EXPIRATION,
)

__all__ = [
    "CacheItem",
    "CacheType",
    "CacheRecord",
    "CacheEnvelope",
    "CacheEnvelopeInfo",
    "GetCacheInfo",
    "PutCacheInfo",
    "WriteCondition",
    "NO_EXPIRATION",
]
