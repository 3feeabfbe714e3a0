"""
測試 Redis 緩存適配器（使用 mock 客戶端）
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError, ResponseError

from unicache.core.exceptions import CacheConnectionError
from unicache.models.cache_models import CacheType, GetCacheInfo, PutCacheInfo
from unicache.services.cache.adapters import RedisCacheAdapter

pytestmark = pytest.mark.unit


def envelope(value, cache_type, expiration=-1):
    return json.dumps({"info": {"type": cache_type, "expiration": expiration}, "value": value})


async def async_iter(items):
    for item in items:
        yield item


@pytest.fixture
def cache(mock_redis_client):
    return RedisCacheAdapter(mock_redis_client)


@pytest.mark.asyncio
async def test_put_writes_envelope_without_ttl(cache, mock_redis_client):
    assert await cache.put("user:1", {"name": "a"}) is None

    mock_redis_client.set.assert_awaited_once()
    args, kwargs = mock_redis_client.set.call_args
    assert args[0] == "user:1"
    assert json.loads(args[1]) == {
        "info": {"type": "json", "expiration": -1},
        "value": '{"name": "a"}',
    }
    assert kwargs == {"pxat": None, "nx": False, "xx": False}


@pytest.mark.asyncio
async def test_put_sets_native_ttl_from_calculator(cache, mock_redis_client):
    await cache.put("k", "v", PutCacheInfo(expiration=1_800_000_000))

    _, kwargs = mock_redis_client.set.call_args
    assert kwargs["pxat"] == 1_800_000_000_000


@pytest.mark.asyncio
async def test_put_non_positive_expiration_uses_past_timestamp(cache, mock_redis_client):
    await cache.put("k", "v", PutCacheInfo(expiration=0))

    args, kwargs = mock_redis_client.set.call_args
    assert kwargs["pxat"] == 1000
    assert json.loads(args[1])["info"]["expiration"] == 1


@pytest.mark.asyncio
async def test_put_nx_passes_flag_and_reports_result(cache, mock_redis_client):
    mock_redis_client.set.return_value = True
    assert await cache.put("k", "v", PutCacheInfo(condition="NX")) is True
    assert mock_redis_client.set.call_args.kwargs["nx"] is True
    assert mock_redis_client.set.call_args.kwargs["xx"] is False

    mock_redis_client.set.return_value = None
    assert await cache.put("k", "v2", PutCacheInfo(condition="NX")) is False


@pytest.mark.asyncio
async def test_put_xx_passes_flag(cache, mock_redis_client):
    mock_redis_client.set.return_value = None
    assert await cache.put("k", "v", PutCacheInfo(condition="XX")) is False
    assert mock_redis_client.set.call_args.kwargs["xx"] is True


@pytest.mark.asyncio
async def test_conditional_failure_is_false(cache, mock_redis_client):
    mock_redis_client.set.side_effect = ResponseError("invalid expire time")

    assert await cache.put("k", "v", PutCacheInfo(condition="NX")) is False


@pytest.mark.asyncio
async def test_unconditional_failure_propagates(cache, mock_redis_client):
    mock_redis_client.set.side_effect = RedisConnectionError("down")

    with pytest.raises(RedisConnectionError):
        await cache.put("k", "v")


@pytest.mark.asyncio
async def test_get_decodes_stored_type(cache, mock_redis_client):
    mock_redis_client.get.return_value = envelope("AAEC", "bytes")

    assert await cache.get("k") == b"\x00\x01\x02"
    mock_redis_client.get.assert_awaited_once_with("k")


@pytest.mark.asyncio
async def test_get_missing_and_type_mismatch(cache, mock_redis_client):
    assert await cache.get("missing") is None

    mock_redis_client.get.return_value = envelope("42", "number")
    assert await cache.get("k", GetCacheInfo(type=CacheType.STRING)) is None
    assert await cache.get("k", GetCacheInfo(type=CacheType.NUMBER)) == 42


@pytest.mark.asyncio
async def test_get_corrupted_envelope_is_not_found(cache, mock_redis_client):
    mock_redis_client.get.return_value = "not json"
    assert await cache.get("k") is None

    mock_redis_client.get.return_value = json.dumps({"value": "x"})
    assert await cache.get("k") is None


@pytest.mark.asyncio
async def test_get_accepts_bytes_response(cache, mock_redis_client):
    mock_redis_client.get.return_value = envelope("text", "string").encode("utf-8")

    assert await cache.get("k") == "text"


@pytest.mark.asyncio
async def test_delete(cache, mock_redis_client):
    await cache.delete("k")

    mock_redis_client.delete.assert_awaited_once_with("k")


@pytest.mark.asyncio
async def test_list_escapes_prefix_and_applies_limit(cache, mock_redis_client):
    mock_redis_client.scan_iter = lambda **kwargs: async_iter(["a*1", "a*2", "a*1", "a*3"])

    assert await cache.list("a*") == ["a*1", "a*2", "a*3"]
    assert await cache.list("a*", limit=2) == ["a*1", "a*2"]
    assert await cache.list("a*", limit=0) == []


@pytest.mark.asyncio
async def test_list_scan_pattern(cache, mock_redis_client):
    calls = []

    def scan_iter(**kwargs):
        calls.append(kwargs)
        return async_iter([b"user:1"])

    mock_redis_client.scan_iter = scan_iter

    assert await cache.list("user?[") == ["user:1"]
    assert await cache.list() == ["user:1"]
    assert calls[0]["match"] == "user\\?\\[*"
    assert calls[1]["match"] == "*"


@pytest.mark.asyncio
async def test_initialize_pings(cache, mock_redis_client):
    await cache.initialize()
    mock_redis_client.ping.assert_awaited_once()

    mock_redis_client.ping.side_effect = RedisConnectionError("refused")
    with pytest.raises(CacheConnectionError):
        await cache.initialize()


@pytest.mark.asyncio
async def test_close_and_context_manager(mock_redis_client):
    async with RedisCacheAdapter(mock_redis_client) as cache:
        assert cache.redis_client is mock_redis_client

    mock_redis_client.ping.assert_awaited_once()
    mock_redis_client.aclose.assert_awaited_once()


def test_from_url_uses_decoded_responses():
    with patch("unicache.services.cache.adapters.redis_adapter.redis.from_url") as mock_from_url:
        mock_from_url.return_value = AsyncMock()
        cache = RedisCacheAdapter.from_url("redis://:secret@localhost:6379/0", name="main")

    mock_from_url.assert_called_once_with(
        "redis://:secret@localhost:6379/0", encoding="utf-8", decode_responses=True
    )
    assert cache.name == "main"
