"""
單元測試配置

單元測試使用 mock，不依賴外部資源（Redis、HTTP 服務等）。
"""

import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_redis_client():
    """
    模擬 redis.asyncio 客戶端

    用於單元測試，不連接真實 Redis
    """
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def mock_upstash_client():
    """模擬 Upstash REST 客戶端"""
    client = MagicMock()
    client.command = AsyncMock(return_value=None)
    client.close = AsyncMock()
    return client
