"""
全局測試配置

定義全局的 pytest 配置和通用 fixtures。
"""

import time

import pytest


def pytest_configure(config):
    """
    Pytest 配置鉤子 - 註冊自定義標記
    """
    config.addinivalue_line(
        "markers",
        "unit: 單元測試，使用 mock，不依賴外部資源"
    )
    config.addinivalue_line(
        "markers",
        "integration: 整合測試，使用真實的 SQLite 資料庫"
    )


# 通用 fixtures（所有測試都可用）

@pytest.fixture
def fixed_now():
    """固定的當前時間（epoch 秒），用於可預測的過期計算"""
    return 1_700_000_000.0


@pytest.fixture
def past_expiration():
    """一秒前的絕對過期時間"""
    return time.time() - 1


@pytest.fixture
def sample_items():
    """
    各種形狀的緩存值

    Returns:
        dict: 名稱 -> 值
    """
    return {
        "text": "你好, cache",
        "binary": b"\x00\xffbinary\x10",
        "json_object": {"name": "a", "tags": ["x", "y"], "nested": {"n": 1}},
        "json_list": [1, "two", 3.0],
        "integer": 42,
        "float": 3.25,
        "boolean": True,
    }
