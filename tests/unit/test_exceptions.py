"""
測試自定義異常
"""

import pytest

from unicache.core.exceptions import (
    CacheBackendError,
    CacheError,
    CacheNotInitializedError,
    ConfigurationError,
    UnicacheBaseException,
)

pytestmark = pytest.mark.unit


def test_backend_error_to_dict():
    error = CacheBackendError("D1", "query", "UNIQUE constraint failed")

    assert isinstance(error, CacheError)
    assert error.to_dict() == {
        "error_code": "CacheBackendError",
        "message": "D1 操作失敗 (query): UNIQUE constraint failed",
        "details": {"backend": "D1", "operation": "query", "reason": "UNIQUE constraint failed"},
    }


def test_custom_error_code():
    error = CacheNotInitializedError("SQLite", error_code="NOT_READY")

    assert error.error_code == "NOT_READY"
    assert error.details == {"backend": "SQLite"}


def test_configuration_error_is_not_cache_error():
    error = ConfigurationError("D1_API_TOKEN", "missing")

    assert isinstance(error, UnicacheBaseException)
    assert not isinstance(error, CacheError)
    assert str(error) == "配置錯誤 (D1_API_TOKEN): missing"
