"""
自定義異常類框架

定義緩存庫的異常層次結構。
注意：「找不到」與「條件不成立」不屬於異常，分別以 None / False 表示；
只有後端本身不可用或行為異常時才會拋出。
"""

from typing import Optional, Dict, Any


class UnicacheBaseException(Exception):
    """
    所有 unicache 自定義異常的基類

    Attributes:
        message: 錯誤信息
        error_code: 內部錯誤代碼
        details: 額外的錯誤詳情
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """轉換為字典格式（用於日誌或上層響應）"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


# ==================== 快取相關異常 ====================

class CacheError(UnicacheBaseException):
    """快取操作相關的基礎異常"""
    pass


class CacheConnectionError(CacheError):
    """快取連接失敗"""
    def __init__(self, cache_type: str, reason: str, **kwargs):
        super().__init__(
            message=f"{cache_type} 連接失敗: {reason}",
            details={"cache_type": cache_type, "reason": reason},
            **kwargs
        )


class CacheBackendError(CacheError):
    """後端服務返回錯誤（HTTP 狀態碼或服務端錯誤信息）"""
    def __init__(self, backend: str, operation: str, reason: str, **kwargs):
        self.backend = backend
        self.operation = operation
        self.reason = reason
        super().__init__(
            message=f"{backend} 操作失敗 ({operation}): {reason}",
            details={"backend": backend, "operation": operation, "reason": reason},
            **kwargs
        )


class CacheNotInitializedError(CacheError):
    """適配器尚未初始化（未建表或未準備語句）"""
    def __init__(self, backend: str, **kwargs):
        super().__init__(
            message=f"{backend} 緩存尚未初始化，請先調用 initialize()",
            details={"backend": backend},
            **kwargs
        )


class CacheEncodeError(CacheError):
    """緩存值無法序列化"""
    def __init__(self, value_type: str, reason: str, **kwargs):
        super().__init__(
            message=f"無法序列化類型 {value_type} 的緩存值: {reason}",
            details={"value_type": value_type, "reason": reason},
            **kwargs
        )


class InvalidTableNameError(CacheError):
    """不合法的資料表名稱"""
    def __init__(self, table_name: str, **kwargs):
        super().__init__(
            message=f"不合法的資料表名稱: {table_name!r}",
            details={"table_name": table_name},
            **kwargs
        )


# ==================== 配置相關異常 ====================

class ConfigurationError(UnicacheBaseException):
    """配置缺失或不合法"""
    def __init__(self, setting: str, reason: str, **kwargs):
        super().__init__(
            message=f"配置錯誤 ({setting}): {reason}",
            details={"setting": setting, "reason": reason},
            **kwargs
        )
