"""
外部服務模塊

D1 與 Upstash 的 HTTP 客戶端

請直接從子模塊導入:
from unicache.services.external.d1_client import D1HttpClient
"""

__all__ = [
    'd1_client',
    'upstash_client'
]
