"""
服務模組

請直接從子模塊導入:
from unicache.services.cache import create_cache_backend
"""
