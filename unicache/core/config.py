from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Optional

class Settings(BaseSettings):
    APP_NAME: str = "unicache"
    LOG_LEVEL: str = "INFO"

    # 使用哪一種緩存後端
    CACHE_BACKEND: Literal["sqlite", "redis", "upstash", "d1"] = "sqlite"
    CACHE_TABLE_NAME: str = "CACHES_v2"  # SQL 類後端共用的資料表名稱

    # SQLite 相關設定
    SQLITE_PATH: str = "./data/cache.db"

    # Redis 相關設定（自建）
    REDIS_URL: str = "redis://localhost:6379"

    # Upstash Redis（HTTP REST）相關設定
    UPSTASH_REDIS_REST_URL: Optional[str] = None
    UPSTASH_REDIS_REST_TOKEN: Optional[str] = None

    # Cloudflare D1 相關設定
    D1_ACCOUNT_ID: Optional[str] = None
    D1_DATABASE_ID: Optional[str] = None
    D1_API_TOKEN: Optional[str] = None

    # HTTP 類後端的請求超時（秒），None 表示使用 aiohttp 預設值
    HTTP_TIMEOUT_SECONDS: Optional[float] = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding='utf-8', extra='ignore')

settings = Settings()
