"""
SQL 緩存語句生成

所有 SQL 類後端（D1、SQLite）共用同一表結構與語句集合。
語句中只拼接資料表名稱，其餘參數一律以 ? 位置參數綁定。
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from unicache.core.exceptions import InvalidTableNameError

_TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class SQLCacheStatements:
    create: str
    create_index: str
    get: str
    insert: str
    update: str
    upsert: str
    delete: str
    list: str
    list_no_limit: str


def validate_table_name(table_name: str) -> str:
    if not isinstance(table_name, str) or not _TABLE_NAME_PATTERN.match(table_name):
        raise InvalidTableNameError(str(table_name))
    return table_name


def create_sql_cache_statements(table_name: str) -> SQLCacheStatements:
    table = validate_table_name(table_name)
    create = f"""CREATE TABLE IF NOT EXISTS {table} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            key VARCHAR(100) NOT NULL UNIQUE,
            value TEXT,
            type VARCHAR(10),
            expiration INTEGER NOT NULL DEFAULT -1
        )"""
    create_index = f"CREATE INDEX IF NOT EXISTS idx_{table}_key ON {table}(key)"
    get = f"SELECT id, key, value, type, expiration FROM {table} WHERE key = ?"
    insert = f"INSERT INTO {table} (key, value, type, expiration) VALUES (?, ?, ?, ?)"
    update = f"UPDATE {table} SET value = ?, type = ?, expiration = ? WHERE key = ?"
    upsert = (
        f"INSERT INTO {table} (key, value, type, expiration) VALUES (?, ?, ?, ?) "
        f"ON CONFLICT(key) DO UPDATE SET value = excluded.value, type = excluded.type, "
        f"expiration = excluded.expiration"
    )
    delete = f"DELETE FROM {table} WHERE key = ?"
    # LIKE 對 ASCII 不分大小寫，前綴比對改用 substr
    # 已過期但尚未被惰性刪除的行不列出
    list_filter = "substr(key, 1, length(?)) = ? AND (expiration = -1 OR expiration >= ?)"
    list_stmt = f"SELECT key FROM {table} WHERE {list_filter} ORDER BY id LIMIT ?"
    list_no_limit = f"SELECT key FROM {table} WHERE {list_filter} ORDER BY id"
    return SQLCacheStatements(
        create=create,
        create_index=create_index,
        get=get,
        insert=insert,
        update=update,
        upsert=upsert,
        delete=delete,
        list=list_stmt,
        list_no_limit=list_no_limit,
    )


def list_params(prefix: Optional[str], now: float, limit: Optional[int] = None) -> Tuple:
    """list / list_no_limit 的參數；limit 為 None 時對應 list_no_limit"""
    prefix = prefix or ""
    if limit is None:
        return (prefix, prefix, now)
    return (prefix, prefix, now, max(int(limit), 0))


def insert_params(key: str, value: str, cache_type: str, expiration: int) -> Tuple:
    return (key, value, cache_type, expiration)


def update_params(key: str, value: str, cache_type: str, expiration: int) -> Tuple:
    return (value, cache_type, expiration, key)


def upsert_params(key: str, value: str, cache_type: str, expiration: int) -> Tuple:
    return (key, value, cache_type, expiration)
