"""SQLite-backed durable tier.

This module stores rating cache entries as JSON blobs in SQLite, in a single
namespaced table keyed by cache key, plus a small settings table holding the
cache duration scalar. Uses WAL mode and auto-commit like the rest of the
project's SQLite usage.

Every blocking call runs in a worker thread via ``asyncio.to_thread`` so the
event loop only suspends on it. Any ``sqlite3``/OS failure is converted to
``StorageDegradedError``.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Callable, TypeVar

from ratingvault.shared.constants import CacheStorageKeys
from ratingvault.shared.errors import create_storage_error

logger = logging.getLogger(__name__)

R = TypeVar("R")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS rating_cache (
    namespace TEXT NOT NULL,
    cache_key TEXT NOT NULL,
    payload BLOB NOT NULL,
    stored_at INTEGER NOT NULL,
    PRIMARY KEY (namespace, cache_key),
    CHECK (length(cache_key) > 0)
);
CREATE INDEX IF NOT EXISTS idx_rating_cache_stored_at
    ON rating_cache (namespace, stored_at);
CREATE TABLE IF NOT EXISTS cache_settings (
    name TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class SQLiteDurableStore:
    """DurableStore implementation on a local SQLite file.

    Attributes:
        db_path: Path to SQLite database file
        namespace: Namespace for rating entries inside the shared table

    Example:
        >>> store = SQLiteDurableStore(Path("ratings_cache.db"))
        >>> await store.put("Inception:2010", b'{"data": {}, "timestamp": 0}', 0)
        >>> await store.count()
        1
        >>> await store.close()
    """

    def __init__(
        self,
        db_path: Path | str,
        namespace: str = CacheStorageKeys.NAMESPACE,
    ) -> None:
        self.db_path = Path(db_path)
        self.namespace = namespace
        self.conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _connect(self) -> sqlite3.Connection:
        if self.conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,  # serialized by self._lock
                isolation_level=None,
            )
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            conn.executescript(SCHEMA_SQL)
            self.conn = conn
            logger.debug("Opened SQLite cache: %s", self.db_path)
        return self.conn

    async def _run(
        self,
        operation: str,
        func: Callable[[sqlite3.Connection], R],
        cache_key: str | None = None,
    ) -> R:
        def call() -> R:
            with self._lock:
                return func(self._connect())

        try:
            return await asyncio.to_thread(call)
        except (sqlite3.Error, OSError) as e:
            raise create_storage_error(
                f"SQLite cache {operation} failed: {e!s}",
                operation=operation,
                original_error=e,
                cache_key=cache_key,
            ) from e

    async def get(self, key: str) -> bytes | None:
        def query(conn: sqlite3.Connection) -> bytes | None:
            row = conn.execute(
                "SELECT payload FROM rating_cache WHERE namespace = ? AND cache_key = ?",
                (self.namespace, key),
            ).fetchone()
            if row is None:
                return None
            payload = row[0]
            return payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)

        return await self._run("get", query, key)

    async def put(self, key: str, payload: bytes, stored_at: int) -> None:
        def insert(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                INSERT INTO rating_cache (namespace, cache_key, payload, stored_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (namespace, cache_key)
                DO UPDATE SET payload = excluded.payload, stored_at = excluded.stored_at
                """,
                (self.namespace, key, payload, stored_at),
            )

        await self._run("put", insert, key)

    async def contains(self, key: str) -> bool:
        def query(conn: sqlite3.Connection) -> bool:
            row = conn.execute(
                "SELECT 1 FROM rating_cache WHERE namespace = ? AND cache_key = ?",
                (self.namespace, key),
            ).fetchone()
            return row is not None

        return await self._run("contains", query, key)

    async def delete(self, keys: Iterable[str]) -> int:
        params = [(self.namespace, key) for key in keys]
        if not params:
            return 0

        def remove(conn: sqlite3.Connection) -> int:
            cursor = conn.executemany(
                "DELETE FROM rating_cache WHERE namespace = ? AND cache_key = ?",
                params,
            )
            return cursor.rowcount

        return await self._run("delete", remove)

    async def count(self) -> int:
        def query(conn: sqlite3.Connection) -> int:
            row = conn.execute(
                "SELECT COUNT(*) FROM rating_cache WHERE namespace = ?",
                (self.namespace,),
            ).fetchone()
            return int(row[0])

        return await self._run("count", query)

    async def items(self) -> list[tuple[str, bytes, int]]:
        def query(conn: sqlite3.Connection) -> list[tuple[str, bytes, int]]:
            rows = conn.execute(
                "SELECT cache_key, payload, stored_at FROM rating_cache WHERE namespace = ?",
                (self.namespace,),
            ).fetchall()
            return [
                (key, payload.encode("utf-8") if isinstance(payload, str) else bytes(payload), stored_at)
                for key, payload, stored_at in rows
            ]

        return await self._run("items", query)

    async def oldest_keys(self, limit: int, exclude: str | None = None) -> list[str]:
        def query(conn: sqlite3.Connection) -> list[str]:
            rows = conn.execute(
                """
                SELECT cache_key FROM rating_cache
                WHERE namespace = ? AND cache_key != ?
                ORDER BY stored_at ASC, cache_key ASC
                LIMIT ?
                """,
                (self.namespace, exclude or "", limit),
            ).fetchall()
            return [row[0] for row in rows]

        return await self._run("oldest_keys", query)

    async def delete_stored_before(self, cutoff: int) -> int:
        def remove(conn: sqlite3.Connection) -> int:
            cursor = conn.execute(
                "DELETE FROM rating_cache WHERE namespace = ? AND stored_at < ?",
                (self.namespace, cutoff),
            )
            return cursor.rowcount

        return await self._run("delete_stored_before", remove)

    async def clear(self) -> int:
        def remove(conn: sqlite3.Connection) -> int:
            cursor = conn.execute(
                "DELETE FROM rating_cache WHERE namespace = ?",
                (self.namespace,),
            )
            return cursor.rowcount

        removed = await self._run("clear", remove)
        logger.info("Cleared %d durable cache entries", removed)
        return removed

    async def size_bytes(self) -> int:
        def query(conn: sqlite3.Connection) -> int:
            row = conn.execute(
                """
                SELECT COALESCE(SUM(length(cache_key) + length(payload)), 0)
                FROM rating_cache WHERE namespace = ?
                """,
                (self.namespace,),
            ).fetchone()
            return int(row[0])

        return await self._run("size_bytes", query)

    async def get_setting(self, name: str) -> str | None:
        def query(conn: sqlite3.Connection) -> str | None:
            row = conn.execute(
                "SELECT value FROM cache_settings WHERE name = ?",
                (name,),
            ).fetchone()
            return None if row is None else str(row[0])

        return await self._run("get_setting", query)

    async def set_setting(self, name: str, value: str) -> None:
        def upsert(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                INSERT INTO cache_settings (name, value) VALUES (?, ?)
                ON CONFLICT (name) DO UPDATE SET value = excluded.value
                """,
                (name, value),
            )

        await self._run("set_setting", upsert)

    async def close(self) -> None:
        """Close database connection."""

        def close_conn() -> None:
            with self._lock:
                if self.conn is not None:
                    self.conn.close()
                    self.conn = None

        await asyncio.to_thread(close_conn)
        logger.debug("Closed SQLite cache connection: %s", self.db_path)

    def __repr__(self) -> str:
        return f"SQLiteDurableStore(db_path={self.db_path!s}, namespace={self.namespace!r})"
