"""SQLite-backed key/value backend."""

from __future__ import annotations

import asyncio
import sqlite3
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, TypeVar

from pairstore.core.errors import BackendClosedError, BackendError
from pairstore.storage.kv import KVBackend
from pairstore.util.logger import get_logger


T = TypeVar("T")

logger = get_logger("storage.sqlite")


class SqliteKVBackend(KVBackend):
    def __init__(self, db_path: str = "logs/pairstore.db", delete_chunk_size: int = 500) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.delete_chunk_size = max(1, int(delete_chunk_size))
        self._closed = False

        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=5.0)
        conn.execute("PRAGMA busy_timeout=5000")
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        # "with conn" only commits or rolls back; the connection is closed here
        conn = self._connect()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._connection() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS pair_kv (
                  key TEXT PRIMARY KEY,
                  value TEXT NOT NULL
                )
                """
            )
            conn.commit()
        logger.info("sqlite backend initialized path=%s", self.db_path)

    def _with_retry(self, fn: Callable[[], T], retries: int = 5) -> T:
        for attempt in range(retries):
            try:
                return fn()
            except sqlite3.OperationalError as exc:
                if "locked" not in str(exc).lower() or attempt == retries - 1:
                    raise
                time.sleep(0.01 * (attempt + 1))
        raise RuntimeError("unreachable retry state")

    async def _run(self, op: str, fn: Callable[[], T]) -> T:
        if self._closed:
            raise BackendClosedError(f"sqlite backend is shut down ({op})")
        try:
            return await asyncio.to_thread(self._with_retry, fn)
        except sqlite3.Error as exc:
            raise BackendError(f"sqlite {op} failed: {exc}") from exc

    async def set(self, key: str, value: str) -> bool:
        def _write() -> bool:
            with self._connection() as conn:
                conn.execute(
                    """
                    INSERT INTO pair_kv (key, value)
                    VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value=excluded.value
                    """,
                    (key, value),
                )
                conn.commit()
            return True

        ok = await self._run("set", _write)
        logger.debug("set key=%s ok=%s", key, ok)
        return ok

    async def get(self, key: str) -> str | None:
        def _read() -> str | None:
            with self._connection() as conn:
                row = conn.execute("SELECT value FROM pair_kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row[0])

        value = await self._run("get", _read)
        logger.debug("get key=%s hit=%s", key, value is not None)
        return value

    async def delete(self, key: str) -> int:
        def _delete() -> int:
            with self._connection() as conn:
                cur = conn.execute("DELETE FROM pair_kv WHERE key = ?", (key,))
                conn.commit()
                return int(cur.rowcount or 0)

        removed = await self._run("delete", _delete)
        logger.debug("delete key=%s removed=%s", key, removed)
        return removed

    async def scan_prefix(self, prefix: str) -> list[str]:
        # byte-wise substr keeps % and _ literal and does not stop at NUL
        raw_prefix = prefix.encode("utf-8")

        def _scan() -> list[str]:
            with self._connection() as conn:
                rows = conn.execute(
                    "SELECT key FROM pair_kv WHERE substr(CAST(key AS BLOB), 1, ?) = ? ORDER BY key",
                    (len(raw_prefix), raw_prefix),
                ).fetchall()
            return [str(row[0]) for row in rows]

        return await self._run("scan", _scan)

    async def bulk_delete(self, keys: Sequence[str]) -> int:
        key_list = list(keys)
        if not key_list:
            return 0

        def _delete_many() -> int:
            removed = 0
            with self._connection() as conn:
                for start in range(0, len(key_list), self.delete_chunk_size):
                    chunk = key_list[start : start + self.delete_chunk_size]
                    placeholders = ",".join("?" for _ in chunk)
                    cur = conn.execute(f"DELETE FROM pair_kv WHERE key IN ({placeholders})", chunk)
                    removed += int(cur.rowcount or 0)
                conn.commit()
            return removed

        return await self._run("bulk_delete", _delete_many)

    async def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.info("sqlite backend shut down path=%s", self.db_path)
