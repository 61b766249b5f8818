"""Redis-backed key/value backend."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from pairstore.core.errors import BackendClosedError, BackendError
from pairstore.storage.kv import KVBackend
from pairstore.util.logger import get_logger


logger = get_logger("storage.redis")

_GLOB_SPECIAL = frozenset("\\*?[]")


def _to_str(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def escape_glob(text: str) -> str:
    """Escape Redis MATCH metacharacters so ``text`` matches literally."""

    return "".join(f"\\{ch}" if ch in _GLOB_SPECIAL else ch for ch in text)


class RedisKVBackend(KVBackend):
    def __init__(
        self,
        *,
        redis_url: str = "redis://127.0.0.1:6379/0",
        key_prefix: str = "pairstore",
        scan_batch_size: int = 500,
        delete_chunk_size: int = 500,
        client: Any = None,
    ) -> None:
        self.client = client if client is not None else aioredis.Redis.from_url(redis_url, decode_responses=True)
        self.key_prefix = key_prefix.strip() or "pairstore"
        self.scan_batch_size = max(1, int(scan_batch_size))
        self.delete_chunk_size = max(1, int(delete_chunk_size))
        self._closed = False

    def _full_key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}"

    def _strip_namespace(self, raw_key: Any) -> str:
        return _to_str(raw_key)[len(self.key_prefix) + 1 :]

    def _ensure_open(self, op: str) -> None:
        if self._closed:
            raise BackendClosedError(f"redis backend is shut down ({op})")

    async def set(self, key: str, value: str) -> bool:
        self._ensure_open("set")
        try:
            reply = await self.client.set(self._full_key(key), value)
        except RedisError as exc:
            raise BackendError(f"redis set failed: {exc}") from exc
        logger.debug("set key=%s reply=%s", key, reply)
        return reply is True or _to_str(reply) == "OK"

    async def get(self, key: str) -> str | None:
        self._ensure_open("get")
        try:
            value = await self.client.get(self._full_key(key))
        except RedisError as exc:
            raise BackendError(f"redis get failed: {exc}") from exc
        logger.debug("get key=%s hit=%s", key, value is not None)
        return None if value is None else _to_str(value)

    async def delete(self, key: str) -> int:
        self._ensure_open("delete")
        try:
            removed = await self.client.delete(self._full_key(key))
        except RedisError as exc:
            raise BackendError(f"redis delete failed: {exc}") from exc
        logger.debug("delete key=%s removed=%s", key, removed)
        return int(removed or 0)

    async def scan_prefix(self, prefix: str) -> list[str]:
        self._ensure_open("scan")
        pattern = escape_glob(self._full_key(prefix)) + "*"
        keys: list[str] = []
        try:
            async for raw_key in self.client.scan_iter(match=pattern, count=self.scan_batch_size):
                keys.append(self._strip_namespace(raw_key))
        except RedisError as exc:
            raise BackendError(f"redis scan failed: {exc}") from exc
        # SCAN may return a key more than once
        return sorted(set(keys))

    async def bulk_delete(self, keys: Sequence[str]) -> int:
        self._ensure_open("bulk_delete")
        full_keys = [self._full_key(key) for key in keys]
        removed = 0
        try:
            for start in range(0, len(full_keys), self.delete_chunk_size):
                removed += int(await self.client.delete(*full_keys[start : start + self.delete_chunk_size]) or 0)
        except RedisError as exc:
            raise BackendError(f"redis bulk delete failed: {exc}") from exc
        return removed

    async def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self.client.aclose()
        except RedisError as exc:
            logger.warning("redis close failed: %s", exc)
        logger.info("redis backend shut down prefix=%s", self.key_prefix)
