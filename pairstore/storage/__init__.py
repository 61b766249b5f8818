"""Storage backend selection helpers."""

from __future__ import annotations

from pairstore.config.settings import Settings, settings as default_settings
from pairstore.storage.kv import KVBackend
from pairstore.storage.redis_store import RedisKVBackend
from pairstore.storage.sqlite_store import SqliteKVBackend


def create_backend(settings: Settings = default_settings) -> KVBackend:
    backend = settings.storage_backend.strip().lower()
    if backend == "redis":
        return RedisKVBackend(
            redis_url=settings.redis_url,
            key_prefix=settings.redis_key_prefix,
            scan_batch_size=settings.redis_scan_batch_size,
            delete_chunk_size=settings.bulk_delete_chunk_size,
        )
    return SqliteKVBackend(
        db_path=settings.sqlite_db_path,
        delete_chunk_size=settings.bulk_delete_chunk_size,
    )
