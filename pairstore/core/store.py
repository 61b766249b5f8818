"""Bidirectional primary/external id association store.

Each association ``(scope, primary_id, external_id)`` is kept as two backend
entries::

    encode_key(scope, PRIMARY, primary_id)   -> external_id
    encode_key(scope, EXTERNAL, external_id) -> primary_id

The two writes (and the two deletes) are not transactional. A ``False`` from
:meth:`AssociationStore.save` or :meth:`AssociationStore.delete_pair` means the
pair may be half written; nothing is rolled back. Concurrent writers on the
same pair can briefly expose one updated entry next to one stale entry.

Example::

    store = AssociationStore(create_backend())
    await store.save("0", "123", "234")                  # True
    await store.lookup_external_by_primary("0", "123")   # "234"
    await store.lookup_primary_by_external("0", "234")   # "123"
    await store.delete_pair("0", "123", "234")           # True
"""

from __future__ import annotations

import asyncio

from pairstore.core.errors import BackendError, InvalidArgumentError
from pairstore.core.keys import external_key, primary_key, scope_prefix
from pairstore.core.models import LookupResult
from pairstore.observability.logging import log_event
from pairstore.storage.kv import KVBackend
from pairstore.util.logger import get_logger


logger = get_logger("store")


def _require(name: str, value: object) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"{name} must be a non-empty string, got {value!r}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidArgumentError(f"{name} is not encodable as UTF-8: {value!r}") from exc
    return value


class AssociationStore:
    def __init__(self, backend: KVBackend) -> None:
        self.backend = backend

    async def __aenter__(self) -> "AssociationStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.shutdown()

    async def _set(self, key: str, value: str) -> bool:
        try:
            return bool(await self.backend.set(key, value))
        except BackendError as exc:
            logger.warning("backend set failed key=%s error=%s", key, exc)
            return False

    async def _delete(self, key: str) -> bool:
        try:
            return int(await self.backend.delete(key)) > 0
        except BackendError as exc:
            logger.warning("backend delete failed key=%s error=%s", key, exc)
            return False

    async def _lookup(self, key: str) -> LookupResult:
        try:
            value = await self.backend.get(key)
        except BackendError as exc:
            logger.warning("backend get failed key=%s error=%s", key, exc)
            return LookupResult.backend_error(str(exc))
        if value is None:
            return LookupResult.not_found()
        return LookupResult.found(value)

    async def save(self, scope: str, primary_id: str, external_id: str) -> bool:
        """Store both directions of the pair; ``True`` only if both writes succeed."""
        _require("scope", scope)
        _require("primary_id", primary_id)
        _require("external_id", external_id)
        forward = primary_key(scope, primary_id)
        reverse = external_key(scope, external_id)

        forward_ok, reverse_ok = await asyncio.gather(
            self._set(forward, external_id),
            self._set(reverse, primary_id),
        )
        if forward_ok != reverse_ok:
            log_event(
                "pair_partial_write",
                scope=scope,
                written=forward if forward_ok else reverse,
                failed=reverse if forward_ok else forward,
            )
        return forward_ok and reverse_ok

    async def resolve_primary(self, scope: str, external_id: str) -> LookupResult:
        _require("scope", scope)
        _require("external_id", external_id)
        return await self._lookup(external_key(scope, external_id))

    async def resolve_external(self, scope: str, primary_id: str) -> LookupResult:
        _require("scope", scope)
        _require("primary_id", primary_id)
        return await self._lookup(primary_key(scope, primary_id))

    async def lookup_primary_by_external(self, scope: str, external_id: str) -> str | None:
        result = await self.resolve_primary(scope, external_id)
        return result.value_or_none()

    async def lookup_external_by_primary(self, scope: str, primary_id: str) -> str | None:
        result = await self.resolve_external(scope, primary_id)
        return result.value_or_none()

    async def delete_pair(self, scope: str, primary_id: str, external_id: str) -> bool:
        """Remove both entries; ``True`` only if each delete removed a key."""
        _require("scope", scope)
        _require("primary_id", primary_id)
        _require("external_id", external_id)
        forward = primary_key(scope, primary_id)
        reverse = external_key(scope, external_id)

        forward_ok, reverse_ok = await asyncio.gather(self._delete(forward), self._delete(reverse))
        if forward_ok != reverse_ok:
            log_event(
                "pair_partial_delete",
                scope=scope,
                removed=forward if forward_ok else reverse,
                missing=reverse if forward_ok else forward,
            )
        return forward_ok and reverse_ok

    async def delete_all_for_scope(self, scope: str) -> bool:
        """Remove every key of ``scope`` in both directions.

        Scan and delete run one after the other without isolation: keys written
        to the scope in between survive. An already empty scope is a success.
        """
        _require("scope", scope)
        prefix = scope_prefix(scope)
        try:
            keys = await self.backend.scan_prefix(prefix)
        except BackendError as exc:
            logger.warning("backend scan failed scope=%s error=%s", scope, exc)
            return False
        if not keys:
            log_event("scope_cleared", scope=scope, removed=0)
            return True
        try:
            removed = await self.backend.bulk_delete(keys)
        except BackendError as exc:
            logger.warning("backend bulk delete failed scope=%s keys=%d error=%s", scope, len(keys), exc)
            return False
        log_event("scope_cleared", scope=scope, removed=removed)
        return True

    async def shutdown(self) -> None:
        await self.backend.shutdown()
