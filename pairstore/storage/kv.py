"""KV abstraction consumed by the association store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence


class KVBackend(ABC):
    """String key/value backend.

    Implementations raise :class:`pairstore.core.errors.BackendError` when the
    storage call itself fails; a missing key is not an error.
    """

    @abstractmethod
    async def set(self, key: str, value: str) -> bool:
        pass

    @abstractmethod
    async def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    async def delete(self, key: str) -> int:
        """Delete one key and return the number of keys removed (0 or 1)."""
        pass

    @abstractmethod
    async def scan_prefix(self, prefix: str) -> list[str]:
        """Return every key starting with ``prefix``."""
        pass

    @abstractmethod
    async def bulk_delete(self, keys: Sequence[str]) -> int:
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Release backend resources. Safe to call more than once."""
        pass
