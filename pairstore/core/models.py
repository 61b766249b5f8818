"""Value types shared by the codec and the association store."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Direction(str, Enum):
    PRIMARY = "p"
    EXTERNAL = "e"


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    BACKEND_ERROR = "backend_error"


class LookupResult(BaseModel):
    """Outcome of a single-key lookup.

    ``value`` is only set when ``status`` is ``FOUND``. Callers that only need
    the legacy ``str | None`` shape use :meth:`value_or_none`.
    """

    status: LookupStatus
    value: str | None = None
    error: str = ""

    @classmethod
    def found(cls, value: str) -> "LookupResult":
        return cls(status=LookupStatus.FOUND, value=value)

    @classmethod
    def not_found(cls) -> "LookupResult":
        return cls(status=LookupStatus.NOT_FOUND)

    @classmethod
    def backend_error(cls, error: str) -> "LookupResult":
        return cls(status=LookupStatus.BACKEND_ERROR, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND

    def value_or_none(self) -> str | None:
        return self.value if self.is_found else None
