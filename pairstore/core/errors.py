"""Project error hierarchy."""


class PairStoreError(Exception):
    """Base error."""


class InvalidArgumentError(PairStoreError, ValueError):
    """Raised when a scope or id argument is missing, empty or not a string."""


class BackendError(PairStoreError):
    """Raised by a backend when the underlying storage call fails."""


class BackendClosedError(BackendError):
    """Raised when a backend is used after shutdown."""
