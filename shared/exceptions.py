"""Exception taxonomy for the cart document store.

Not-found is never an exception: lookups return ``None`` and ``delete``
returns ``False``.
"""

from typing import Optional


class SharedError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(SharedError):
    """The store could not be reached or bootstrapped at construction time."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause


class InvalidArgumentError(SharedError, ValueError):
    """A required argument was missing or invalid.

    Raised before any store access.
    """


class RepositoryError(SharedError):
    """Transport, statement or serialization failure.

    Attributes:
        cause: The underlying exception (also chained as ``__cause__``)
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause


class PoolExhaustedError(RepositoryError):
    """No pooled connection became available within the acquisition timeout."""


class VersionConflictError(RepositoryError):
    """The stored version token did not match the expected one."""

    def __init__(self, entity_id: str, expected_version: str):
        super().__init__(
            f"version conflict for {entity_id!r}: expected {expected_version!r}"
        )
        self.entity_id = entity_id
        self.expected_version = expected_version


__all__ = [
    "SharedError",
    "ConfigurationError",
    "InvalidArgumentError",
    "RepositoryError",
    "PoolExhaustedError",
    "VersionConflictError",
]
