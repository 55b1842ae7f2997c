"""Shared configuration and exceptions for the cart document store."""

from .config import CartStoreConfig, load_config
from .exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    PoolExhaustedError,
    RepositoryError,
    SharedError,
    VersionConflictError,
)

__all__ = [
    "CartStoreConfig",
    "load_config",
    "SharedError",
    "ConfigurationError",
    "InvalidArgumentError",
    "RepositoryError",
    "PoolExhaustedError",
    "VersionConflictError",
]
