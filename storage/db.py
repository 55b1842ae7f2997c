"""Explicit wiring from configuration to a ready repository."""

import logging
from typing import Optional

from shared.config import CartStoreConfig
from shared.exceptions import ConfigurationError, RepositoryError

from .pool import ConnectionPoolManager
from .repositories import CartRepository


def open_cart_repository(
    config: CartStoreConfig,
    logger: Optional[logging.Logger] = None,
    bootstrap: bool = True,
) -> CartRepository:
    """Build the pool and repository described by ``config``.

    With ``bootstrap`` the schema is ensured before returning. Any failure
    here is fatal: the pool is closed and ConfigurationError is raised.
    """
    logger = logger or logging.getLogger(__name__)
    pool = ConnectionPoolManager(
        config.conninfo,
        max_size=config.pool_size,
        timeout=config.connection_timeout,
        logger=logger,
    )
    repository = CartRepository(pool, table_name=config.table_name, logger=logger)
    if bootstrap:
        try:
            repository.ensure_schema()
        except RepositoryError as exc:
            pool.close()
            raise ConfigurationError("schema bootstrap failed", cause=exc) from exc
    logger.info("connected to PostgreSQL database: %s", config.database)
    return repository


__all__ = ["open_cart_repository"]
