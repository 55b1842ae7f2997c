"""Storage layer for the cart document store.

Handles connection pooling, schema bootstrap, payload serialization and the
cart repository.

Rules:
- MUST NOT import api
- MAY import domain, shared
"""

from .db import open_cart_repository
from .pool import ConnectionPoolManager
from .repositories import BaseRepository, CartRepository
from .schema import DbSchemaManager
from .serializer import CartSerializer

__all__ = [
    # Pool
    "ConnectionPoolManager",
    # Schema
    "DbSchemaManager",
    # Serialization
    "CartSerializer",
    # Repositories
    "BaseRepository",
    "CartRepository",
    # Wiring
    "open_cart_repository",
]
