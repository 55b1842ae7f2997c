"""Repository implementations."""

from .base import BaseRepository
from .cart_repo import CartRepository

__all__ = ["BaseRepository", "CartRepository"]
