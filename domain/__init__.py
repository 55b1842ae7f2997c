"""Domain entities for the cart document store.

Rules:
- MUST NOT import storage, api
"""

from .cart import Cart, CartItem, CartRecord

__all__ = ["Cart", "CartItem", "CartRecord"]
