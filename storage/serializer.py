"""Conversion between Cart entities and the JSONB payload column."""

import json
from typing import Any

from domain import Cart
from shared.exceptions import RepositoryError


class CartSerializer:
    """Encode carts to JSON text and decode stored payloads back to carts."""

    def dumps(self, cart: Cart) -> str:
        try:
            return json.dumps(cart.to_dict(), allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise RepositoryError(f"could not serialize cart {cart.id!r}", cause=exc) from exc

    def loads(self, raw: Any) -> Cart:
        """Decode a payload as returned by psycopg.

        psycopg already parses JSONB into Python objects; text and byte
        forms are accepted as well.
        """
        try:
            if isinstance(raw, memoryview):
                raw = raw.tobytes()
            if isinstance(raw, (bytes, bytearray)):
                raw = raw.decode()
            if isinstance(raw, str):
                raw = json.loads(raw)
            return Cart.from_dict(raw)
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            raise RepositoryError("could not deserialize cart payload", cause=exc) from exc


__all__ = ["CartSerializer"]
