"""Cart repository implementation.

Stores each Cart as one JSONB document keyed by its id, with a secondary
lookup on the document's ``customerId``.

Rules:
- One statement per operation; writes are atomic at the store
- Every connection is released on every path, including errors
- No retries and no caching; failures go straight to the caller
"""

import logging
import uuid
from typing import Any, Callable, List, Optional, Sequence

import psycopg  # type: ignore

from domain import Cart, CartRecord
from shared.config import DEFAULT_TABLE
from shared.exceptions import (
    InvalidArgumentError,
    RepositoryError,
    VersionConflictError,
)

from ..pool import ConnectionPoolManager
from ..schema import DbSchemaManager
from ..serializer import CartSerializer
from .base import BaseRepository


class CartRepository(BaseRepository[Cart]):
    """Repository for Cart documents.

    Last writer wins on ``upsert`` unless an expected version is supplied.

    Example:
        >>> repo = CartRepository(pool, table_name="carts")
        >>> repo.ensure_schema()
        >>> version = repo.upsert(Cart(id="cart-1", customer_id="cust-42"))
        >>> [c.id for c in repo.get_by_customer_id("cust-42")]
        ['cart-1']
    """

    def __init__(
        self,
        pool: ConnectionPoolManager,
        table_name: str = DEFAULT_TABLE,
        logger: Optional[logging.Logger] = None,
        serializer: Optional[CartSerializer] = None,
    ):
        self.pool = pool
        self._logger = logger or logging.getLogger(__name__)
        self._serializer = serializer or CartSerializer()
        self._schema = DbSchemaManager(pool, table_name, logger=self._logger)
        self.table = self._schema.table

    def ensure_schema(self) -> None:
        """Create the backing table and customer index if they do not exist."""
        self._schema.ensure_schema()

    def get_by_id(self, cart_id: str) -> Optional[Cart]:
        """Find a Cart by ID.

        Args:
            cart_id: Cart ID

        Returns:
            Cart if found, None otherwise

        Raises:
            InvalidArgumentError: If ``cart_id`` is empty
            RepositoryError: On transport or deserialization failure
        """
        self._require(cart_id, "cart id")
        sql = f"SELECT document FROM {self.table} WHERE id = %s"
        row = self._run(f"get cart {cart_id!r}", sql, (cart_id,), _fetchone)
        if row is None:
            self._logger.debug("cart %s not found", cart_id)
            return None
        return self._serializer.loads(row[0])

    def get_record(self, cart_id: str) -> Optional[CartRecord]:
        """Like get_by_id, with the version token and timestamps."""
        self._require(cart_id, "cart id")
        sql = (
            f"SELECT id, document, version, last_modified, created_on "
            f"FROM {self.table} WHERE id = %s"
        )
        row = self._run(f"get record {cart_id!r}", sql, (cart_id,), _fetchone)
        if row is None:
            return None
        return CartRecord(
            id=row[0],
            cart=self._serializer.loads(row[1]),
            version=str(row[2]),
            last_modified=row[3],
            created_on=row[4],
        )

    def get_by_customer_id(self, customer_id: str) -> List[Cart]:
        """Find all Carts whose payload ``customerId`` equals ``customer_id``.

        No ordering is guaranteed.

        Raises:
            InvalidArgumentError: If ``customer_id`` is None or empty; the
                store is not contacted
        """
        self._require(customer_id, "customer id")
        sql = f"SELECT document FROM {self.table} WHERE document->>'customerId' = %s"
        rows = self._run(
            f"get carts for customer {customer_id!r}", sql, (customer_id,), _fetchall
        )
        return [self._serializer.loads(row[0]) for row in rows]

    def upsert(self, cart: Cart, expected_version: Optional[str] = None) -> str:
        """Insert or replace a Cart.

        A new row gets a fresh version and both timestamps. An existing row
        has its whole document replaced, a fresh version and a new
        ``last_modified``; ``created_on`` is kept.

        Args:
            cart: Cart to store
            expected_version: If given, only replace the row when its stored
                version equals this token

        Returns:
            The version token written

        Raises:
            InvalidArgumentError: If the cart or its id is missing, or
                ``expected_version`` is not a UUID
            VersionConflictError: If ``expected_version`` does not match
            RepositoryError: On serialization or transport failure
        """
        if cart is None:
            raise InvalidArgumentError("The cart must be specified")
        self._require(cart.id, "cart id")
        payload = self._serializer.dumps(cart)

        if expected_version is None:
            sql = f"""
            INSERT INTO {self.table} (id, document, version, last_modified, created_on)
            VALUES (%s, %s::jsonb, gen_random_uuid(), CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
            ON CONFLICT (id) DO UPDATE SET
              document = EXCLUDED.document,
              version = gen_random_uuid(),
              last_modified = CURRENT_TIMESTAMP
            RETURNING version;
            """
            params: Sequence[Any] = (cart.id, payload)
        else:
            try:
                expected = uuid.UUID(str(expected_version))
            except ValueError as exc:
                raise InvalidArgumentError(
                    f"expected version {expected_version!r} is not a version token"
                ) from exc
            sql = f"""
            UPDATE {self.table} SET
              document = %s::jsonb,
              version = gen_random_uuid(),
              last_modified = CURRENT_TIMESTAMP
            WHERE id = %s AND version = %s
            RETURNING version;
            """
            params = (payload, cart.id, expected)

        row = self._run(f"upsert cart {cart.id!r}", sql, params, _fetchone)
        if row is None:
            raise VersionConflictError(cart.id, str(expected_version))
        version = str(row[0])
        self._logger.debug("cart %s stored (version=%s)", cart.id, version)
        return version

    def delete(self, cart_id: str) -> bool:
        """Delete a Cart by ID.

        Returns:
            True if a row was removed, False if none existed
        """
        self._require(cart_id, "cart id")
        sql = f"DELETE FROM {self.table} WHERE id = %s"
        removed = self._run(f"delete cart {cart_id!r}", sql, (cart_id,), _rowcount)
        return removed > 0

    def health_check(self) -> bool:
        """Run ``SELECT 1``; report failure as False and log the cause."""
        try:
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1")
                    return cur.fetchone() is not None
        except Exception:
            self._logger.error("DB health-check failed.", exc_info=True)
            return False

    def _run(
        self,
        action: str,
        sql: str,
        params: Sequence[Any],
        handler: Callable[[Any], Any],
    ) -> Any:
        with self.pool.connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(sql, params)
                    return handler(cur)
            except psycopg.Error as exc:
                raise RepositoryError(f"{action} failed", cause=exc) from exc

    @staticmethod
    def _require(value: Optional[str], name: str) -> None:
        if not isinstance(value, str) or not value:
            raise InvalidArgumentError(f"The {name} must be specified")


def _fetchone(cur: Any) -> Any:
    return cur.fetchone()


def _fetchall(cur: Any) -> List[Any]:
    return cur.fetchall()


def _rowcount(cur: Any) -> int:
    return cur.rowcount


__all__ = ["CartRepository"]
