"""Database schema management for the cart document store.

Handles table creation and the expression index on ``customerId``.

Rules:
- Every statement is "IF NOT EXISTS" and bootstrap holds an advisory lock;
  it is safe to repeat and to run from several processes at once
- MAY import shared (for config and exceptions)
"""

import logging
import re
from typing import List, Optional

import psycopg  # type: ignore

from shared.exceptions import RepositoryError

from .pool import ConnectionPoolManager


class DbSchemaManager:
    """Responsible for ensuring the cart table and its index exist."""

    def __init__(
        self,
        pool: ConnectionPoolManager,
        table_name: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.pool = pool
        self.table = self._sanitize_identifier(table_name)
        self._logger = logger or logging.getLogger(__name__)

    @property
    def customer_index(self) -> str:
        return f"idx_{self.table}_customer_id"

    def table_statements(self) -> List[str]:
        return [
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
              id            VARCHAR(255) PRIMARY KEY,
              document      JSONB NOT NULL,
              version       UUID DEFAULT gen_random_uuid(),
              last_modified TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
              created_on    TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            """,
        ]

    def index_statements(self) -> List[str]:
        return [
            # BTREE on the extracted text value, matched by document->>'customerId' = %s
            f"""
            CREATE INDEX IF NOT EXISTS {self.customer_index}
            ON {self.table} ((document->>'customerId'));
            """,
        ]

    def ensure_schema(self) -> None:
        """Create the cart table and its customer index if missing.

        The statements run in one transaction holding an advisory lock keyed
        on the table name, so concurrent callers wait for each other instead
        of racing on the catalog.

        Raises:
            RepositoryError: If a statement fails
            PoolExhaustedError: If no connection is available
        """
        statements = self.table_statements() + self.index_statements()
        with self.pool.connection() as conn:
            try:
                with conn.transaction():
                    with conn.cursor() as cur:
                        cur.execute(
                            "SELECT pg_advisory_xact_lock(hashtext(%s))", (self.table,)
                        )
                        for sql in statements:
                            cur.execute(sql)
            except psycopg.Error as exc:
                raise RepositoryError(
                    f"schema bootstrap failed for table {self.table}", cause=exc
                ) from exc
        self._logger.info("schema ready: table=%s index=%s", self.table, self.customer_index)

    @staticmethod
    def _sanitize_identifier(name: Optional[str]) -> str:
        """Sanitize identifier for use in SQL (prevent injection)."""
        if not name:
            return "carts"
        result = re.sub(r"[^A-Za-z0-9_]+", "_", name)
        if not re.match(r"[A-Za-z_]", result):
            result = f"_{result}"
        return result.lower()


__all__ = ["DbSchemaManager"]
