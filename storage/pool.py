"""Connection pool management for the cart document store.

Wraps ``psycopg_pool.ConnectionPool`` with a fixed upper bound, an
acquisition timeout and scoped acquisition.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import psycopg  # type: ignore
from psycopg_pool import ConnectionPool, PoolClosed, PoolTimeout  # type: ignore

from shared.config import DEFAULT_CONNECTION_TIMEOUT, DEFAULT_POOL_SIZE
from shared.exceptions import ConfigurationError, PoolExhaustedError


class ConnectionPoolManager:
    """Bounded set of reusable PostgreSQL connections.

    Connections are opened lazily: one at construction, more on demand up to
    ``max_size``. Every connection runs in autocommit mode so each statement
    is committed on its own. Broken connections are checked for on acquire
    and replaced by the pool.

    Example:
        >>> pool = ConnectionPoolManager("host=localhost dbname=mushop_carts")
        >>> with pool.connection() as conn:
        ...     conn.execute("SELECT 1")
        >>> pool.close()
    """

    def __init__(
        self,
        conninfo: str,
        max_size: int = DEFAULT_POOL_SIZE,
        timeout: float = DEFAULT_CONNECTION_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        """Open the pool and wait for its first connection.

        Args:
            conninfo: libpq connection string
            max_size: Upper bound on open connections, fixed for the pool's lifetime
            timeout: Seconds to wait for a connection, at startup and on acquire

        Raises:
            ConfigurationError: If the store cannot be reached or rejects the credentials
        """
        if max_size < 1:
            raise ConfigurationError(f"pool size must be at least 1, got {max_size}")
        if timeout <= 0:
            raise ConfigurationError(f"connection timeout must be positive, got {timeout}")

        self._max_size = max_size
        self._timeout = timeout
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._checked_out: Dict[int, Any] = {}

        self._pool = ConnectionPool(
            conninfo,
            min_size=1,
            max_size=max_size,
            timeout=timeout,
            kwargs={"autocommit": True},
            check=ConnectionPool.check_connection,
            open=False,
        )
        try:
            self._pool.open(wait=True, timeout=timeout)
        except (PoolTimeout, psycopg.Error) as exc:
            self._pool.close()
            raise ConfigurationError(
                f"could not connect to PostgreSQL within {timeout}s", cause=exc
            ) from exc
        self._logger.info("connection pool opened (max_size=%d, timeout=%.1fs)", max_size, timeout)

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def closed(self) -> bool:
        return self._pool.closed

    def acquire(self) -> Any:
        """Check out a connection.

        Raises:
            PoolExhaustedError: If no connection frees up within ``timeout``,
                or the pool has been closed
        """
        try:
            conn = self._pool.getconn(timeout=self._timeout)
        except PoolTimeout as exc:
            raise PoolExhaustedError(
                f"no connection available within {self._timeout}s", cause=exc
            ) from exc
        except PoolClosed as exc:
            raise PoolExhaustedError("connection pool is closed", cause=exc) from exc
        with self._lock:
            self._checked_out[id(conn)] = conn
        return conn

    def release(self, conn: Any) -> None:
        """Return a connection to the pool.

        Releasing a handle that is not checked out (already released, not
        from this pool, or ``None``) does nothing. A broken connection is
        handed back anyway so the pool can discard and replace it.
        """
        if conn is None:
            return
        with self._lock:
            if self._checked_out.pop(id(conn), None) is None:
                return
        if self._pool.closed:
            conn.close()
            return
        self._pool.putconn(conn)

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Scoped acquisition; the connection is released on every exit path."""
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    def stats(self) -> Dict[str, int]:
        """Counters reported by the underlying pool."""
        return dict(self._pool.get_stats())

    def close(self) -> None:
        if self._pool.closed:
            return
        self._pool.close()
        self._logger.info("connection pool closed")

    def __enter__(self) -> "ConnectionPoolManager":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["ConnectionPoolManager"]
