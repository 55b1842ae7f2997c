import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from psycopg.conninfo import make_conninfo


DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5432
DEFAULT_DATABASE = "mushop_carts"
DEFAULT_USER = "mushop"
DEFAULT_PASSWORD = "mushop"
DEFAULT_TABLE = "carts"
DEFAULT_POOL_SIZE = 10
DEFAULT_CONNECTION_TIMEOUT = 30.0


@dataclass
class CartStoreConfig:
    """Configuration for the cart document store."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    database: str = DEFAULT_DATABASE
    user: str = DEFAULT_USER
    password: str = DEFAULT_PASSWORD
    table_name: str = DEFAULT_TABLE
    pool_size: int = DEFAULT_POOL_SIZE
    connection_timeout: float = DEFAULT_CONNECTION_TIMEOUT
    pg_conn: str = ""

    @property
    def conninfo(self) -> str:
        """libpq connection string; ``pg_conn`` wins over the individual parts."""
        if self.pg_conn:
            return self.pg_conn.replace("postgresql+psycopg", "postgresql")
        return make_conninfo(
            host=self.host,
            port=str(self.port),
            dbname=self.database,
            user=self.user,
            password=self.password,
        )


def _parse_int(value: Optional[str], default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_float(value: Optional[str], default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def load_config() -> CartStoreConfig:
    """Load configuration from environment variables (and a .env file if present)."""
    load_dotenv()

    return CartStoreConfig(
        host=os.getenv("POSTGRES_HOST", DEFAULT_HOST),
        port=_parse_int(os.getenv("POSTGRES_PORT"), DEFAULT_PORT),
        database=os.getenv("POSTGRES_DB", DEFAULT_DATABASE),
        user=os.getenv("POSTGRES_USER", DEFAULT_USER),
        password=os.getenv("POSTGRES_PASSWORD", DEFAULT_PASSWORD),
        table_name=os.getenv("POSTGRES_CARTS_TABLE", DEFAULT_TABLE),
        pool_size=_parse_int(os.getenv("POSTGRES_POOL_SIZE"), DEFAULT_POOL_SIZE),
        connection_timeout=_parse_float(
            os.getenv("POSTGRES_CONNECTION_TIMEOUT"), DEFAULT_CONNECTION_TIMEOUT
        ),
        pg_conn=os.getenv("PG_CONN", ""),
    )


__all__ = ["CartStoreConfig", "load_config"]
