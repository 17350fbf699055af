"""
Pooled psycopg3 connections to the fonts warehouse.

The CLI builds one pool per run and hands it to the writer, the schema
manager and the search component. Rows come back as dicts.
"""
import os
import time
from contextlib import contextmanager

from psycopg import OperationalError
from psycopg.abc import Query
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from fontcatalog.observability.logger import get_logger

logger = get_logger(__name__)

ENV_DEFAULTS = {
    "DB_HOST": "localhost",
    "DB_PORT": "5432",
    "DB_NAME": "fontcatalog",
    "DB_USER": "fontcatalog",
}


class DatabaseConnectionPool:
    """
    Small connection pool for the sequential enrichment run.

    Arguments left as None fall back to ``DB_HOST``, ``DB_PORT``,
    ``DB_NAME``, ``DB_USER`` and ``DB_PASSWORD``. There is no default
    password.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        database: str | None = None,
        user: str | None = None,
        password: str | None = None,
        min_size: int = 1,
        max_size: int = 4,
        timeout: float = 30.0,
    ) -> None:
        self.host = host or os.getenv("DB_HOST", ENV_DEFAULTS["DB_HOST"])
        self.port = port or int(os.getenv("DB_PORT", ENV_DEFAULTS["DB_PORT"]))
        self.database = database or os.getenv("DB_NAME", ENV_DEFAULTS["DB_NAME"])
        self.user = user or os.getenv("DB_USER", ENV_DEFAULTS["DB_USER"])
        self.password = password or os.getenv("DB_PASSWORD")

        if not self.password:
            raise ValueError("No warehouse password: pass --db-password or set DB_PASSWORD")

        self.min_size = min_size
        self.max_size = max_size
        self.timeout = timeout
        self._pool: ConnectionPool | None = None

    @property
    def conninfo(self) -> str:
        return (
            f"host={self.host} port={self.port} dbname={self.database} "
            f"user={self.user} password={self.password} "
            f"connect_timeout={int(self.timeout)}"
        )

    def open(self, max_retries: int = 3, retry_delay: float = 2.0) -> None:
        """
        Open the pool, retrying while the server is unreachable.

        Args:
            max_retries: Connection attempts before giving up
            retry_delay: Seconds between attempts

        Raises:
            OperationalError: If every attempt fails
        """
        if self._pool is not None:
            return

        for attempt in range(1, max_retries + 1):
            pool = ConnectionPool(
                conninfo=self.conninfo,
                min_size=self.min_size,
                max_size=self.max_size,
                timeout=self.timeout,
                kwargs={"row_factory": dict_row},
                open=False,
            )
            try:
                pool.open(wait=True, timeout=self.timeout)
            except OperationalError as e:
                pool.close()
                if attempt == max_retries:
                    raise OperationalError(
                        f"Warehouse at {self.host}:{self.port}/{self.database} unreachable "
                        f"after {max_retries} attempts: {e}"
                    ) from e
                logger.warning(f"Warehouse connection attempt {attempt}/{max_retries} failed: {e}")
                time.sleep(retry_delay)
            else:
                self._pool = pool
                logger.info(f"Connected to warehouse {self.host}:{self.port}/{self.database}")
                return

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    @contextmanager
    def get_connection(self):
        """Borrow a connection; raises RuntimeError before ``open()``."""
        if self._pool is None:
            raise RuntimeError("Connection pool is not open. Call open() first.")

        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def get_cursor(self):
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                yield cur

    def execute_query(self, query: Query, params: tuple | None = None) -> list[dict]:
        """Run a SELECT and return every row as a dict."""
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()

    def execute_command(self, command: Query, params: tuple | None = None) -> int:
        """Run a write or DDL statement in its own transaction; returns the row count."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(command, params)
                rowcount = cur.rowcount
            conn.commit()
            return rowcount

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
