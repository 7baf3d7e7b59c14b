"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool, since request handlers run
concurrently in worker threads and share one pool. Acquisition blocks
while all `max_conn` connections are checked out.
"""

import threading
from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2 import pool

from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionPool:
    """
    Owns a psycopg2 ThreadedConnectionPool.

    One instance is created at startup and handed to every component
    that executes SQL; nothing reaches for a module-level pool.
    """

    def __init__(self, dsn: str, min_conn: int = 1, max_conn: int = 10):
        self.dsn = dsn
        self.min_conn = min_conn
        self.max_conn = max_conn
        self._pool: pool.ThreadedConnectionPool | None = None
        # psycopg2 raises PoolError when exhausted instead of waiting.
        self._slots = threading.BoundedSemaphore(max_conn)

    def open(self) -> None:
        """
        Initialize the underlying pool.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        if self._pool is not None:
            return
        try:
            self._pool = pool.ThreadedConnectionPool(self.min_conn, self.max_conn, self.dsn)
            logger.info("Database connection pool initialized successfully.")
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    def get_connection(self):
        """
        Get a connection from the pool, waiting for a free slot if needed.

        Every successful call must be paired with release_connection().

        Raises:
            RuntimeError: If the pool has not been opened.
        """
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call open() first.")
        self._slots.acquire()
        try:
            return self._pool.getconn()
        except Exception:
            self._slots.release()
            raise

    def release_connection(self, conn) -> None:
        """Return a connection back to the pool and free its slot."""
        try:
            if self._pool is not None:
                self._pool.putconn(conn)
        finally:
            self._slots.release()

    @contextmanager
    def connection(self) -> Iterator:
        """
        Scoped acquisition of a pooled connection.

        Commits when the block exits normally, rolls back when it raises,
        and returns the connection to the pool on every exit path.

        Usage:
            with db_pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(...)
        """
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self.release_connection(conn)

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")
