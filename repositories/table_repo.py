"""
repositories/table_repo.py
--------------------------
Executes synthesized statements against any discovered table and
decodes the result rows through the ValueCodec.
"""

import psycopg2

from db.connection import ConnectionPool
from models.catalog import TableDescriptor
from services.query_builder import Statement
from services.value_codec import ValueCodec
from utils.errors import StatementExecutionError
from utils.logger import get_logger

logger = get_logger(__name__)


class TableRepository:
    """Generic data access for catalog tables. One statement per call."""

    def __init__(self, db_pool: ConnectionPool, codec: ValueCodec | None = None):
        self.db_pool = db_pool
        self.codec = codec or ValueCodec()

    # ── READ ──────────────────────────────────────────────

    def fetch_rows(self, statement: Statement, table: TableDescriptor) -> list[dict]:
        """
        Run a SELECT and decode every row.

        Returns:
            List of generic rows (column name -> JSON value).
        """
        logger.debug(f"query: {statement}")
        try:
            with self.db_pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(statement.sql, self.codec.encode_many(statement.params))
                    names = [d[0] for d in cur.description]
                    return [self.codec.decode_row(names, r, table) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to query table '{table.name}': {e}")
            raise StatementExecutionError(f"query on {table.name} failed") from e

    def fetch_first(self, statement: Statement, table: TableDescriptor) -> dict:
        """
        Run a SELECT and decode the first row.

        Returns:
            The row, or an empty dict when nothing matched.
        """
        rows = self.fetch_rows(statement, table)
        return rows[0] if rows else {}

    # ── WRITE ─────────────────────────────────────────────

    def execute(self, statement: Statement, table: TableDescriptor) -> int:
        """
        Run an INSERT / UPDATE / DELETE.

        Returns:
            Number of rows affected.
        """
        logger.debug(f"exec: {statement}")
        try:
            with self.db_pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(statement.sql, self.codec.encode_many(statement.params))
                    affected = cur.rowcount
            logger.info(f"{statement.sql.split()[0]} on '{table.name}' affected {affected} row(s)")
            return affected
        except psycopg2.Error as e:
            logger.error(f"Failed to write to table '{table.name}': {e}")
            raise StatementExecutionError(f"write to {table.name} failed") from e
