"""
services/query_builder.py
-------------------------
Builds parameterized SELECT / INSERT / UPDATE / DELETE statements.

Only identifiers taken from the catalog are written into the SQL text,
always double-quoted. Client values are always bound as parameters
(psycopg2 paramstyle: %s).
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from models.catalog import TableDescriptor
from models.column import ColumnMeta
from utils.errors import BadRequestError, MissingPrimaryKeyError

PLACEHOLDER = "%s"


@dataclass(frozen=True)
class Statement:
    """A SQL string and its positional parameters."""
    sql: str
    params: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.sql} -- {self.params}"


def quote_identifier(name: str) -> str:
    """Quote a PostgreSQL identifier, doubling any embedded quote."""
    return '"' + name.replace('"', '""') + '"'


def _require_primary_key(table: TableDescriptor) -> ColumnMeta:
    pk = table.primary_key
    if pk is None or not pk.name:
        raise MissingPrimaryKeyError(table.name)
    return pk


def _where_id(table: TableDescriptor) -> str:
    pk = _require_primary_key(table)
    return f" WHERE {quote_identifier(pk.name)} = {PLACEHOLDER}"


# ── READ ──────────────────────────────────────────────────

def build_select_page(table: TableDescriptor, limit: int, offset: int) -> Statement:
    sql = f"SELECT * FROM {quote_identifier(table.name)} LIMIT {PLACEHOLDER} OFFSET {PLACEHOLDER}"
    return Statement(sql, [limit, offset])


def build_select_by_id(table: TableDescriptor, row_id: str) -> Statement:
    """The id is bound in its path string form; the database casts it."""
    sql = f"SELECT * FROM {quote_identifier(table.name)}" + _where_id(table)
    return Statement(sql, [row_id])


# ── CREATE ────────────────────────────────────────────────

def build_insert(table: TableDescriptor, values: Mapping[str, Any]) -> Statement:
    """
    INSERT over exactly the keys of `values`, in mapping order.
    An empty mapping inserts a row made only of column defaults.
    """
    target = quote_identifier(table.name)
    if not values:
        return Statement(f"INSERT INTO {target} DEFAULT VALUES")

    columns = ", ".join(quote_identifier(name) for name in values)
    placeholders = ", ".join(PLACEHOLDER for _ in values)
    sql = f"INSERT INTO {target} ({columns}) VALUES ({placeholders})"
    return Statement(sql, list(values.values()))


# ── UPDATE ────────────────────────────────────────────────

def build_update(table: TableDescriptor, row_id: str, values: Mapping[str, Any]) -> Statement:
    """
    UPDATE the row with primary key `row_id`; the id is bound last.

    Raises:
        MissingPrimaryKeyError: The table has no primary key.
        BadRequestError: `values` is empty, so there is nothing to set.
    """
    where = _where_id(table)
    if not values:
        raise BadRequestError(f"no updatable fields for table {table.name}")

    assignments = ", ".join(f"{quote_identifier(name)} = {PLACEHOLDER}" for name in values)
    sql = f"UPDATE {quote_identifier(table.name)} SET {assignments}" + where
    return Statement(sql, [*values.values(), row_id])


# ── DELETE ────────────────────────────────────────────────

def build_delete(table: TableDescriptor, row_id: str) -> Statement:
    sql = f"DELETE FROM {quote_identifier(table.name)}" + _where_id(table)
    return Statement(sql, [row_id])
