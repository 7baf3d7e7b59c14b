"""Shared fixtures: a small catalog and a connection pool over a mocked driver."""

from unittest.mock import MagicMock, patch

import pytest

from db.connection import ConnectionPool
from models.catalog import SchemaCatalog, TableDescriptor
from models.column import ColumnMeta, classify_type


def make_column(name, raw_type, nullable=False, key="", has_default=False):
    return ColumnMeta(
        name=name,
        declared_type=classify_type(raw_type),
        raw_type=raw_type,
        nullable=nullable,
        key=key,
        has_default=has_default,
    )


@pytest.fixture(name="make_column")
def make_column_fixture():
    return make_column


@pytest.fixture
def users_table():
    """users(id PK auto, name varchar NOT NULL, age int NOT NULL DEFAULT 0, bio text NULL)"""
    return TableDescriptor(
        name="users",
        columns=(
            make_column("id", "int4", key="PRI", has_default=True),
            make_column("name", "varchar"),
            make_column("age", "int4", has_default=True),
            make_column("bio", "text", nullable=True),
        ),
    )


@pytest.fixture
def accounts_table():
    """Required columns with no defaults, one per normalized type."""
    return TableDescriptor(
        name="accounts",
        columns=(
            make_column("id", "int8", key="PRI", has_default=True),
            make_column("login", "varchar"),
            make_column("balance", "int4"),
            make_column("opened_at", "timestamptz"),
            make_column("note", "text", nullable=True),
        ),
    )


@pytest.fixture
def notes_table():
    return TableDescriptor(
        name="notes",
        columns=(
            make_column("id", "int4", key="PRI", has_default=True),
            make_column("body", "text", nullable=True),
        ),
    )


@pytest.fixture
def logs_table():
    """A table without a primary key."""
    return TableDescriptor(
        name="logs",
        columns=(make_column("message", "text"),),
    )


@pytest.fixture
def catalog(users_table, accounts_table, notes_table, logs_table):
    return SchemaCatalog([users_table, accounts_table, notes_table, logs_table])


@pytest.fixture
def cursor():
    cur = MagicMock()
    cur.description = []
    cur.fetchall.return_value = []
    cur.rowcount = 0
    return cur


@pytest.fixture
def connection(cursor):
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    return conn


@pytest.fixture
def db_pool(connection):
    """A real ConnectionPool over a patched psycopg2 pool that hands out `connection`."""
    with patch("db.connection.pool.ThreadedConnectionPool") as pool_cls:
        pool_cls.return_value.getconn.return_value = connection
        db_pool = ConnectionPool("postgresql://test")
        db_pool.open()
        yield db_pool
