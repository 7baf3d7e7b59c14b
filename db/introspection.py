"""
db/introspection.py
-------------------
Builds the SchemaCatalog by querying information_schema once at startup.
Any failure aborts the whole build: the service never starts with a
partial catalog.
"""

import psycopg2

from db.connection import ConnectionPool
from models.catalog import SchemaCatalog, TableDescriptor
from models.column import PRIMARY_KEY_ROLE, ColumnMeta, classify_type
from utils.errors import IntrospectionError
from utils.logger import get_logger

logger = get_logger(__name__)

TABLES_SQL = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = %s AND table_type = 'BASE TABLE'
    ORDER BY table_name;
"""

# One row per column, in declaration order:
# (name, type, collation, nullable, key, has_default, extra, comment)
COLUMNS_SQL = f"""
    SELECT
        c.column_name,
        c.udt_name,
        c.collation_name,
        c.is_nullable,
        CASE WHEN pk.column_name IS NOT NULL THEN '{PRIMARY_KEY_ROLE}' ELSE '' END,
        (c.column_default IS NOT NULL
            OR c.is_identity = 'YES'
            OR c.is_generated = 'ALWAYS'),
        CASE
            WHEN c.is_identity = 'YES' THEN 'identity'
            WHEN c.is_generated = 'ALWAYS' THEN 'generated'
            ELSE ''
        END,
        COALESCE(col_description(
            format('%%I.%%I', c.table_schema, c.table_name)::regclass,
            c.ordinal_position::int
        ), '')
    FROM information_schema.columns c
    LEFT JOIN (
        SELECT kcu.column_name
        FROM information_schema.table_constraints tc
        JOIN information_schema.key_column_usage kcu
          ON tc.constraint_name = kcu.constraint_name
         AND tc.table_schema = kcu.table_schema
         AND tc.table_name = kcu.table_name
        WHERE tc.constraint_type = 'PRIMARY KEY'
          AND tc.table_schema = %s
          AND tc.table_name = %s
    ) pk ON pk.column_name = c.column_name
    WHERE c.table_schema = %s AND c.table_name = %s
    ORDER BY c.ordinal_position;
"""


def build_catalog(db_pool: ConnectionPool, schema: str = "public") -> SchemaCatalog:
    """
    Discover every base table in `schema` and its columns.

    Args:
        db_pool: An opened ConnectionPool.
        schema: The PostgreSQL schema to expose.

    Returns:
        A populated, read-only SchemaCatalog.

    Raises:
        IntrospectionError: If any introspection query fails.
    """
    logger.info(f"Introspecting schema '{schema}'...")
    try:
        with db_pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(TABLES_SQL, (schema,))
                table_names = [row[0] for row in cur.fetchall()]

                tables = []
                for name in table_names:
                    cur.execute(COLUMNS_SQL, (schema, name, schema, name))
                    columns = tuple(_row_to_column(r) for r in cur.fetchall())
                    tables.append(TableDescriptor(name=name, columns=columns))
                    _log_table(tables[-1])
    except psycopg2.Error as e:
        logger.error(f"Schema introspection failed: {e}")
        raise IntrospectionError(f"schema introspection failed: {e}") from e

    catalog = SchemaCatalog(tables)
    logger.info(f"Catalog ready with {len(catalog)} table(s): {catalog.table_names()}")
    return catalog


def _row_to_column(row: tuple) -> ColumnMeta:
    """Convert an information_schema row tuple to a ColumnMeta."""
    name, raw_type, collation, is_nullable, key, has_default, extra, comment = row
    return ColumnMeta(
        name=name,
        declared_type=classify_type(raw_type),
        raw_type=raw_type,
        nullable=(is_nullable == "YES"),
        key=key or "",
        has_default=bool(has_default),
        collation=collation,
        extra=extra or "",
        comment=comment or "",
    )


def _log_table(table: TableDescriptor) -> None:
    pk = table.primary_key
    if pk is None:
        logger.warning(f"Table '{table.name}' has no primary key; row operations are disabled for it.")
    logger.info(f"Discovered table '{table.name}' ({len(table.columns)} columns)")
    for column in table.columns:
        logger.debug(f"  {table.name}.{column}")
