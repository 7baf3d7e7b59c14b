"""
main.py
-------
Entry point for the DB Explorer service.

Responsibilities:
    - Open the database connection pool.
    - Discover the schema and build the catalog (fatal on failure).
    - Build the FastAPI application and serve it with uvicorn.
"""

import sys

import uvicorn
from fastapi import FastAPI

from config import (
    API_HOST,
    API_PORT,
    DATABASE_URL,
    DB_POOL_MAX,
    DB_POOL_MIN,
    DB_SCHEMA,
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
)
from db.connection import ConnectionPool
from db.introspection import build_catalog
from handlers.errors import register_error_handlers
from handlers.routes import router
from repositories.table_repo import TableRepository
from services.table_service import TableService
from utils.errors import IntrospectionError
from utils.logger import get_logger

logger = get_logger(__name__)


def create_app(table_service: TableService) -> FastAPI:
    """
    Build the HTTP application around an already-constructed service.

    The service (and the catalog inside it) is stored on ``app.state``
    and injected into routes; nothing is held in module globals.
    """
    app = FastAPI(
        title="DB Explorer",
        description="Generic REST interface over a discovered relational schema",
        version="1.0.0",
    )
    app.state.table_service = table_service
    app.include_router(router)
    register_error_handlers(app)
    return app


def main() -> None:
    """Initialize and run the service."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    db_pool = ConnectionPool(DATABASE_URL, DB_POOL_MIN, DB_POOL_MAX)
    db_pool.open()

    # ── 2. Schema discovery ───────────────────────────────
    try:
        catalog = build_catalog(db_pool, DB_SCHEMA)
    except IntrospectionError as e:
        logger.error(f"Cannot start without a schema catalog: {e}")
        db_pool.close()
        sys.exit(1)

    # ── 3. Build the application ──────────────────────────
    service = TableService(
        catalog,
        TableRepository(db_pool),
        default_limit=DEFAULT_LIMIT,
        default_offset=DEFAULT_OFFSET,
    )
    app = create_app(service)

    # ── 4. Serve ──────────────────────────────────────────
    logger.info(f"🚀 DB Explorer listening on {API_HOST}:{API_PORT}")
    try:
        uvicorn.run(app, host=API_HOST, port=API_PORT)
    finally:
        # ── 5. Cleanup on shutdown ────────────────────────
        db_pool.close()
        logger.info("DB Explorer stopped.")


if __name__ == "__main__":
    main()
