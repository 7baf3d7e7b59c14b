"""
services/table_service.py
-------------------------
One operation per HTTP verb. Each one composes:
    catalog lookup -> reconcile / build statement -> execute -> decode.
"""

import json
from typing import Any, Optional

from models.catalog import SchemaCatalog
from repositories.table_repo import TableRepository
from services import query_builder
from services.reconciler import ReconcileMode, reconcile
from utils.errors import BadRequestError, PayloadDecodeError
from utils.logger import get_logger

logger = get_logger(__name__)


def parse_paging(
    limit: Optional[str], offset: Optional[str], default_limit: int = 5, default_offset: int = 0
) -> tuple[int, int]:
    """
    Parse the `limit` / `offset` query parameters.

    Missing or empty values fall back to the defaults.

    Raises:
        BadRequestError: A value is not a non-negative integer.
    """
    parsed = []
    for name, raw, default in (("limit", limit, default_limit), ("offset", offset, default_offset)):
        if raw is None or raw == "":
            parsed.append(default)
            continue
        try:
            value = int(raw)
        except ValueError:
            raise BadRequestError(f"{name} must be an integer, got {raw!r}")
        if value < 0:
            raise BadRequestError(f"{name} must not be negative, got {value}")
        parsed.append(value)
    return parsed[0], parsed[1]


def decode_payload(body: bytes) -> dict[str, Any]:
    """
    Decode a request body into a JSON object.

    Raises:
        PayloadDecodeError: The body is not valid JSON or not an object.
    """
    try:
        payload = json.loads(body or b"null")
    except (ValueError, UnicodeDecodeError) as e:
        raise PayloadDecodeError(f"invalid JSON body: {e}") from e
    if not isinstance(payload, dict):
        raise PayloadDecodeError("request body must be a JSON object")
    return payload


class TableService:
    """Generic CRUD over every table in the catalog."""

    def __init__(
        self,
        catalog: SchemaCatalog,
        repo: TableRepository,
        default_limit: int = 5,
        default_offset: int = 0,
    ):
        self.catalog = catalog
        self.repo = repo
        self.default_limit = default_limit
        self.default_offset = default_offset

    def list_tables(self) -> dict:
        return {"tables": self.catalog.table_names()}

    def list_rows(self, table_name: str, limit: Optional[str] = None, offset: Optional[str] = None) -> list[dict]:
        table = self.catalog.require(table_name)
        page_limit, page_offset = parse_paging(limit, offset, self.default_limit, self.default_offset)
        statement = query_builder.build_select_page(table, page_limit, page_offset)
        return self.repo.fetch_rows(statement, table)

    def get_row(self, table_name: str, row_id: str) -> dict:
        """
        Fetch one row by primary key.

        A missing row is not an error: the result is an empty dict.
        """
        table = self.catalog.require(table_name)
        statement = query_builder.build_select_by_id(table, row_id)
        return self.repo.fetch_first(statement, table)

    def create_row(self, table_name: str, body: bytes) -> None:
        table = self.catalog.require(table_name)
        values = reconcile(decode_payload(body), table.columns, ReconcileMode.CREATE)
        self.repo.execute(query_builder.build_insert(table, values), table)

    def update_row(self, table_name: str, row_id: str, body: bytes) -> None:
        table = self.catalog.require(table_name)
        values = reconcile(decode_payload(body), table.columns, ReconcileMode.UPDATE)
        self.repo.execute(query_builder.build_update(table, row_id, values), table)

    def delete_row(self, table_name: str, row_id: str) -> dict:
        table = self.catalog.require(table_name)
        deleted = self.repo.execute(query_builder.build_delete(table, row_id), table)
        return {"deleted": deleted}
