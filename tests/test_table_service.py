from unittest.mock import MagicMock

import psycopg2
import pytest

from repositories.table_repo import TableRepository
from services.query_builder import build_delete, build_select_by_id, build_select_page
from services.table_service import TableService, decode_payload, parse_paging
from utils.errors import (
    BadRequestError,
    PayloadDecodeError,
    StatementExecutionError,
    TableNotFoundError,
    ValueDecodeError,
)


@pytest.fixture
def repo():
    fake = MagicMock(spec=TableRepository)
    fake.fetch_rows.return_value = []
    fake.fetch_first.return_value = {}
    fake.execute.return_value = 1
    return fake


@pytest.fixture
def service(catalog, repo):
    return TableService(catalog, repo)


# ── parsing helpers ───────────────────────────────────────

def test_parse_paging_defaults():
    assert parse_paging(None, None) == (5, 0)
    assert parse_paging("", "") == (5, 0)
    assert parse_paging(None, None, default_limit=20, default_offset=3) == (20, 3)


def test_parse_paging_values():
    assert parse_paging("10", "30") == (10, 30)


@pytest.mark.parametrize("limit, offset", [("abc", None), (None, "1.5"), ("-1", None), (None, "-4")])
def test_parse_paging_rejects(limit, offset):
    with pytest.raises(BadRequestError):
        parse_paging(limit, offset)


def test_decode_payload():
    assert decode_payload(b'{"name": "Bob"}') == {"name": "Bob"}


@pytest.mark.parametrize("body", [b"", b"{bad", b"[1, 2]", b'"text"', b"\xff\xfe"])
def test_decode_payload_rejects(body):
    with pytest.raises(PayloadDecodeError):
        decode_payload(body)


# ── service operations ────────────────────────────────────

def test_list_tables(service):
    assert service.list_tables() == {"tables": ["accounts", "logs", "notes", "users"]}


def test_list_rows_uses_default_page(service, repo):
    service.list_rows("users")
    statement, table = repo.fetch_rows.call_args.args
    assert statement.params == [5, 0]
    assert table.name == "users"


def test_create_row_reconciles_before_insert(service, repo):
    service.create_row("accounts", b'{"id": 5, "login": "ann", "junk": 1}')
    statement = repo.execute.call_args.args[0]
    assert statement.sql == 'INSERT INTO "accounts" ("login", "balance") VALUES (%s, %s)'
    assert statement.params == ["ann", 0]


def test_update_row(service, repo):
    service.update_row("notes", "3", b'{"body": null}')
    statement = repo.execute.call_args.args[0]
    assert statement.sql == 'UPDATE "notes" SET "body" = %s WHERE "id" = %s'
    assert statement.params == [None, "3"]


def test_delete_row_reports_count(service, repo):
    repo.execute.return_value = 0
    assert service.delete_row("users", "42") == {"deleted": 0}


def test_get_row_missing_is_empty(service):
    assert service.get_row("users", "1") == {}


def test_unknown_table_checked_before_body(service, repo):
    with pytest.raises(TableNotFoundError):
        service.create_row("ghosts", b"{bad")
    repo.execute.assert_not_called()


@pytest.mark.parametrize(
    "call",
    [
        lambda s: s.list_rows("ghosts"),
        lambda s: s.get_row("ghosts", "1"),
        lambda s: s.update_row("ghosts", "1", b"{}"),
        lambda s: s.delete_row("ghosts", "1"),
    ],
)
def test_unknown_table(service, call):
    with pytest.raises(TableNotFoundError):
        call(service)


# ── repository ────────────────────────────────────────────

def test_repository_decodes_rows(db_pool, cursor, users_table):
    cursor.description = [("id",), ("name",), ("age",), ("bio",)]
    cursor.fetchall.return_value = [(1, "Ann", 30, None), (2, "Bob", 0, "hi")]

    rows = TableRepository(db_pool).fetch_rows(build_select_page(users_table, 5, 0), users_table)

    assert rows == [
        {"id": 1, "name": "Ann", "age": 30, "bio": None},
        {"id": 2, "name": "Bob", "age": 0, "bio": "hi"},
    ]
    cursor.execute.assert_called_once_with('SELECT * FROM "users" LIMIT %s OFFSET %s', [5, 0])


def test_repository_fetch_first(db_pool, cursor, users_table):
    cursor.description = [("id",), ("name",)]
    cursor.fetchall.return_value = [(1, "Ann")]
    repo = TableRepository(db_pool)
    assert repo.fetch_first(build_select_by_id(users_table, "1"), users_table) == {"id": 1, "name": "Ann"}


def test_repository_wraps_driver_errors(db_pool, cursor, users_table):
    cursor.execute.side_effect = psycopg2.IntegrityError("violates")
    with pytest.raises(StatementExecutionError):
        TableRepository(db_pool).execute(build_delete(users_table, "1"), users_table)


def test_repository_decode_error_propagates(db_pool, cursor, users_table):
    cursor.description = [("name",)]
    cursor.fetchall.return_value = [(None,)]
    with pytest.raises(ValueDecodeError):
        TableRepository(db_pool).fetch_rows(build_select_page(users_table, 5, 0), users_table)


def test_repository_execute_returns_rowcount(db_pool, cursor, users_table):
    cursor.rowcount = 3
    assert TableRepository(db_pool).execute(build_delete(users_table, "1"), users_table) == 3
