import pytest

from services.query_builder import (
    build_delete,
    build_insert,
    build_select_by_id,
    build_select_page,
    build_update,
    quote_identifier,
)
from utils.errors import BadRequestError, MissingPrimaryKeyError


def test_quote_identifier():
    assert quote_identifier("users") == '"users"'
    assert quote_identifier('we"ird') == '"we""ird"'


def test_select_page(users_table):
    stmt = build_select_page(users_table, 5, 0)
    assert stmt.sql == 'SELECT * FROM "users" LIMIT %s OFFSET %s'
    assert stmt.params == [5, 0]


def test_select_by_id_keeps_string_id(users_table):
    stmt = build_select_by_id(users_table, "42")
    assert stmt.sql == 'SELECT * FROM "users" WHERE "id" = %s'
    assert stmt.params == ["42"]


def test_insert_columns_and_placeholders_align(users_table):
    stmt = build_insert(users_table, {"name": "Bob", "age": 3})
    assert stmt.sql == 'INSERT INTO "users" ("name", "age") VALUES (%s, %s)'
    assert stmt.params == ["Bob", 3]


def test_insert_empty_uses_defaults(notes_table):
    stmt = build_insert(notes_table, {})
    assert stmt.sql == 'INSERT INTO "notes" DEFAULT VALUES'
    assert stmt.params == []


def test_update_binds_id_last(users_table):
    stmt = build_update(users_table, "7", {"name": "Al", "age": 30})
    assert stmt.sql == 'UPDATE "users" SET "name" = %s, "age" = %s WHERE "id" = %s'
    assert stmt.params == ["Al", 30, "7"]


def test_update_without_fields(notes_table):
    with pytest.raises(BadRequestError):
        build_update(notes_table, "1", {})


def test_delete(users_table):
    stmt = build_delete(users_table, "42")
    assert stmt.sql == 'DELETE FROM "users" WHERE "id" = %s'
    assert stmt.params == ["42"]


@pytest.mark.parametrize(
    "build",
    [
        lambda t: build_select_by_id(t, "1"),
        lambda t: build_update(t, "1", {"message": "x"}),
        lambda t: build_delete(t, "1"),
    ],
)
def test_row_operations_need_primary_key(logs_table, build):
    with pytest.raises(MissingPrimaryKeyError):
        build(logs_table)


def test_key_less_table_still_lists_and_inserts(logs_table):
    assert build_select_page(logs_table, 1, 0).sql.startswith('SELECT * FROM "logs"')
    assert build_insert(logs_table, {"message": "x"}).params == ["x"]
