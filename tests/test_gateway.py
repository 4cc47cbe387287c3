"""
Tests for the query gateway: placeholder rewriting, parameter binding and
the per-connection statement cache.
"""

import pytest

from worklog.db.database import Database
from worklog.db.errors import QueryParameterError
from worklog.db.gateway import (
    STATEMENT_CACHE_KEY,
    StatementCache,
    normalize_params,
    rewrite_placeholders,
)


@pytest.fixture(name="scratch")
def scratch_fixture(database: Database) -> Database:
    database.execute("CREATE TABLE scratch (id INTEGER PRIMARY KEY, label TEXT, amount INTEGER)")
    return database


def test_rewrite_placeholders_numbers_markers_left_to_right() -> None:
    sql, count = rewrite_placeholders("SELECT * FROM t WHERE a = ? AND b = ?")
    assert sql == "SELECT * FROM t WHERE a = :p1 AND b = :p2"
    assert count == 2


def test_rewrite_placeholders_skips_quoted_markers() -> None:
    sql, count = rewrite_placeholders("SELECT '?' AS q, \"?\" FROM t WHERE a = ?")
    assert sql == "SELECT '?' AS q, \"?\" FROM t WHERE a = :p1"
    assert count == 1


def test_rewrite_placeholders_escapes_colons_in_literals() -> None:
    sql, count = rewrite_placeholders("SELECT '10:30' AS t")
    assert sql == "SELECT '10\\:30' AS t"
    assert count == 0


def test_normalize_params_binds_empty_strings_as_null() -> None:
    assert normalize_params(["", None, 0, "x"]) == [None, None, 0, "x"]
    assert normalize_params(None) == []


def test_normalize_params_rejects_non_sequences() -> None:
    with pytest.raises(TypeError):
        normalize_params("abc")
    with pytest.raises(TypeError):
        normalize_params({"a": 1})


def test_statement_cache_names_statements_once() -> None:
    cache = StatementCache()
    first = cache.prepare("SELECT 1")
    again = cache.prepare("SELECT 1")
    second = cache.prepare("SELECT 2")

    assert first is again
    assert first.name == "q1"
    assert second.name == "q2"
    assert "SELECT 1" in cache
    assert len(cache) == 2


def test_query_returns_rows_as_dicts(scratch: Database) -> None:
    scratch.execute("INSERT INTO scratch (label, amount) VALUES (?, ?)", ["a", 1])
    scratch.execute("INSERT INTO scratch (label, amount) VALUES (?, ?)", ["b", 2])

    rows = scratch.query("SELECT label, amount FROM scratch ORDER BY id")
    assert rows == [{"label": "a", "amount": 1}, {"label": "b", "amount": 2}]


def test_query_row_and_value_on_empty_result(scratch: Database) -> None:
    assert scratch.query_row("SELECT * FROM scratch WHERE id = ?", [42]) is None
    assert scratch.query_value("SELECT amount FROM scratch WHERE id = ?", [42]) is None
    assert scratch.query_vector("SELECT amount FROM scratch") == []


def test_query_value_and_vector(scratch: Database) -> None:
    for label, amount in [("a", 3), ("b", 5)]:
        scratch.insert("scratch", {"label": label, "amount": amount})

    assert scratch.query_value("SELECT SUM(amount) FROM scratch") == 8
    assert scratch.query_vector("SELECT label FROM scratch ORDER BY id") == ["a", "b"]


def test_parameter_count_mismatch_is_rejected(scratch: Database) -> None:
    with pytest.raises(QueryParameterError):
        scratch.query("SELECT * FROM scratch WHERE id = ?", [])
    with pytest.raises(QueryParameterError):
        scratch.query("SELECT * FROM scratch", [1])


def test_empty_string_is_stored_as_null(scratch: Database) -> None:
    row_id = scratch.insert("scratch", {"label": "", "amount": 1}, return_id=True)
    assert scratch.query_value("SELECT label IS NULL FROM scratch WHERE id = ?", [row_id]) == 1


def test_literal_containing_marker_and_colon(scratch: Database) -> None:
    assert scratch.query_value("SELECT 'what? at 10:30' WHERE 1 = ?", [1]) == "what? at 10:30"


def test_insert_returns_generated_id(scratch: Database) -> None:
    first = scratch.insert("scratch", {"label": "a", "amount": 1}, return_id=True)
    second = scratch.insert("scratch", {"label": "b", "amount": 2}, return_id=True)
    assert second == first + 1
    assert scratch.insert("scratch", {"label": "c", "amount": 3}) is None


def test_update_and_delete_by_id(scratch: Database) -> None:
    row_id = scratch.insert("scratch", {"label": "a", "amount": 1}, return_id=True)

    scratch.update("scratch", row_id, {"label": "z", "amount": 9})
    assert scratch.query_row("SELECT label, amount FROM scratch WHERE id = ?", [row_id]) == {
        "label": "z",
        "amount": 9,
    }

    scratch.update("scratch", row_id, {})
    assert scratch.query_value("SELECT label FROM scratch WHERE id = ?", [row_id]) == "z"

    scratch.delete("scratch", row_id)
    assert scratch.query_value("SELECT COUNT(*) FROM scratch") == 0


def test_identifiers_are_checked(scratch: Database) -> None:
    with pytest.raises(ValueError):
        scratch.insert("scratch; DROP TABLE users", {"label": "a"})
    with pytest.raises(ValueError):
        scratch.update("scratch", 1, {"label = 1 --": "a"})


def test_statement_cache_is_kept_per_connection(scratch: Database) -> None:
    sql = "SELECT amount FROM scratch WHERE id = ?"
    scratch.query(sql, [1])
    scratch.query(sql, [2])

    with scratch.engine.connect() as connection:
        cache = connection.info[STATEMENT_CACHE_KEY]
        assert "SELECT amount FROM scratch WHERE id = :p1" in cache
        size = len(cache)

    scratch.query(sql, [3])
    with scratch.engine.connect() as connection:
        assert len(connection.info[STATEMENT_CACHE_KEY]) == size
