"""Tests for prepared statements and parameter marker rendering."""

from polybench.statement import Placeholders, PreparedStatement

import pytest

from tests.mocks import MockDriver


@pytest.mark.parametrize(
    "sql, symbol, expected",
    [
        ("INSERT INTO T VALUES(?, ?)", "?", "INSERT INTO T VALUES(?, ?)"),
        ("INSERT INTO T VALUES(?, ?)", "%s", "INSERT INTO T VALUES(%s, %s)"),
        ("SELECT * FROM T WHERE A=? AND B = ?", "%s", "SELECT * FROM T WHERE A=%s AND B = %s"),
        ("SELECT '?' FROM T WHERE A = ?", "%s", "SELECT '?' FROM T WHERE A = %s"),
        ("SELECT 'it''s ?', \"odd?\" FROM T WHERE A = ?", "%s", "SELECT 'it''s ?', \"odd?\" FROM T WHERE A = %s"),
        ("SELECT 1", "%s", "SELECT 1"),
        ("SELECT 'open ? FROM T", "%s", "SELECT 'open ? FROM T"),
    ],
)
def test_placeholders(sql: str, symbol: str, expected: str):
    """Tests unquoted markers are replaced and everything else is kept as is."""
    assert expected == Placeholders.render(sql, symbol)


def test_prepared_statement_executes_bound_params():
    """Tests parameters are passed along and each execution gets a fresh cursor."""
    cnx = MockDriver().connect()
    prep = PreparedStatement(cnx, "INSERT INTO T VALUES(?)")
    assert 1 == prep.bind(1).execute_update()
    assert prep is prep.bind(2)
    assert (2,) == prep.params
    prep.execute_update()
    assert [("INSERT INTO T VALUES(?)", (1,)), ("INSERT INTO T VALUES(?)", (2,))] == cnx.executed
    assert cnx.cursors[0].closed
    assert not cnx.cursors[1].closed
    prep.close()
    assert cnx.cursors[1].closed


def test_prepared_query_without_params():
    """Tests a query without parameters and the result set wrapping its cursor."""
    cnx = MockDriver().connect()
    cnx.results = [(1, "a"), (2, "b")]
    cnx.description = (("ID", 4, None, None, None, None, None), ("NAME", 12, None, None, None, None, None))
    results = PreparedStatement(cnx, "SELECT ID, NAME FROM T").execute_query()
    assert [("SELECT ID, NAME FROM T", None)] == cnx.executed
    assert ["ID", "NAME"] == [c.name for c in results.description]
    assert 2 == results.column_count
    assert [(1, "a"), (2, "b")] == list(results)
    assert results.fetchone() is None
