"""Tests loading properties files and the targets they configure."""

import logging

from polybench.config import load_properties, load_targets

PROPERTIES = """
# Targets
db1 = SQLite memory, sqlite3, sqlite3://:memory:, sa
db2=Broken, no_such_driver, postgresql://localhost/bench, sa
db3=PostgreSQL, sqlite3, postgresql://localhost:5432/bench, bench, secret
db5=Skipped, sqlite3, sqlite3://:memory:, sa

sqlite3.DROP_TABLE=DROP TABLE IF EXISTS
postgresql.DATETIME=TIMESTAMP
sqlite3.Mixed_Case=Kept
sqlite3.URL=a=b%c
"""


def test_load_properties(tmpdir):
    """Tests keys keep their case and order, comments are dropped and values keep '=' and '%'."""
    path = tmpdir.join("bench.properties")
    path.write(PROPERTIES)
    properties = load_properties(str(path))
    assert [
        "db1",
        "db2",
        "db3",
        "db5",
        "sqlite3.DROP_TABLE",
        "postgresql.DATETIME",
        "sqlite3.Mixed_Case",
        "sqlite3.URL",
    ] == list(properties)
    assert "SQLite memory, sqlite3, sqlite3://:memory:, sa" == properties["db1"]
    assert "a=b%c" == properties["sqlite3.URL"]


def test_load_targets(tmpdir, context, caplog):
    """Tests targets are built up to the first gap, skipping broken ones, with their translations."""
    path = tmpdir.join("bench.properties")
    path.write(PROPERTIES)
    with caplog.at_level(logging.ERROR):
        targets = load_targets(context, load_properties(str(path)))
    assert [(1, "SQLite memory"), (3, "PostgreSQL")] == [(t.id, t.name) for t in targets]
    assert "DROP TABLE IF EXISTS T" == targets[0].translate("DROP TABLE T")
    assert "MIXED CASE" == targets[0]._translator.rules[1][0]
    assert "CREATE TABLE T(D TIMESTAMP)" == targets[1].translate("CREATE TABLE T(D DATETIME)")
    assert any("Cannot load database Broken" in r.getMessage() for r in caplog.records)


def test_load_properties_repeated_key(tmpdir):
    """Tests a key given twice keeps the value written last."""
    path = tmpdir.join("bench.properties")
    path.write(
        "db1=A, sqlite3, sqlite3://:memory:, sa\n"
        "db2=C, sqlite3, sqlite3://:memory:, sa\n"
        "db1=B, sqlite3, sqlite3://:memory:, sa\n"
    )
    properties = load_properties(str(path))
    assert ["db1", "db2"] == list(properties)
    assert "B, sqlite3, sqlite3://:memory:, sa" == properties["db1"]
