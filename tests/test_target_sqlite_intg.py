"""Runs a small benchmark end to end against real SQLite databases."""

import sqlite3

from polybench.context import BenchContext
from polybench.target import DatabaseTarget

import pytest


def test_end_to_end_memory(sink):
    """Tests the documented lifecycle on an in memory database."""
    context = BenchContext(collect=False, sink=sink)
    db = DatabaseTarget.parse(context, 1, "SQLite,sqlite3,sqlite3://:memory:,sa,")
    db.set_translations({"sqlite3.DROP_TABLE": "DROP TABLE IF EXISTS"})
    db.start_server()
    db.open_connection()
    db.update("DROP TABLE T")
    context.collect = True
    db.update("CREATE TABLE T(ID INT)")
    db.update("INSERT INTO T VALUES(1)")
    assert 2 == db.executed_statements
    prep = db.prepare("SELECT ID FROM T WHERE ID = ?")
    with pytest.raises(sqlite3.OperationalError):
        db.update("DROP TABLE")
    db.drop_table("NEVER_CREATED")
    assert [(1,)] == db.query(prep.bind(1)).fetchall()
    db.close_connection()
    db.stop_server()
    db.stop_server()


def test_prepared_workload_on_file(tmpdir, sink):
    """Tests prepared inserts, transactions and queries on a database file."""
    context = BenchContext(collect=True, sink=sink)
    db = DatabaseTarget.parse(context, 1, f"SQLite, sqlite3, sqlite3://{tmpdir}/bench.db, sa")
    db.open_connection()
    db.drop_table("TEST")
    db.update("CREATE TABLE TEST(ID INT PRIMARY KEY, NAME VARCHAR(255))")
    db.set_auto_commit(False)
    prep = db.prepare("INSERT INTO TEST VALUES(?, ?)")
    db.start("insert", bench="Simple")
    for i in range(100):
        db.trace("insert", i, 100)
        db.update_prepared(prep.bind(i, f"Hello {db.random.randint(0, 9)}"), "insertTest")
    db.commit()
    db.end()
    db.update_prepared(prep.bind(1000, "rolled back"), "insertTest")
    db.rollback()
    db.set_auto_commit(True)
    count = db.prepare("SELECT COUNT(*) FROM TEST")
    assert [(100,)] == db.query(count).fetchall()
    db.query_read_result(db.prepare("SELECT * FROM TEST"))
    db.close_connection()

    other = DatabaseTarget.parse(context, 2, f"SQLite, sqlite3, sqlite3://{tmpdir}/bench.db, sa")
    other.open_connection()
    names = other.query(other.prepare("SELECT NAME FROM TEST ORDER BY ID")).fetchall()
    other.close_connection()
    expected = DatabaseTarget.parse(context, 3, "SQLite, sqlite3, sqlite3://:memory:, sa").random
    assert [(f"Hello {expected.randint(0, 9)}",) for _ in range(100)] == names
    assert 104 == db.executed_statements
    assert ["Simple: insert"] == [m.action for m in db.results]
