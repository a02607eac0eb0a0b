import logging
import os

from polybench import BenchContext
from polybench.config import load_properties, load_targets


def simple(db, rows):
    db.drop_table("TEST")
    db.update("CREATE TABLE TEST(ID INT PRIMARY KEY, NAME VARCHAR(255))")
    db.set_auto_commit(False)
    prep = db.prepare("INSERT INTO TEST VALUES(?, ?)")
    db.start("insert", bench="Simple")
    for i in range(rows):
        db.trace("insert", i, rows)
        db.update_prepared(prep.bind(i, f"Hello World {db.random.randint(0, 1000)}"), "insertTest")
    db.commit()
    db.end()
    prep = db.prepare("SELECT * FROM TEST WHERE ID = ?")
    db.start("query", bench="Simple")
    for i in range(rows):
        db.query_read_result(prep.bind(i))
    db.end()
    db.log_memory("memory", bench="Simple")
    db.set_auto_commit(True)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    properties = load_properties(os.path.join(os.path.dirname(__file__), "bench.properties"))
    context = BenchContext(collect=True)
    for db in load_targets(context, properties):
        db.start_server()
        db.open_connection()
        simple(db, 1000)
        db.close_connection()
        db.stop_server()
        print(f"{db.name}: {db.total_time} ms, {db.executed_statements} statements")
        for result in db.results:
            print(f"  {result.action}: {result.value} {result.unit}")
