"""A database under test, running the statements of a generic benchmark on one backend."""

import logging
import random
from typing import Mapping, Optional

import psutil

from polybench.backend import create_backend
from polybench.backend.base import Backend, ResultSet
from polybench.backend.errors import ConfigurationError
from polybench.backend.server import ServerLauncher
from polybench.context import BenchContext
from polybench.measure import MeasurementLog, ProgressTracer, millis
from polybench.statement import Placeholders, PreparedStatement
from polybench.translate import DialectTranslator

logger = logging.getLogger(__name__)

RANDOM_SEED = 1


class DatabaseTarget:
    """Represents one configured database in a benchmark run.

    A target owns at most one open connection and is not safe to share between threads. Statement counts and
    measurements are only recorded while the context's ``collect`` flag is set.
    """

    def __init__(
        self,
        context: BenchContext,
        target_id: int,
        name: str,
        backend: Backend,
        url: str,
        user: str,
        password: str = "",
    ):
        """Construct a target, see parse() for building one from a configuration line.

        :param context: the run settings shared by every target
        :param target_id: the id of the target within the run
        :param name: the display name of the target
        :param backend: the backend reached through the URL
        :param url: the connection URL
        :param user: the user to connect as
        :param password: the password of the user, defaults to an empty string
        """
        self._context = context
        self._id = target_id
        self._name = name
        self._backend = backend
        self._url = url
        self._user = user
        self._password = password
        self._translator = DialectTranslator()
        self._cnx = None
        self._cursor = None
        self._server: Optional[ServerLauncher] = None
        self._random = random.Random(RANDOM_SEED)
        self._results = MeasurementLog()
        self._tracer = ProgressTracer(context.sink)
        self._action = None
        self._start_time = 0
        self._total_time = 0
        self._executed_statements = 0
        self.trace_enabled = True

    @classmethod
    def parse(cls, context: BenchContext, target_id: int, config: str) -> Optional["DatabaseTarget"]:
        """Build a target from a configuration line.

        The line is expected to be in the following format::

            "{name}, {driver}, {url}, {user}[, {password}]"

        where driver is the import path of a DB API 2.0 module. Problems are logged and None is returned, so a run can
        carry on with the remaining targets.

        :param context: the run settings shared by every target
        :param target_id: the id of the target within the run
        :param config: the configuration line
        :returns: the target, or None if it cannot be built
        """
        try:
            tokens = [token.strip() for token in config.split(",")]
            if len(tokens) == 5 and not tokens[4]:
                tokens.pop()
            if len(tokens) not in (4, 5):
                raise ConfigurationError(f"Expected 4 or 5 values, got {len(tokens)}")
            name, driver, url, user = tokens[:4]
            if not (name and driver and url):
                raise ConfigurationError("The name, driver and url must not be empty")
            password = tokens[4] if len(tokens) == 5 else ""
            backend = create_backend(url, driver)
        except Exception as x:
            logger.error(f"Cannot load database {config}: {x!r}")
            return None
        return cls(context, target_id, name, backend, url, user, password)

    @property
    def id(self) -> int:
        """Return the id of the target within the run."""
        return self._id

    @property
    def name(self) -> str:
        """Return the display name of the target."""
        return self._name

    @property
    def url(self) -> str:
        """Return the connection URL."""
        return self._url

    @property
    def backend(self) -> Backend:
        """Return the backend the target runs on."""
        return self._backend

    @property
    def total_time(self) -> int:
        """Return the milliseconds measured by start() / end() while collecting."""
        return self._total_time

    @property
    def executed_statements(self) -> int:
        """Return the number of statements executed while collecting."""
        return self._executed_statements

    @property
    def results(self) -> MeasurementLog:
        """Return the measurements recorded so far."""
        return self._results

    @property
    def random(self) -> random.Random:
        """Return the random generator, seeded the same for every target so all of them see the same data."""
        return self._random

    @property
    def connection(self):
        """Return the open connection, or None."""
        return self._cnx

    def start_server(self):
        """Start the server of the target if its URL asks for a managed server, otherwise do nothing."""
        if self._server is None:
            self._server = self._backend.create_server()
        if self._server is not None:
            self._server.start()

    def stop_server(self):
        """Stop the managed server, doing nothing if none is running."""
        if self._server is None:
            return
        self._server.stop()
        if not self._server.running:
            self._server = None

    def open_new_connection(self):
        """Open an extra connection, closing it is up to the caller.

        :returns: the DB API 2.0 connection
        """
        cnx = self._backend.connect(self._user, self._password)
        tuning_sql = self._backend.tuning_sql
        if tuning_sql:
            try:
                cursor = cnx.cursor()
                try:
                    cursor.execute(tuning_sql)
                finally:
                    cursor.close()
            except Exception as x:
                logger.debug(f"Ignoring failed tuning statement '{tuning_sql}' on {self._name}: {x}")
        return cnx

    def open_connection(self):
        """Open the connection statements run on, one must not be open already."""
        self._cnx = self.open_new_connection()
        self._cursor = self._cnx.cursor()

    def close_connection(self):
        """Close the connection opened by open_connection()."""
        self._cursor.close()
        self._cnx.close()
        self._cursor = None
        self._cnx = None

    def set_auto_commit(self, auto_commit: bool):
        """Enable or disable auto commit on the open connection."""
        self._backend.set_autocommit(self._cnx, auto_commit)

    def commit(self):
        """Commit the current transaction."""
        self._cnx.commit()

    def rollback(self):
        """Roll the current transaction back."""
        self._cnx.rollback()

    def set_translations(self, properties: Mapping[str, str]):
        """Take the translation rules of this target's dialect from a property mapping.

        :param properties: a mapping with keys like ``<dialect>.<PATTERN_WITH_UNDERSCORES>``
        """
        self._translator = DialectTranslator.from_properties(self._backend.dialect, properties)

    def translate(self, sql: str) -> str:
        """Rewrite a generic statement for this target's dialect."""
        return self._translator.translate(sql)

    def _count(self):
        if self._context.collect:
            self._executed_statements += 1

    def prepare(self, sql: str) -> PreparedStatement:
        """Prepare a statement on the open connection.

        :param sql: the generic statement, using ``?`` as parameter marker
        :returns: the prepared statement
        """
        sql = Placeholders.render(self.translate(sql), self._backend.mung_symbol)
        return PreparedStatement(self._cnx, sql)

    def update(self, sql: str):
        """Translate and execute a statement.

        A statement translated to nothing is skipped, writing ``?`` to the trace sink.

        :param sql: the generic statement
        """
        sql = self.translate(sql)
        if not sql.strip():
            self._context.sink.write("?")
            return
        self._count()
        self._cursor.execute(sql)

    def update_prepared(self, prep: PreparedStatement, label: str) -> int:
        """Execute a prepared statement.

        :param prep: the statement with its parameters bound
        :param label: the trace message for the statement
        :returns: the affected row count
        """
        self._context.trace_statement(label)
        affected = prep.execute_update()
        self._count()
        return affected

    def query(self, prep: PreparedStatement) -> ResultSet:
        """Execute a prepared query, consuming the results is up to the caller.

        :param prep: the query with its parameters bound
        :returns: the results
        """
        results = prep.execute_query()
        self._count()
        return results

    def query_read_result(self, prep: PreparedStatement):
        """Execute a prepared query and read every column of every row, keeping nothing.

        :param prep: the query with its parameters bound
        """
        results = prep.execute_query()
        columns = results.column_count
        for row in results:
            for i in range(columns):
                str(row[i])

    def drop_table(self, table: str):
        """Drop a table, ignoring errors as the table may not exist."""
        try:
            self.update(f"DROP TABLE {table}")
        except Exception:
            logger.debug(f"Ignoring failure to drop table {table} on {self._name}")

    def start(self, action: str, bench: str = None):
        """Start timing an action.

        :param action: the action timed
        :param bench: the name of the benchmark, prefixed to the action when given
        """
        self._action = f"{bench}: {action}" if bench else action
        self._start_time = millis()

    def end(self) -> int:
        """Stop timing the action given to start().

        :returns: the elapsed milliseconds
        """
        elapsed = millis() - self._start_time
        self.log(self._action, "ms", elapsed)
        if self._context.collect:
            self._total_time += elapsed
        self._context.sink.write(f"{self._action}: {elapsed} ms")
        return elapsed

    def log(self, action: str, unit: str, value):
        """Record a measurement when collecting.

        :param action: what was measured
        :param unit: the unit of the value, e.g. ``ms``
        :param value: the measured value
        """
        if self._context.collect:
            self._results.add(action, unit, value)

    def log_memory(self, action: str, bench: str = None):
        """Record the resident memory of this process in MB when collecting.

        :param action: the action the sample belongs to
        :param bench: the name of the benchmark, prefixed to the action when given
        """
        action = f"{bench}: {action}" if bench else action
        rss = psutil.Process().memory_info().rss
        self.log(action, "MB", rss // (1024 * 1024))

    def trace(self, action: str, index: int, total: int):
        """Write a progress line for a loop, at most once per second.

        :param action: the action reported on
        :param index: how many steps are done
        :param total: the number of steps
        """
        if self.trace_enabled:
            self._tracer.trace(action, index, total)

    def __repr__(self) -> str:
        return f"DatabaseTarget(id={self._id}, name={self._name!r}, url={self._url!r})"
