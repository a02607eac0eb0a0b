"""Prepared statement handles and rendering of generic parameter markers."""

from typing import Tuple

# fmt: off
from pyparsing import (  # noqa: I101
    CharsNotIn, Literal, OneOrMore, ParseBaseException, QuotedString
)
# fmt: on

from polybench.backend.base import ResultSet


class Placeholders:
    """Renders the generic ``?`` parameter markers of a statement into the marker of a driver.

    Markers inside single or double quoted text are left alone; nothing else about the statement is interpreted.
    """

    # fmt: off
    MARKER  = Literal("?")                                                        # noqa: E221
    QUOTED  = (QuotedString("'", esc_quote="''", unquote_results=False) |         # noqa: E221
               QuotedString('"', esc_quote='""', unquote_results=False))          # noqa: E221
    TEXT    = CharsNotIn("?'\"")                                                  # noqa: E221
    GRAMMAR = OneOrMore(QUOTED | MARKER | TEXT).leave_whitespace()                # noqa: E221
    # fmt: on

    @classmethod
    def render(cls, sql: str, mung_symbol: str) -> str:
        """Replace every unquoted ``?`` with the given symbol.

        :param sql: the statement using ``?`` markers
        :param mung_symbol: the marker of the driver, e.g. ``%s``
        :returns: the rendered statement
        """
        if mung_symbol == "?" or "?" not in sql:
            return sql
        try:
            tokens = cls.GRAMMAR.parse_string(sql, parse_all=True)
        except ParseBaseException:
            # Unbalanced quotes, leave the statement for the database to reject
            return sql
        munged = ""
        for token in tokens:
            munged += mung_symbol if token == "?" else token
        return munged


class PreparedStatement:
    """A translated statement bound to a connection, executed with the parameters given to bind()."""

    def __init__(self, cnx, sql: str):
        """Construct a prepared statement.

        :param cnx: the DB API 2.0 connection the statement runs on
        :param sql: the translated statement with driver specific markers
        """
        self._cnx = cnx
        self._sql = sql
        self._params = ()
        self._cursor = None

    @property
    def sql(self) -> str:
        """Return the statement sent to the driver."""
        return self._sql

    @property
    def params(self) -> Tuple:
        """Return the currently bound parameters."""
        return self._params

    def bind(self, *params) -> "PreparedStatement":
        """Set the parameters for the following executions.

        :returns: this statement, so calls can be chained
        """
        self._params = params
        return self

    def _execute(self):
        self.close()
        self._cursor = self._cnx.cursor()
        if self._params:
            self._cursor.execute(self._sql, self._params)
        else:
            self._cursor.execute(self._sql)
        return self._cursor

    def execute_update(self) -> int:
        """Execute the statement and return the affected row count."""
        return self._execute().rowcount

    def execute_query(self) -> ResultSet:
        """Execute the statement and return its results, the previous results of this statement are closed."""
        return ResultSet(self._execute())

    def close(self):
        """Close the cursor of the last execution."""
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None
