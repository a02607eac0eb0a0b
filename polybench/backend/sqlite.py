"""Implementation of the SQLite backend."""
import os.path

from polybench.backend.base import Backend

MEMORY = ":memory:"


class BackendSQLite3(Backend):
    """Implementation of Backend for SQLite3, always embedded so it never has a managed server."""

    tuning_sql = "PRAGMA synchronous = OFF"

    def __init__(self, db_url: str, driver, managed: bool = False):
        """Construct a backend for the given connection URL.

        The db_url is expected to be in one of the following formats::

            "sqlite3://{filename}"
            "sqlite3://:memory:"

        :param db_url: a url with the described format
        :param driver: the imported DB API 2.0 module, normally sqlite3
        :param managed: must be False, SQLite is embedded
        :raises: ConfigurationError
        """
        super().__init__(db_url, driver, managed)
        self._database = self._url_to_database()
        self._raise_for_unexpected_args()

    def _url_to_database(self) -> str:
        target = f"{self._db_url.netloc}{self._db_url.path}"
        if target == MEMORY:
            return target
        return os.path.abspath(os.path.expanduser(target))

    def _make_cnx_kwargs(self, user: str, password: str) -> dict:
        return {"database": self._database}

    def set_autocommit(self, cnx, auto_commit: bool):  # noqa: D102
        cnx.isolation_level = None if auto_commit else ""
