"""Implementation of the PostgreSQL backend and its managed server."""

from typing import List

from polybench.backend.base import Backend
from polybench.backend.errors import ConfigurationError
from polybench.backend.server import ProcessServerLauncher, ServerLauncher


class PostgresServer(ProcessServerLauncher):
    """Runs a ``postgres`` server in the foreground as a child process."""

    @property
    def default_executable(self) -> str:  # noqa: D102
        return "postgres"

    def command(self) -> List[str]:  # noqa: D102
        cmd = [self._executable, "-D", self._datadir]
        if self._port:
            cmd += ["-p", str(self._port)]
        return cmd


class BackendPSQL(Backend):
    """Implementation of Backend for PostgreSQL drivers taking libpq keyword arguments (psycopg2, psycopg)."""

    tuning_sql = "SET synchronous_commit TO OFF"

    def __init__(self, db_url: str, driver, managed: bool = False):
        """Construct a backend for the given connection URL.

        The db_url is expected to be in the following format::

            "postgresql[+server]://{hostname}:{port}/{db_name}?{optional_args}"

        Supported `optional_args` include:

            * schema, a list of strings that sets the search path of the connections, defaults to "public"
            * server_datadir, the data directory of a managed server, required with "+server"
            * server_bin, the path of the postgres binary of a managed server, defaults to "postgres"

        :param db_url: a url with the described format
        :param driver: the imported DB API 2.0 module used to connect
        :param managed: whether the server is started and stopped by the target
        :raises: ConfigurationError
        """
        super().__init__(db_url, driver, managed)
        self._port = self._get_port()
        self._dbname = self._db_url.path.strip("/")
        if not self._dbname:
            raise ConfigurationError("Database name is required but missing")
        self._schema = ",".join(self._get_arg("schema", list, ["public"]))
        self._server_kwargs = self._server_args() if managed else None
        self._raise_for_unexpected_args()

    def _make_cnx_kwargs(self, user: str, password: str) -> dict:
        return {
            "dbname": self._dbname,
            "user": user,
            "password": password,
            "host": self._db_url.hostname,
            "port": self._port,
            "options": f"-c search_path={self._schema}",
        }

    def create_server(self) -> ServerLauncher:  # noqa: D102
        if not self._managed:
            return None
        return PostgresServer(**self._server_kwargs)
