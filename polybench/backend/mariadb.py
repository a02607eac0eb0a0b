"""Implementation of the MariaDB backend and its managed server."""

from typing import List

from polybench.backend.base import Backend
from polybench.backend.errors import ConfigurationError
from polybench.backend.server import ProcessServerLauncher, ServerLauncher


class MariaDBServer(ProcessServerLauncher):
    """Runs a ``mariadbd`` server as a child process."""

    @property
    def default_executable(self) -> str:  # noqa: D102
        return "mariadbd"

    def command(self) -> List[str]:  # noqa: D102
        cmd = [self._executable, f"--datadir={self._datadir}"]
        if self._port:
            cmd.append(f"--port={self._port}")
        return cmd


class BackendMariaDB(Backend):
    """Implementation of Backend for MariaDB Connector."""

    def __init__(self, db_url: str, driver, managed: bool = False):
        """Construct a backend for the given connection URL.

        The db_url is expected to be in the following format::

            "mariadb[+server]://{hostname}:{port}/{db_name}?{optional_args}"

        Supported `optional_args` include:

            * server_datadir, the data directory of a managed server, required with "+server"
            * server_bin, the path of the mariadbd binary of a managed server, defaults to "mariadbd"

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
        self._server_kwargs = self._server_args() if managed else None
        self._raise_for_unexpected_args()

    def _make_cnx_kwargs(self, user: str, password: str) -> dict:
        return {
            "database": self._dbname,
            "user": user,
            "password": password,
            "host": self._db_url.hostname,
            "port": self._port,
        }

    def create_server(self) -> ServerLauncher:  # noqa: D102
        if not self._managed:
            return None
        return MariaDBServer(**self._server_kwargs)
