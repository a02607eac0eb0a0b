"""Implementation of the MySQL backend and its managed server."""

from typing import List

from polybench.backend.base import Backend
from polybench.backend.errors import ConfigurationError
from polybench.backend.server import ProcessServerLauncher, ServerLauncher


class MySQLServer(ProcessServerLauncher):
    """Runs MySQL through the ``mysqld_safe`` supervisor.

    The supervisor restarts ``mysqld`` when it is killed and stays in the harness's process group, so the server can
    only be brought down together with the harness. stop() therefore leaves it running.
    """

    @property
    def default_executable(self) -> str:  # noqa: D102
        return "mysqld_safe"

    def command(self) -> List[str]:  # noqa: D102
        cmd = [self._executable, f"--datadir={self._datadir}"]
        if self._port:
            cmd.append(f"--port={self._port}")
        return cmd

    def stop(self):  # noqa: D102
        if self.running:
            self.logger.warning("The mysqld_safe server cannot be stopped apart from this process, leaving it running")


class BackendMySQL(Backend):
    """Implementation of Backend for MySQL drivers taking MySQL Connector keyword arguments."""

    def __init__(self, db_url: str, driver, managed: bool = False):
        """Construct a backend for the given connection URL.

        The db_url is expected to be in the following format::

            "mysql[+server]://{hostname}:{port}/{db_name}?{optional_args}"

        Supported `optional_args` include:

            * ssl_ca, an absolute path to a certificate to verify the server with, defaults to None
            * ssl_verify_cert, a boolean specifying that the server's cert must be verified, defaults to None
            * server_datadir, the data directory of a managed server, required with "+server"
            * server_bin, the path of the mysqld_safe script of a managed server, defaults to "mysqld_safe"

        :param db_url: a url with the described format
        :param driver: the imported DB API 2.0 module used to connect
        :param managed: whether the server is started by the target
        :raises: ConfigurationError
        """
        super().__init__(db_url, driver, managed)
        self._port = self._get_port()
        self._dbname = self._db_url.path.strip("/")
        if not self._dbname:
            raise ConfigurationError("Database name is required but missing")
        self._ssl_ca = self._get_arg("ssl_ca", str, None)
        self._ssl_verify_cert = self._get_arg("ssl_verify_cert", bool, None)
        self._server_kwargs = self._server_args() if managed else None
        self._raise_for_unexpected_args()

    def _make_cnx_kwargs(self, user: str, password: str) -> dict:
        kwargs = {
            "database": self._dbname,
            "user": user,
            "password": password,
            "host": self._db_url.hostname,
            "port": self._port,
        }
        if self._ssl_ca is not None:
            kwargs["ssl_ca"] = self._ssl_ca
        if self._ssl_verify_cert is not None:
            kwargs["ssl_verify_cert"] = self._ssl_verify_cert
        return kwargs

    def create_server(self) -> ServerLauncher:  # noqa: D102
        if not self._managed:
            return None
        return MySQLServer(**self._server_kwargs)
