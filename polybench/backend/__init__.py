"""Functionality abstracting the DB API 2.0 drivers of the backends under test."""

import importlib
from typing import Tuple
from urllib.parse import urlparse

from polybench.backend.base import Backend, ResultSet
from polybench.backend.errors import BackendNotInstalledError, ConfigurationError, UnsupportedBackendError
from polybench.backend.mariadb import BackendMariaDB
from polybench.backend.mysql import BackendMySQL
from polybench.backend.postgres import BackendPSQL
from polybench.backend.server import ServerLauncher
from polybench.backend.sqlite import BackendSQLite3

BACKENDS = {
    "sqlite3": BackendSQLite3,
    "postgresql": BackendPSQL,
    "mariadb": BackendMariaDB,
    "mysql": BackendMySQL,
}

MANAGED_MODE = "server"


def _parse_scheme(scheme: str) -> Tuple[str, bool]:
    """Split a URL scheme into its dialect and whether the server is managed.

    :param scheme: the scheme, e.g. ``postgresql`` or ``postgresql+server``
    :returns: a tuple of the dialect and the managed flag
    :raises: ConfigurationError
    """
    if not scheme:
        raise ConfigurationError("No database backend specified")
    parts = scheme.split("+")
    if len(parts) > 2 or (len(parts) == 2 and parts[1] != MANAGED_MODE):
        raise ConfigurationError(f"Unknown mode in scheme '{scheme}'")
    return parts[0], len(parts) == 2


def resolve_driver(driver: str):
    """Import a DB API 2.0 driver module by its import path.

    :param driver: the import path of the module, e.g. ``sqlite3`` or ``mysql.connector``
    :returns: the imported module
    :raises: BackendNotInstalledError
    """
    try:
        module = importlib.import_module(driver)
    except ModuleNotFoundError as x:
        raise BackendNotInstalledError(f"Module {driver} not installed, cannot create backend") from x
    if not callable(getattr(module, "connect", None)):
        raise BackendNotInstalledError(f"Module {driver} is not a DB API 2.0 driver")
    return module


def create_backend(db_url: str, driver) -> Backend:
    """Create the backend for the given database connection URL.

    The db_url is expected to be in the following format::

        "{dialect}[+server]://{hostname}:{port}/{db_name}?{optional_args}"

    :param db_url: the connection URL
    :param driver: the DB API 2.0 module, or its import path
    :returns: the backend matching the URL's dialect
    :raises: ConfigurationError, UnsupportedBackendError, BackendNotInstalledError
    """
    parsed_url = urlparse(db_url)
    dialect, managed = _parse_scheme(parsed_url.scheme)
    backend_class = BACKENDS.get(dialect)
    if backend_class is None:
        raise UnsupportedBackendError(f"The backend '{parsed_url.scheme}' is not supported")
    if managed and backend_class.create_server is Backend.create_server:
        raise UnsupportedBackendError(f"The backend '{dialect}' cannot run a managed server")
    if isinstance(driver, str):
        driver = resolve_driver(driver)
    return backend_class(db_url, driver, managed)


__all__ = [
    "BACKENDS",
    "Backend",
    "ResultSet",
    "ServerLauncher",
    "create_backend",
    "resolve_driver",
    "errors",
]
