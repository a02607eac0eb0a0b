"""Defines the primitive backend interface. It is basically a thin wrapper on DB API 2.0 drivers."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from polybench.backend.errors import ConfigurationError
from polybench.backend.server import ServerLauncher


@dataclass
class ColumnDescriptor:
    """Describes a column in a result set."""

    name: str
    type_code: int
    display_size: int = None
    internal_size: int = None
    precision: int = None
    scale: int = None
    null_ok: bool = None


class ResultSet:
    """Wraps the cursor of an executed query; the caller is responsible for consuming and closing it."""

    def __init__(self, cursor):
        """Construct a result set.

        :param cursor: the underlying DB API 2.0 cursor being wrapped by this object.
        """
        self._cursor = cursor
        self._description = None

    def fetchone(self) -> Optional[Tuple]:
        """Fetch one result tuple from the underlying cursor.

        If no results are left, None is returned.

        :returns: a tuple representing a result row or None
        """
        return self._cursor.fetchone()

    def fetchall(self) -> List[Tuple]:
        """Fetch the *remaining* result tuples from the underlying cursor.

        :returns: a list of tuples that are the remaining results of the underlying cursor.
        """
        return self._cursor.fetchall()

    def __iter__(self):
        row = self._cursor.fetchone()
        while row is not None:
            yield row
            row = self._cursor.fetchone()

    @property
    def description(self) -> Tuple[ColumnDescriptor]:
        """Return a sequence of column descriptions representing the result set.

        :returns: a tuple of ColumnDescriptors
        """
        if not self._description:
            self._description = tuple([ColumnDescriptor(*(d[0:7])) for d in self._cursor.description])
        return self._description

    @property
    def column_count(self) -> int:
        """Return the number of columns in the result set."""
        return len(self._cursor.description or ())

    def close(self):
        """Close the underlying cursor."""
        self._cursor.close()


class Backend(ABC):
    """Basic interface definition for one database backend reached through a DB API 2.0 driver."""

    tuning_sql: Optional[str] = None
    """A fixed statement issued right after connecting, failures are ignored."""

    def __init__(self, db_url: str, driver, managed: bool = False):
        """Construct a backend for the given connection URL.

        The db_url is expected to be in the following format::

            "{dialect}[+server]://{hostname}:{port}/{db_name}?{optional_args}"

        :param db_url: a url with the described format
        :param driver: the imported DB API 2.0 module used to connect
        :param managed: whether the server behind the URL is started and stopped by this backend
        """
        self.logger = logging.getLogger(__name__)
        self._raw_db_url = db_url
        self._db_url = urlparse(self._raw_db_url)
        self._args = parse_qs(self._db_url.query, keep_blank_values=True)
        self._driver = driver
        self._managed = managed
        self._port = None

    @staticmethod
    def _strict_bool(value: str):
        if value.lower() not in ["true", "false"]:
            raise ValueError(f"Cannot cast '{value}' to bool")
        return value.lower() == "true"

    def _raise_for_unexpected_args(self):
        unexpected = ",".join(self._args.keys())
        if unexpected:
            raise ConfigurationError(f"Unexpected argument(s): {unexpected}")

    def _get_arg(self, name: str, expected_type, default=None):
        if name not in self._args:
            self.logger.debug(f"No '{name}' specified, defaulting to {default}")
            return default
        caster = expected_type if expected_type is not bool else self._strict_bool
        try:
            if caster != list:
                if len(self._args.get(name)) != 1:
                    raise ConfigurationError(f"Invalid argument '{name}': only a single value must be specified")
                return caster(self._args.pop(name)[0])
            return self._args.pop(name)
        except ValueError as x:
            raise ConfigurationError(f"Invalid argument '{name}': must be {expected_type.__name__}") from x

    def _get_port(self) -> Optional[int]:
        try:
            return self._db_url.port
        except ValueError as x:
            raise ConfigurationError(f"Invalid port in '{self._raw_db_url}': {x}") from x

    def _server_args(self) -> dict:
        """Consume the arguments describing a managed server.

        Only called for managed URLs, so the arguments are rejected as unexpected otherwise.
        """
        datadir = self._get_arg("server_datadir", str, None)
        if not datadir:
            raise ConfigurationError("A managed server requires the 'server_datadir' argument")
        return {
            "datadir": datadir,
            "executable": self._get_arg("server_bin", str, None),
            "port": self._port,
        }

    @property
    def dialect(self) -> str:
        """Return the dialect identifier, the URL scheme without its mode suffix."""
        return self._db_url.scheme.split("+")[0]

    @property
    def managed(self) -> bool:
        """Whether this backend's server lifecycle is owned by the target."""
        return self._managed

    @property
    def mung_symbol(self) -> str:
        """Return the parameter marker of the driver, derived from its DB API ``paramstyle``."""
        style = getattr(self._driver, "paramstyle", "qmark")
        return "?" if style == "qmark" else "%s"

    @abstractmethod
    def _make_cnx_kwargs(self, user: str, password: str) -> dict:
        pass  # pragma: no cover

    def connect(self, user: str, password: str):
        """Open a new DB API 2.0 connection.

        :param user: the user to authenticate as
        :param password: the password of the user
        :returns: the raw driver connection
        """
        kwargs = {k: v for k, v in self._make_cnx_kwargs(user, password).items() if v is not None}
        return self._driver.connect(**kwargs)

    def set_autocommit(self, cnx, auto_commit: bool):
        """Enable or disable auto commit on a connection opened by this backend."""
        cnx.autocommit = auto_commit

    def create_server(self) -> Optional[ServerLauncher]:
        """Create the launcher for this backend's managed server.

        :returns: a server launcher, or None when the backend's server is not managed
        """
        return None
