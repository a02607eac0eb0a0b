"""Launchers for database servers whose lifecycle is owned by a benchmark target."""

import logging
import subprocess
import time
from abc import ABC, abstractmethod
from typing import List, Optional

SETTLE_SECONDS = 0.1
"""How long start() blocks after spawning a server, there is no readiness polling."""


class ServerLauncher(ABC):
    """Basic interface definition for a managed database server."""

    def __init__(self, datadir: str, port: Optional[int] = None, executable: Optional[str] = None):
        """Construct a server launcher.

        :param datadir: the data directory the server is started on
        :param port: the port the server listens on, defaults to the server's own default
        :param executable: path of the server binary, defaults to the launcher's default binary
        """
        self.logger = logging.getLogger(__name__)
        self._datadir = datadir
        self._port = port
        self._executable = executable or self.default_executable

    @property
    @abstractmethod
    def default_executable(self) -> str:
        """Return the name of the server binary looked up on the PATH."""
        pass  # pragma: no cover

    @property
    @abstractmethod
    def running(self) -> bool:
        """Whether the server was started and not stopped yet."""
        pass  # pragma: no cover

    @abstractmethod
    def start(self):
        """Start the server, calling this on a running server does nothing."""
        pass  # pragma: no cover

    @abstractmethod
    def stop(self):
        """Stop the server, calling this on a stopped server does nothing."""
        pass  # pragma: no cover


class ProcessServerLauncher(ServerLauncher):
    """Runs the server as a child process which is terminated on stop()."""

    def __init__(self, datadir: str, port: Optional[int] = None, executable: Optional[str] = None):  # noqa: D107
        super().__init__(datadir, port, executable)
        self._process = None

    @abstractmethod
    def command(self) -> List[str]:
        """Return the command line used to spawn the server."""
        pass  # pragma: no cover

    @property
    def running(self) -> bool:  # noqa: D102
        return self._process is not None

    def start(self):  # noqa: D102
        if self._process is not None:
            return
        cmd = self.command()
        self.logger.info(f"Starting server: {' '.join(cmd)}")
        self._process = subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        time.sleep(SETTLE_SECONDS)

    def stop(self):  # noqa: D102
        if self._process is None:
            return
        self.logger.info(f"Stopping server with pid {self._process.pid}")
        self._process.terminate()
        self._process.wait()
        self._process = None
