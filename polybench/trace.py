"""The process wide sink for diagnostic and progress output."""

import logging
import threading
from typing import Optional

TRACE_LOGGER = "polybench.trace"


class TraceSink:
    """Writes trace lines to a logger, shared by every target of a process."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Construct a trace sink.

        :param logger: the logger lines are written to, defaults to the ``polybench.trace`` logger
        """
        self._logger = logger or logging.getLogger(TRACE_LOGGER)

    def write(self, message: str):
        """Write one line."""
        self._logger.info(message)


_default_sink = None
_default_sink_lock = threading.Lock()


def get_trace_sink() -> TraceSink:
    """Return the sink of this process, creating it on first use.

    :returns: the same TraceSink for every caller
    """
    global _default_sink
    if _default_sink is None:
        with _default_sink_lock:
            if _default_sink is None:
                _default_sink = TraceSink()
    return _default_sink
