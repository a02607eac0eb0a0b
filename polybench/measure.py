"""Measurement records and throttled progress output."""

import time
from dataclasses import dataclass
from typing import Callable, Iterator, List, Union

from polybench.trace import TraceSink

TRACE_INTERVAL_MS = 1000


@dataclass(frozen=True)
class Measurement:
    """One sample of a benchmark action."""

    action: str
    unit: str
    value: Union[int, float]


class MeasurementLog:
    """Append only list of measurements, read by the reporting side once a run is over."""

    def __init__(self):  # noqa: D107
        self._measurements: List[Measurement] = []

    def add(self, action: str, unit: str, value: Union[int, float]) -> Measurement:
        """Append a measurement and return it."""
        measurement = Measurement(action, unit, value)
        self._measurements.append(measurement)
        return measurement

    def __iter__(self) -> Iterator[Measurement]:
        return iter(self._measurements)

    def __len__(self) -> int:
        return len(self._measurements)

    def __getitem__(self, index: int) -> Measurement:
        return self._measurements[index]


def millis() -> int:
    """Return a monotonic clock reading in milliseconds."""
    return int(time.monotonic() * 1000)


class ProgressTracer:
    """Writes percent complete lines for long loops, at most one per second."""

    def __init__(self, sink: TraceSink, clock: Callable[[], int] = millis):
        """Construct a progress tracer.

        :param sink: where progress lines are written
        :param clock: returns the current time in milliseconds
        """
        self._sink = sink
        self._clock = clock
        self._last_trace = None

    def trace(self, action: str, index: int, total: int) -> bool:
        """Report progress of an action.

        The first call, and any call with index 0, only starts the interval. Nothing is reported for an empty loop.

        :param action: the action reported on
        :param index: how many of the steps are done
        :param total: the number of steps
        :returns: True if a line was written
        """
        if total <= 0:
            return False
        now = self._clock()
        if index == 0 or self._last_trace is None:
            self._last_trace = now
        elif now > self._last_trace + TRACE_INTERVAL_MS:
            self._sink.write(f"{action}: {100 * index // total}%")
            self._last_trace = now
            return True
        return False
