"""State owned by the benchmark driver and shared with the targets it runs."""

from dataclasses import dataclass, field

from polybench.trace import TraceSink, get_trace_sink


@dataclass
class BenchContext:
    """The settings of the current benchmark run.

    :param collect: whether statement counts and measurements are recorded, usually off during warm up
    :param trace: whether statement labels passed to ``DatabaseTarget.update_prepared`` are written out
    :param sink: where trace output goes, defaults to the process wide sink
    """

    collect: bool = False
    trace: bool = False
    sink: TraceSink = field(default_factory=get_trace_sink)

    def trace_statement(self, label: str):
        """Write the label of a statement about to run when tracing is on."""
        if self.trace:
            self.sink.write(label)
