"""Per-database core of a cross-database benchmark harness."""

from polybench.context import BenchContext
from polybench.target import DatabaseTarget

__all__ = ["BenchContext", "DatabaseTarget"]
