"""Helpful fixtures for testing polybench targets."""

from polybench.backend.sqlite import BackendSQLite3
from polybench.context import BenchContext
from polybench.target import DatabaseTarget

import pytest

from tests.mocks import MockDriver, MockProcess, RecordingSink, Spawned


@pytest.fixture()
def sink() -> RecordingSink:
    """Provide a trace sink recording what is written to it."""
    return RecordingSink()


@pytest.fixture()
def context(sink) -> BenchContext:
    """Provide a benchmark context collecting measurements into a recording sink."""
    return BenchContext(collect=True, sink=sink)


@pytest.fixture()
def mock_driver() -> MockDriver:
    """Provide a mock DB API 2.0 driver."""
    return MockDriver()


@pytest.fixture()
def mock_target(context, mock_driver) -> DatabaseTarget:
    """Provide a target on a SQLite backend connecting through a mock driver."""
    url = "sqlite3://:memory:"
    backend = BackendSQLite3(url, mock_driver)
    return DatabaseTarget(context, 1, "Mock", backend, url, "sa")


@pytest.fixture()
def sqlite_target(context) -> DatabaseTarget:
    """Provide a target on an in memory SQLite database."""
    target = DatabaseTarget.parse(context, 1, "SQLite, sqlite3, sqlite3://:memory:, sa")
    assert target is not None
    return target


@pytest.fixture()
def make_target(context):
    """Provide a factory building SQLite backed targets on a given mock driver."""

    def factory(driver: MockDriver) -> DatabaseTarget:
        url = "sqlite3://:memory:"
        return DatabaseTarget(context, 1, "Mock", BackendSQLite3(url, driver), url, "sa")

    return factory


@pytest.fixture()
def spawned(monkeypatch) -> Spawned:
    """Replace process spawning and the settle delay, yielding what was spawned and slept."""
    spawned = Spawned()

    def popen(cmd, **kwargs):
        process = MockProcess(cmd, **kwargs)
        spawned.processes.append(process)
        return process

    monkeypatch.setattr("polybench.backend.server.subprocess.Popen", popen)
    monkeypatch.setattr("polybench.backend.server.time.sleep", spawned.sleeps.append)
    yield spawned
