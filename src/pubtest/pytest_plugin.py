"""pytest plugin: fixtures for waiting on producers and soft assertions.

Registered through the ``pytest11`` entry point.  Failures reported to the
``failure_reporter`` fixture do not stop the test; they are collected and
the test fails at teardown with all of them.
"""

from __future__ import annotations

import logging

import pytest

from pubtest.assertions import PublisherAssertions
from pubtest.config import get_config, set_config
from pubtest.core.models.config import PubtestConfig
from pubtest.core.reporting import RecordingReporter
from pubtest.log_config import setup_logging

_log = logging.getLogger(__name__)


class FixtureReporter(RecordingReporter):
    """Recording reporter whose failures fail the test unless expected."""

    def __init__(self) -> None:
        super().__init__()
        self.failures_expected = False

    def expect_failures(self) -> None:
        """Mark recorded failures as the point of the test."""
        self.failures_expected = True


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("pubtest")
    group.addoption(
        "--pubtest-log-level",
        default=None,
        help="Enable pubtest logging at this level (DEBUG, INFO, ...)",
    )
    group.addoption(
        "--pubtest-timeout",
        type=float,
        default=None,
        help="Default wait timeout in seconds for producer helpers",
    )


def pytest_configure(config: pytest.Config) -> None:
    cfg = get_config()
    timeout = config.getoption("pubtest_timeout")
    if timeout is not None:
        cfg = cfg.model_copy(update={"default_timeout_seconds": timeout})
        set_config(cfg)
    level = config.getoption("pubtest_log_level")
    if level:
        setup_logging(level, cfg.log_dir)
        _log.info("pubtest logging enabled at %s", level)


@pytest.fixture
def pubtest_config():
    """Current config; any replacement made during the test is undone."""
    original = get_config()
    yield original
    set_config(original)


@pytest.fixture
def failure_reporter():
    """Soft-assertion reporter checked at teardown."""
    reporter = FixtureReporter()
    yield reporter
    if len(reporter) and not reporter.failures_expected:
        pytest.fail(
            "\n".join(str(f) for f in reporter.failures),
            pytrace=False,
        )


@pytest.fixture
def publisher_waiter(failure_reporter: FixtureReporter, pubtest_config: PubtestConfig) -> PublisherAssertions:
    """Assertion helpers bound to ``failure_reporter``."""
    return PublisherAssertions(failure_reporter, pubtest_config.default_timeout_seconds)
