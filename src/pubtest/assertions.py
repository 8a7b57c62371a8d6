"""Assertion helpers for synchronous test code.

Each helper takes an optional :class:`FailureReporter`.  Without one, the
failures found during the call are collected and raised together on the
calling thread as a single :class:`AssertionFailures`, so one call still
surfaces every mismatch.

Usage::

    value = wait_for_value(2.0, lambda: ThreadProducer(fetch_rows, "users"))
    assert_equal_dictionaries(value, {"id": 7, "name": "ada"})
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Callable

from pubtest.config import get_config
from pubtest.core.comparator import StructuralComparator, compare_sequences
from pubtest.core.errors import AssertionFailures
from pubtest.core.models.config import PubtestConfig
from pubtest.core.models.failure import SourceLocation
from pubtest.core.models.outcome import WaitOutcome
from pubtest.core.producer import Producer
from pubtest.core.reporting import FailureReporter, RecordingReporter, caller_location
from pubtest.core.waiter import AsyncResultWaiter, outcome_value

ProducerFactory = Callable[[], Producer]


@contextlib.contextmanager
def _reporting(reporter: FailureReporter | None) -> Iterator[FailureReporter]:
    if reporter is not None:
        yield reporter
        return
    collected = RecordingReporter()
    yield collected
    if len(collected):
        raise AssertionFailures(collected.failures)


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------

def assert_equal_arrays(
    first: Sequence[Any],
    second: Sequence[Any],
    *,
    reporter: FailureReporter | None = None,
    location: SourceLocation | None = None,
) -> None:
    """Report one failure if the sequences differ in length or any element."""
    location = location or caller_location()
    with _reporting(reporter) as sink:
        error = compare_sequences(first, second)
        if error is not None:
            sink.report_failure(error, location)


def assert_equal_dictionaries(
    actual: Mapping[str, Any],
    expected: Mapping[str, Any],
    *,
    reporter: FailureReporter | None = None,
    location: SourceLocation | None = None,
) -> None:
    """Structurally compare nested mappings, reporting every mismatch."""
    location = location or caller_location()
    with _reporting(reporter) as sink:
        StructuralComparator(sink, location).compare(actual, expected)


# ---------------------------------------------------------------------------
# Waiting on producers
# ---------------------------------------------------------------------------

def wait_for_outcome(
    timeout: float | None,
    producer_factory: ProducerFactory,
    *,
    require_value: bool | None = None,
    reporter: FailureReporter | None = None,
    location: SourceLocation | None = None,
) -> WaitOutcome:
    """Subscribe to a fresh producer and return how it ended."""
    config = get_config()
    location = location or caller_location()
    if require_value is None:
        require_value = config.require_value
    with _reporting(reporter) as sink:
        waiter = AsyncResultWaiter(sink, location, require_value=require_value)
        return waiter.wait_for_value(producer_factory(), _timeout(timeout, config))


def wait_for_value(
    timeout: float | None,
    producer_factory: ProducerFactory,
    *,
    require_value: bool | None = None,
    reporter: FailureReporter | None = None,
    location: SourceLocation | None = None,
) -> Any:
    """Return the last value the producer emitted before finishing.

    *None* when it failed, timed out or emitted nothing.
    """
    outcome = wait_for_outcome(
        timeout,
        producer_factory,
        require_value=require_value,
        reporter=reporter,
        location=location or caller_location(),
    )
    return outcome_value(outcome)


def wait_for_failure(
    timeout: float | None,
    unexpected_success_message: str,
    producer_factory: ProducerFactory,
    *,
    reporter: FailureReporter | None = None,
    location: SourceLocation | None = None,
) -> BaseException | None:
    """Return the error the producer failed with, or *None* (reported)."""
    config = get_config()
    location = location or caller_location()
    with _reporting(reporter) as sink:
        waiter = AsyncResultWaiter(sink, location)
        return waiter.wait_for_failure(
            producer_factory(), _timeout(timeout, config), unexpected_success_message
        )


def _timeout(timeout: float | None, config: PubtestConfig) -> float:
    return config.default_timeout_seconds if timeout is None else timeout


# ---------------------------------------------------------------------------
# Bound helpers
# ---------------------------------------------------------------------------

class PublisherAssertions:
    """The helpers above, bound to one reporter.

    Used by the ``publisher_waiter`` pytest fixture so a test can keep
    going after a failure and have every failure reported at teardown.
    """

    def __init__(self, reporter: FailureReporter, default_timeout: float | None = None) -> None:
        self.reporter = reporter
        self._default_timeout = default_timeout

    def wait_for_value(self, producer_factory: ProducerFactory, timeout: float | None = None, **kwargs: Any) -> Any:
        return wait_for_value(
            self._resolve_timeout(timeout), producer_factory,
            reporter=self.reporter, location=caller_location(), **kwargs,
        )

    def wait_for_outcome(
        self, producer_factory: ProducerFactory, timeout: float | None = None, **kwargs: Any
    ) -> WaitOutcome:
        return wait_for_outcome(
            self._resolve_timeout(timeout), producer_factory,
            reporter=self.reporter, location=caller_location(), **kwargs,
        )

    def wait_for_failure(
        self,
        producer_factory: ProducerFactory,
        unexpected_success_message: str = "",
        timeout: float | None = None,
    ) -> BaseException | None:
        return wait_for_failure(
            self._resolve_timeout(timeout), unexpected_success_message, producer_factory,
            reporter=self.reporter, location=caller_location(),
        )

    def assert_equal_arrays(self, first: Sequence[Any], second: Sequence[Any]) -> None:
        assert_equal_arrays(first, second, reporter=self.reporter, location=caller_location())

    def assert_equal_dictionaries(self, actual: Mapping[str, Any], expected: Mapping[str, Any]) -> None:
        assert_equal_dictionaries(actual, expected, reporter=self.reporter, location=caller_location())

    def _resolve_timeout(self, timeout: float | None) -> float | None:
        return self._default_timeout if timeout is None else timeout
