"""Synchronous test helpers for asynchronous producers and nested data."""

from pubtest.assertions import (
    PublisherAssertions,
    assert_equal_arrays,
    assert_equal_dictionaries,
    wait_for_failure,
    wait_for_outcome,
    wait_for_value,
)
from pubtest.core import (
    CoroutineProducer,
    Fail,
    FailureReporter,
    Just,
    LoopProducer,
    Never,
    Producer,
    RecordingReporter,
    Subscriber,
    Subscription,
    ThreadProducer,
)
from pubtest.core.errors import AssertionFailures
from pubtest.core.models import OutcomeKind, WaitOutcome
from pubtest.resources import get_test_resource_directory

__version__ = "1.0.0"

__all__ = [
    "assert_equal_arrays",
    "assert_equal_dictionaries",
    "wait_for_value",
    "wait_for_outcome",
    "wait_for_failure",
    "get_test_resource_directory",
    "PublisherAssertions",
    "Producer",
    "Subscriber",
    "Subscription",
    "Just",
    "Fail",
    "Never",
    "ThreadProducer",
    "CoroutineProducer",
    "LoopProducer",
    "FailureReporter",
    "RecordingReporter",
    "AssertionFailures",
    "OutcomeKind",
    "WaitOutcome",
]
