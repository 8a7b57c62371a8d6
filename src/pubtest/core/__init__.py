"""Core services: producers, waiter, comparator and failure reporting."""

from pubtest.core.comparator import NodeKind, StructuralComparator, classify, compare_sequences
from pubtest.core.producer import Emitter, Fail, Just, Never, Producer, Subscriber, Subscription
from pubtest.core.reporting import (
    FailureReporter,
    LoggingReporter,
    RaisingReporter,
    RecordingReporter,
    caller_location,
)
from pubtest.core.sources import CoroutineProducer, LoopProducer, ThreadProducer
from pubtest.core.waiter import AsyncResultWaiter, CapturedValue, ExpectationToken, Terminal

__all__ = [
    "AsyncResultWaiter",
    "CapturedValue",
    "ExpectationToken",
    "Terminal",
    "StructuralComparator",
    "NodeKind",
    "classify",
    "compare_sequences",
    "Producer",
    "Subscriber",
    "Subscription",
    "Emitter",
    "Just",
    "Fail",
    "Never",
    "ThreadProducer",
    "CoroutineProducer",
    "LoopProducer",
    "FailureReporter",
    "RecordingReporter",
    "RaisingReporter",
    "LoggingReporter",
    "caller_location",
]
