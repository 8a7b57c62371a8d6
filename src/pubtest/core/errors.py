"""Failure taxonomy.

Every assertion and wait failure is an :class:`AssertionError` subclass
carrying the structured details it was built from, so reporters and tests
can inspect them without parsing messages.  They are handed to a
:class:`~pubtest.core.reporting.FailureReporter` rather than raised across
the producer's thread boundary.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence


# ---------------------------------------------------------------------------
# Structural comparator
# ---------------------------------------------------------------------------

class AssertionKeySetMismatch(AssertionError):
    """The two mappings at *path* do not have the same keys."""

    def __init__(self, missing: Iterable[str], extra: Iterable[str], path: str = "") -> None:
        self.missing = sorted(missing)
        self.extra = sorted(extra)
        self.path = path
        where = f" at '{path}'" if path else ""
        super().__init__(
            f"Fields in item don't match reference{where}: "
            f"missing {self.missing}, extra {self.extra}"
        )


class AssertionFieldMismatch(AssertionError):
    """Two comparable leaf values differ."""

    def __init__(self, field: str, actual: Any, expected: Any, path: str = "") -> None:
        self.field = field
        self.actual = actual
        self.expected = expected
        self.path = path or field
        super().__init__(
            f"Item's field '{field}' has value '{actual}', "
            f"but reference '{field}' has '{expected}'"
        )


class AssertionUnsupportedPair(AssertionError):
    """The values at *field* are of different or unsupported kinds."""

    def __init__(self, field: str, actual: Any, expected: Any, path: str = "") -> None:
        self.field = field
        self.actual = actual
        self.expected = expected
        self.path = path or field
        super().__init__(f"Could not compare {actual!r} and {expected!r}")


# ---------------------------------------------------------------------------
# Sequence comparison
# ---------------------------------------------------------------------------

class AssertionCountMismatch(AssertionError):
    def __init__(self, actual_count: int, expected_count: int) -> None:
        self.actual_count = actual_count
        self.expected_count = expected_count
        super().__init__(
            f"Arrays do not match: {actual_count} element(s) != {expected_count} element(s)"
        )


class AssertionSequenceMismatch(AssertionError):
    def __init__(self, index: int, first: Any, second: Any) -> None:
        self.index = index
        self.first = first
        self.second = second
        super().__init__(f"Arrays do not match: [{index}] {first!r} != {second!r}")


# ---------------------------------------------------------------------------
# Waiter
# ---------------------------------------------------------------------------

class WaitTimeoutError(AssertionError):
    """The producer did not reach a terminal event before the deadline."""

    def __init__(self, timeout_seconds: float, message: str) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(message)


class ProducerFailure(AssertionError):
    """The producer failed while a value was expected."""

    def __init__(self, wrapped_error: BaseException, message: str) -> None:
        self.wrapped_error = wrapped_error
        super().__init__(message)


class UnexpectedSuccess(AssertionError):
    """The producer finished while a failure was expected."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class MissingValueError(AssertionError):
    """The producer finished without emitting any value."""


class AssertionFailures(AssertionError):
    """Several failures raised together at the end of one helper call."""

    def __init__(self, failures: Sequence[Any]) -> None:
        self.failures = list(failures)
        lines = [str(f) for f in self.failures]
        if len(lines) == 1:
            super().__init__(lines[0])
        else:
            super().__init__(
                f"{len(lines)} failures:\n" + "\n".join(f"  - {line}" for line in lines)
            )


class WaiterReusedError(RuntimeError):
    """An :class:`~pubtest.core.waiter.AsyncResultWaiter` was used twice."""
