"""Failure reporting capability.

The waiter and the comparators never talk to a test framework directly.
They hand every failure to a :class:`FailureReporter`, which a host adapts
to its own failure recording (the pytest plugin uses a
:class:`RecordingReporter` and fails the test at teardown).
"""

from __future__ import annotations

import logging
import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from types import FrameType

from pubtest.core.models.failure import Failure, SourceLocation

_log = logging.getLogger(__name__)

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


# ---------------------------------------------------------------------------
# Reporter interface
# ---------------------------------------------------------------------------

class FailureReporter(ABC):
    """Receives failures, each with the call site they belong to."""

    @abstractmethod
    def report_failure(self, error: AssertionError, location: SourceLocation | None = None) -> None:
        """Record *error* as a test failure at *location*."""


class RecordingReporter(FailureReporter):
    """Thread-safe reporter that keeps every failure in order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._failures: list[Failure] = []

    def report_failure(self, error: AssertionError, location: SourceLocation | None = None) -> None:
        with self._lock:
            self._failures.append(Failure(error=error, location=location))

    @property
    def failures(self) -> list[Failure]:
        with self._lock:
            return list(self._failures)

    @property
    def messages(self) -> list[str]:
        return [f.message for f in self.failures]

    def errors_of(self, error_type: type[AssertionError]) -> list[AssertionError]:
        """Return recorded errors that are instances of *error_type*."""
        return [f.error for f in self.failures if isinstance(f.error, error_type)]

    def clear(self) -> None:
        with self._lock:
            self._failures.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._failures)


class RaisingReporter(FailureReporter):
    """Raises each failure immediately on the reporting thread."""

    def report_failure(self, error: AssertionError, location: SourceLocation | None = None) -> None:
        if location is not None:
            error.add_note(f"at {location}")
        raise error


class LoggingReporter(FailureReporter):
    """Logs each failure, then forwards it to *inner* (if any)."""

    def __init__(self, inner: FailureReporter | None = None, logger: logging.Logger | None = None) -> None:
        self._inner = inner
        self._logger = logger or _log

    def report_failure(self, error: AssertionError, location: SourceLocation | None = None) -> None:
        self._logger.warning("%s%s", f"{location}: " if location else "", error)
        if self._inner is not None:
            self._inner.report_failure(error, location)


# ---------------------------------------------------------------------------
# Call-site lookup
# ---------------------------------------------------------------------------

def _is_internal(frame: FrameType) -> bool:
    try:
        return Path(frame.f_code.co_filename).resolve().is_relative_to(_PACKAGE_DIR)
    except (OSError, ValueError):
        return False


def caller_location(skip: int = 1) -> SourceLocation | None:
    """Return the first frame outside the ``pubtest`` package.

    *skip* frames (this function's caller by default) are passed over
    before the search starts.
    """
    frame: FrameType | None = sys._getframe(skip)
    while frame is not None and _is_internal(frame):
        frame = frame.f_back
    if frame is None:
        return None
    return SourceLocation(file=frame.f_code.co_filename, line=frame.f_lineno)
