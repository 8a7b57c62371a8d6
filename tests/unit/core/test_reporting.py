"""Tests for failure reporters and call-site lookup."""

import logging
import threading

import pytest

from pubtest.core.errors import AssertionFieldMismatch, WaitTimeoutError
from pubtest.core.models.failure import Failure, SourceLocation
from pubtest.core.reporting import (
    LoggingReporter,
    RaisingReporter,
    RecordingReporter,
    caller_location,
)

HERE = SourceLocation(file="test_here.py", line=3)


class TestRecordingReporter:
    def test_records_in_order(self):
        reporter = RecordingReporter()
        first = AssertionFieldMismatch("a", 1, 2)
        second = WaitTimeoutError(1.0, "too slow")

        reporter.report_failure(first, HERE)
        reporter.report_failure(second)

        assert [f.error for f in reporter.failures] == [first, second]
        assert reporter.failures[0].location == HERE
        assert reporter.failures[1].location is None
        assert reporter.messages[1] == "too slow"
        assert reporter.errors_of(WaitTimeoutError) == [second]

    def test_clear(self):
        reporter = RecordingReporter()
        reporter.report_failure(AssertionError("x"))
        reporter.clear()
        assert len(reporter) == 0

    def test_thread_safe(self):
        reporter = RecordingReporter()

        def spam():
            for _ in range(100):
                reporter.report_failure(AssertionError("boom"))

        threads = [threading.Thread(target=spam) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(reporter) == 400


class TestFailureModel:
    def test_str_includes_location(self):
        failure = Failure(error=AssertionError("broken"), location=HERE)
        assert str(failure) == "test_here.py:3: broken"
        assert failure.message == "broken"

    def test_str_without_location(self):
        assert str(Failure(error=AssertionError("broken"))) == "broken"


class TestRaisingReporter:
    def test_raises_with_location_note(self):
        error = AssertionError("bad")
        with pytest.raises(AssertionError) as info:
            RaisingReporter().report_failure(error, HERE)
        assert info.value is error
        assert "at test_here.py:3" in info.value.__notes__


class TestLoggingReporter:
    def test_logs_and_forwards(self, caplog):
        inner = RecordingReporter()
        with caplog.at_level(logging.WARNING, logger="pubtest"):
            LoggingReporter(inner).report_failure(AssertionError("logged"), HERE)

        assert "test_here.py:3: logged" in caplog.text
        assert inner.messages == ["logged"]

    def test_without_inner(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pubtest"):
            LoggingReporter().report_failure(AssertionError("only logged"))
        assert "only logged" in caplog.text


class TestCallerLocation:
    def test_points_at_this_file(self):
        location = caller_location()
        assert location is not None
        assert location.file == __file__
        assert location.line > 0
