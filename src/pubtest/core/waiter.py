"""Single-shot waiter that blocks a synchronous caller on a producer.

The subscriber side never touches the caller's result directly.  Values go
into a lock-guarded :class:`CapturedValue`; the one terminal event goes
into an :class:`ExpectationToken`, a one-slot channel the caller receives
from with a deadline.  When the wait ends, for any reason, the subscriber
is released and the subscription cancelled, so callbacks arriving later
are no-ops.

Key behaviours:
* One waiter, one wait.  Reusing an instance raises ``WaiterReusedError``.
* Failures are handed to a :class:`FailureReporter` on the calling thread.
* Exactly one failure is reported on *failed* / *timed out*, none on
  completion (unless a value is required and none arrived).
"""

from __future__ import annotations

import itertools
import logging
import math
import queue
import threading
from dataclasses import dataclass
from typing import Any

from pubtest.core.errors import (
    MissingValueError,
    ProducerFailure,
    UnexpectedSuccess,
    WaiterReusedError,
    WaitTimeoutError,
)
from pubtest.core.models.failure import SourceLocation
from pubtest.core.models.outcome import OutcomeKind, WaiterState, WaitOutcome
from pubtest.core.producer import Producer, Subscriber, Subscription
from pubtest.core.reporting import FailureReporter
from pubtest.log_config import ContextualLogger

_log = logging.getLogger(__name__)

_ids = itertools.count(1)


# ---------------------------------------------------------------------------
# Shared cells
# ---------------------------------------------------------------------------

class CapturedValue:
    """Latest value emitted by the producer, if any."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._present = False
        self._value: Any = None

    def set(self, value: Any) -> None:
        with self._lock:
            self._value = value
            self._present = True

    def get(self) -> tuple[bool, Any]:
        """Return ``(present, value)``."""
        with self._lock:
            return self._present, self._value


@dataclass(frozen=True)
class Terminal:
    """The producer's terminal event; ``error`` is *None* for *finished*."""

    error: BaseException | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class ExpectationToken:
    """Once-only signal carrying the terminal event to the waiting thread."""

    def __init__(self) -> None:
        self._channel: queue.Queue[Terminal] = queue.Queue(maxsize=1)

    def signal(self, terminal: Terminal) -> bool:
        """Deliver *terminal*; a second signal is ignored and returns False."""
        try:
            self._channel.put_nowait(terminal)
        except queue.Full:
            _log.debug("Expectation token already signalled, ignoring %s", terminal)
            return False
        return True

    def wait(self, timeout: float) -> Terminal | None:
        """Block up to *timeout* seconds; *None* means the deadline passed."""
        try:
            return self._channel.get(timeout=timeout)
        except queue.Empty:
            return None


class _WaiterSubscriber(Subscriber):
    def __init__(self, token: ExpectationToken, captured: CapturedValue | None) -> None:
        self._token = token
        self._captured = captured
        self._lock = threading.Lock()
        self._released = False

    def on_value(self, value: Any) -> None:
        with self._lock:
            if self._released or self._captured is None:
                return
            self._captured.set(value)

    def on_finished(self) -> None:
        with self._lock:
            if not self._released:
                self._token.signal(Terminal())

    def on_failed(self, error: BaseException) -> None:
        with self._lock:
            if not self._released:
                self._token.signal(Terminal(error))

    def release(self) -> None:
        """After this returns no callback can touch the waiter's cells."""
        with self._lock:
            self._released = True


# ---------------------------------------------------------------------------
# AsyncResultWaiter
# ---------------------------------------------------------------------------

class AsyncResultWaiter:
    """Subscribes to one producer and waits for its terminal event.

    Args:
        reporter: Receives every failure this waiter detects.
        location: Call site attached to reported failures.
        require_value: Report a failure when the producer finishes without
            emitting anything.
    """

    def __init__(
        self,
        reporter: FailureReporter,
        location: SourceLocation | None = None,
        require_value: bool = False,
    ) -> None:
        self._reporter = reporter
        self._location = location
        self._require_value = require_value
        self._state = WaiterState.IDLE
        self._state_lock = threading.Lock()
        self._id = next(_ids)

    @property
    def state(self) -> WaiterState:
        return self._state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def wait_for_value(self, producer: Producer, timeout: float) -> WaitOutcome:
        """Wait for *producer* to finish and classify how it ended."""
        log = ContextualLogger(_log, op="wait_for_value", waiter=self._id, timeout=timeout)
        captured = CapturedValue()
        terminal = self._wait(producer, timeout, captured, log)

        if terminal is None:
            self._report(WaitTimeoutError(
                timeout,
                f"wait_for_value failed to get publisher result before timeout of {timeout} seconds",
            ))
            return WaitOutcome.timed_out()

        error = terminal.error
        if error is not None:
            self._report(ProducerFailure(error, f"Failed with {type(error).__name__}: {error}"))
            return WaitOutcome.failed(error)

        present, value = captured.get()
        if present:
            return WaitOutcome.completed(value)
        if self._require_value:
            self._report(MissingValueError("wait_for_value finished without receiving a value"))
        else:
            log.debug("Producer finished without emitting a value")
        return WaitOutcome.completed_no_value()

    def wait_for_failure(
        self,
        producer: Producer,
        timeout: float,
        unexpected_success_message: str = "",
    ) -> BaseException | None:
        """Wait for *producer* to fail and return its error.

        Values are discarded.  Finishing successfully or timing out is
        reported as a failure and returns *None*.
        """
        log = ContextualLogger(_log, op="wait_for_failure", waiter=self._id, timeout=timeout)
        terminal = self._wait(producer, timeout, None, log)

        if terminal is None:
            self._report(WaitTimeoutError(
                timeout, "wait_for_failure didn't get expected failure before timeout"
            ))
            return None
        if not terminal.failed:
            self._report(UnexpectedSuccess(
                "wait_for_failure unexpectedly succeeded. " + unexpected_success_message
            ))
            return None
        return terminal.error

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _wait(
        self,
        producer: Producer,
        timeout: float,
        captured: CapturedValue | None,
        log: ContextualLogger,
    ) -> Terminal | None:
        if not math.isfinite(timeout) or timeout <= 0:
            raise ValueError(f"timeout must be a positive finite number, got {timeout}")
        if timeout > threading.TIMEOUT_MAX:
            raise ValueError(f"timeout must not exceed {threading.TIMEOUT_MAX} seconds, got {timeout}")
        with self._state_lock:
            if self._state is not WaiterState.IDLE:
                raise WaiterReusedError(f"Waiter {self._id} already used (state={self._state.value})")
            self._state = WaiterState.SUBSCRIBED

        token = ExpectationToken()
        subscriber = _WaiterSubscriber(token, captured)
        subscription: Subscription | None = None
        terminal: Terminal | None = None
        try:
            subscription = producer.subscribe(subscriber)
            log.debug("Subscribed to %s", type(producer).__name__)
            terminal = token.wait(timeout)
        finally:
            subscriber.release()
            if subscription is not None:
                self._transition(_classify(terminal), log)
                subscription.cancel()
            self._transition(WaiterState.RELEASED, log)

        if terminal is None:
            log.warning("No terminal event before the deadline")
        return terminal

    def _transition(self, state: WaiterState, log: ContextualLogger) -> None:
        with self._state_lock:
            self._state = state
        log.debug("State → %s", state.value)

    def _report(self, error: AssertionError) -> None:
        self._reporter.report_failure(error, self._location)


def _classify(terminal: Terminal | None) -> WaiterState:
    if terminal is None:
        return WaiterState.TIMED_OUT
    return WaiterState.FAILED if terminal.failed else WaiterState.COMPLETED


def outcome_value(outcome: WaitOutcome) -> Any:
    """Value of a completed outcome, *None* for every other kind."""
    return outcome.value if outcome.kind is OutcomeKind.COMPLETED else None
