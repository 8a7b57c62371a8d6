"""Producer / subscriber interfaces (ABCs) and the simple producers.

A producer emits zero or more values and then exactly one terminal event,
either *finished* or *failed*.  Nothing is emitted after the terminal
event.  Producers are cold: emission starts when :meth:`Producer.subscribe`
is called, and each subscription belongs to exactly one subscriber.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable

_log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------

class Subscriber(ABC):
    """Receives a producer's values and its terminal event.

    Callbacks may run on any thread.
    """

    @abstractmethod
    def on_value(self, value: Any) -> None:
        """Called once per emitted value, in emission order."""

    @abstractmethod
    def on_finished(self) -> None:
        """Called once when the producer completes successfully."""

    @abstractmethod
    def on_failed(self, error: BaseException) -> None:
        """Called once when the producer terminates with *error*."""


class Subscription:
    """The live link between one producer and one subscriber.

    :meth:`cancel` is idempotent.  *on_cancel* hooks let a producer stop
    its own work (set a stop event, cancel a task) when the subscriber
    goes away.
    """

    def __init__(self, on_cancel: Callable[[], None] | None = None) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._hooks: list[Callable[[], None]] = [on_cancel] if on_cancel else []

    @property
    def is_cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    def add_cancel_hook(self, hook: Callable[[], None]) -> None:
        """Run *hook* on cancel, or right away if already cancelled."""
        with self._lock:
            if not self._cancelled:
                self._hooks.append(hook)
                return
        hook()

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            hooks, self._hooks = self._hooks, []
        for hook in hooks:
            try:
                hook()
            except Exception:
                _log.exception("Cancel hook %s raised", hook)


class Producer(ABC):
    """Asynchronous, push-based value source."""

    @abstractmethod
    def subscribe(self, subscriber: Subscriber) -> Subscription:
        """Start emitting to *subscriber* and return the subscription."""


# ---------------------------------------------------------------------------
# Delivery helper
# ---------------------------------------------------------------------------

class Emitter:
    """Delivers events to a subscriber while honouring the producer contract.

    Events after the terminal event, or after the subscription was
    cancelled, are dropped.  A subscriber callback that raises is logged
    and cancels the subscription, like the event bus does with handlers.
    """

    def __init__(self, subscriber: Subscriber, subscription: Subscription) -> None:
        self._subscriber = subscriber
        self._subscription = subscription
        self._lock = threading.Lock()
        self._terminated = False

    @property
    def active(self) -> bool:
        with self._lock:
            return not self._terminated and not self._subscription.is_cancelled

    def value(self, value: Any) -> bool:
        """Deliver *value*; return ``False`` once delivery has stopped."""
        if not self.active:
            return False
        return self._deliver(self._subscriber.on_value, value)

    def finish(self) -> None:
        if self._close():
            self._deliver(self._subscriber.on_finished)

    def fail(self, error: BaseException) -> None:
        if self._close():
            self._deliver(self._subscriber.on_failed, error)

    def _close(self) -> bool:
        with self._lock:
            if self._terminated or self._subscription.is_cancelled:
                return False
            self._terminated = True
            return True

    def _deliver(self, callback: Callable[..., None], *args: Any) -> bool:
        try:
            callback(*args)
        except Exception:
            _log.exception("Subscriber callback %s raised, cancelling subscription", callback)
            self._subscription.cancel()
            return False
        return True


# ---------------------------------------------------------------------------
# Simple producers
# ---------------------------------------------------------------------------

class Just(Producer):
    """Emits *values* synchronously on subscribe, then finishes."""

    def __init__(self, *values: Any) -> None:
        self._values = values

    def subscribe(self, subscriber: Subscriber) -> Subscription:
        subscription = Subscription()
        emitter = Emitter(subscriber, subscription)
        for value in self._values:
            if not emitter.value(value):
                return subscription
        emitter.finish()
        return subscription


class Fail(Producer):
    """Emits *values* synchronously on subscribe, then fails with *error*."""

    def __init__(self, error: BaseException, *values: Any) -> None:
        self._error = error
        self._values = values

    def subscribe(self, subscriber: Subscriber) -> Subscription:
        subscription = Subscription()
        emitter = Emitter(subscriber, subscription)
        for value in self._values:
            if not emitter.value(value):
                return subscription
        emitter.fail(self._error)
        return subscription


class Never(Producer):
    """Never emits and never terminates."""

    def subscribe(self, subscriber: Subscriber) -> Subscription:
        return Subscription()
