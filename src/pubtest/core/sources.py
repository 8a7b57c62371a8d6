"""Producers backed by worker threads and asyncio event loops.

* :class:`ThreadProducer` runs a generator function in a daemon thread.
* :class:`CoroutineProducer` runs a coroutine or async generator on a
  private event loop in a daemon thread.
* :class:`LoopProducer` schedules the same work on an event loop the caller
  already runs (e.g. one owned by an application under test).

Cancelling the subscription stops emission at the next value.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Iterable

from pubtest.core.producer import Emitter, Producer, Subscriber, Subscription

_log = logging.getLogger(__name__)

_ids = itertools.count(1)


# ---------------------------------------------------------------------------
# Threads
# ---------------------------------------------------------------------------

class ThreadProducer(Producer):
    """Emits each item yielded by *func* from a daemon thread.

    *func* returns an iterable (typically it is a generator function).
    Returning normally finishes the producer; raising fails it.

    Args:
        func: Called as ``func(*args)``, or ``func(stop_event, *args)`` when
            *stop_aware* is true so long waits can use ``stop_event.wait()``.
        stop_aware: Pass the subscription's stop event as first argument.
    """

    def __init__(self, func: Callable[..., Iterable[Any]], *args: Any, stop_aware: bool = False) -> None:
        self._func = func
        self._args = args
        self._stop_aware = stop_aware

    def subscribe(self, subscriber: Subscriber) -> Subscription:
        stop_event = threading.Event()
        subscription = Subscription(on_cancel=stop_event.set)
        emitter = Emitter(subscriber, subscription)
        thread = threading.Thread(
            target=self._run,
            args=(emitter, stop_event),
            name=f"producer-{getattr(self._func, '__name__', 'func')}-{next(_ids)}",
            daemon=True,
        )
        thread.start()
        return subscription

    def _run(self, emitter: Emitter, stop_event: threading.Event) -> None:
        """Thread target: iterate *func* and forward every item."""
        args = (stop_event, *self._args) if self._stop_aware else self._args
        iterator = None
        try:
            iterator = iter(self._func(*args))
            for item in iterator:
                if stop_event.is_set() or not emitter.value(item):
                    _log.debug("Thread producer stopped before its terminal event")
                    return
        except Exception as exc:
            emitter.fail(exc)
            return
        finally:
            close = getattr(iterator, "close", None)
            if close is not None:
                close()
        emitter.finish()


# ---------------------------------------------------------------------------
# asyncio
# ---------------------------------------------------------------------------

async def _drive(factory: Callable[[], Any], emitter: Emitter) -> None:
    """Await a coroutine (one value) or iterate an async iterable (many)."""
    try:
        source = factory()
        if inspect.isawaitable(source):
            result = await source
            if not emitter.value(result):
                return
        elif hasattr(source, "__aiter__"):
            try:
                async for item in source:
                    if not emitter.value(item):
                        return
            finally:
                aclose = getattr(source, "aclose", None)
                if aclose is not None:
                    await aclose()
        else:
            raise TypeError(
                f"Producer factory must return an awaitable or async iterable, got {type(source).__name__}"
            )
    except Exception as exc:
        emitter.fail(exc)
        return
    emitter.finish()


class CoroutineProducer(Producer):
    """Runs ``factory()`` on a private event loop in a daemon thread.

    ``factory`` returns either a coroutine, whose result is emitted as the
    single value, or an async iterable, whose items are emitted in order.
    """

    def __init__(self, factory: Callable[[], Any]) -> None:
        self._factory = factory

    def subscribe(self, subscriber: Subscriber) -> Subscription:
        subscription = Subscription()
        emitter = Emitter(subscriber, subscription)
        thread = threading.Thread(
            target=self._run,
            args=(emitter, subscription),
            name=f"producer-loop-{next(_ids)}",
            daemon=True,
        )
        thread.start()
        return subscription

    def _run(self, emitter: Emitter, subscription: Subscription) -> None:
        loop = asyncio.new_event_loop()
        try:
            task = loop.create_task(_drive(self._factory, emitter))
            subscription.add_cancel_hook(lambda: _cancel_soon(loop, task))
            loop.run_until_complete(task)
        except asyncio.CancelledError:
            _log.debug("Coroutine producer cancelled")
        finally:
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()


def _cancel_soon(loop: asyncio.AbstractEventLoop, task: asyncio.Task[None]) -> None:
    try:
        loop.call_soon_threadsafe(task.cancel)
    except RuntimeError:
        # Loop already closed: the task has finished.
        pass


class LoopProducer(Producer):
    """Schedules ``factory()`` on an already running *loop*.

    Subscribing from the loop's own thread and then blocking on the result
    deadlocks; hand the blocking wait to an executor thread instead.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, factory: Callable[[], Any]) -> None:
        self._loop = loop
        self._factory = factory

    def subscribe(self, subscriber: Subscriber) -> Subscription:
        subscription = Subscription()
        emitter = Emitter(subscriber, subscription)
        future: Future[None] = asyncio.run_coroutine_threadsafe(
            _drive(self._factory, emitter), self._loop
        )
        subscription.add_cancel_hook(future.cancel)
        return subscription
