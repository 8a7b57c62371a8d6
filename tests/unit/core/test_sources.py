"""Tests for thread- and asyncio-backed producers."""

from __future__ import annotations

import asyncio
import threading

from pubtest.core.models.outcome import OutcomeKind
from pubtest.core.sources import CoroutineProducer, LoopProducer, ThreadProducer
from pubtest.core.waiter import AsyncResultWaiter
from tests.helpers.runtime import wait_for, wait_for_sync


class TestThreadProducer:
    def test_yields_last_value(self, recorder):
        def rows():
            yield from ("a", "b", "c")

        outcome = AsyncResultWaiter(recorder).wait_for_value(ThreadProducer(rows), timeout=2.0)

        assert outcome.kind is OutcomeKind.COMPLETED
        assert outcome.value == "c"

    def test_runs_off_the_calling_thread(self, recorder):
        def where():
            yield threading.current_thread().name

        outcome = AsyncResultWaiter(recorder).wait_for_value(ThreadProducer(where), timeout=2.0)
        assert outcome.value != threading.current_thread().name
        assert outcome.value.startswith("producer-where-")

    def test_arguments_forwarded(self, recorder):
        def count(n):
            yield from range(n)

        outcome = AsyncResultWaiter(recorder).wait_for_value(ThreadProducer(count, 4), timeout=2.0)
        assert outcome.value == 3

    def test_exception_fails_producer(self, recorder):
        def broken():
            yield 1
            raise KeyError("missing")

        outcome = AsyncResultWaiter(recorder).wait_for_value(ThreadProducer(broken), timeout=2.0)

        assert outcome.kind is OutcomeKind.FAILED
        assert isinstance(outcome.error, KeyError)
        assert len(recorder) == 1

    def test_cancel_wakes_stop_aware_producer(self, recorder):
        progress = []

        def slow(stop_event):
            yield 1
            stop_event.wait(10)
            progress.append("woke")
            yield 2

        outcome = AsyncResultWaiter(recorder).wait_for_value(
            ThreadProducer(slow, stop_aware=True), timeout=0.1
        )

        assert outcome.kind is OutcomeKind.TIMED_OUT
        wait_for_sync(lambda: progress == ["woke"], timeout=2.0)

    def test_generator_closed_on_cancel(self, recorder):
        closed = threading.Event()

        def endless(stop_event):
            try:
                while True:
                    stop_event.wait(0.01)
                    yield "tick"
            finally:
                closed.set()

        AsyncResultWaiter(recorder).wait_for_value(ThreadProducer(endless, stop_aware=True), timeout=0.1)
        assert closed.wait(2.0)


class TestCoroutineProducer:
    def test_coroutine_result_is_the_value(self, recorder):
        async def compute():
            await asyncio.sleep(0.01)
            return 42

        outcome = AsyncResultWaiter(recorder).wait_for_value(CoroutineProducer(compute), timeout=2.0)

        assert outcome.kind is OutcomeKind.COMPLETED
        assert outcome.value == 42
        assert len(recorder) == 0

    def test_async_generator_items(self, recorder):
        async def ticks():
            for i in range(3):
                await asyncio.sleep(0)
                yield i

        outcome = AsyncResultWaiter(recorder).wait_for_value(CoroutineProducer(ticks), timeout=2.0)
        assert outcome.value == 2

    def test_coroutine_error(self, recorder):
        async def broken():
            raise ConnectionError("refused")

        error = AsyncResultWaiter(recorder).wait_for_failure(CoroutineProducer(broken), timeout=2.0)

        assert isinstance(error, ConnectionError)
        assert len(recorder) == 0

    def test_bad_factory_fails_with_type_error(self, recorder):
        outcome = AsyncResultWaiter(recorder).wait_for_value(CoroutineProducer(lambda: 5), timeout=2.0)
        assert outcome.kind is OutcomeKind.FAILED
        assert isinstance(outcome.error, TypeError)

    def test_timeout_cancels_task(self, recorder):
        cancelled = threading.Event()

        async def forever():
            try:
                yield "first"
                await asyncio.sleep(60)
                yield "never"
            finally:
                cancelled.set()

        outcome = AsyncResultWaiter(recorder).wait_for_value(CoroutineProducer(forever), timeout=0.1)

        assert outcome.kind is OutcomeKind.TIMED_OUT
        assert cancelled.wait(2.0)


class TestLoopProducer:
    async def test_runs_on_callers_loop(self, recorder):
        loop = asyncio.get_running_loop()
        loop_thread = threading.get_ident()
        seen = []

        async def compute():
            seen.append(threading.get_ident())
            return "ready"

        outcome = await loop.run_in_executor(
            None,
            lambda: AsyncResultWaiter(recorder).wait_for_value(LoopProducer(loop, compute), 2.0),
        )

        assert outcome.value == "ready"
        assert seen == [loop_thread]

    async def test_timeout_cancels_scheduled_work(self, recorder):
        loop = asyncio.get_running_loop()
        cancelled = []

        async def stuck():
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        outcome = await loop.run_in_executor(
            None,
            lambda: AsyncResultWaiter(recorder).wait_for_value(LoopProducer(loop, stuck), 0.1),
        )

        assert outcome.kind is OutcomeKind.TIMED_OUT
        await wait_for(lambda: cancelled == [True], timeout=2.0)
