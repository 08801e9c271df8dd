"""
Tick Scheduler Tests

Deterministic manual ticks and real asyncio ticks with cancellation.
"""

import asyncio

import pytest

from clicker.temporal.clock import AsyncioTickScheduler, ManualTickScheduler, TickHandle


class TestTickHandle:

    def test_cancel_once(self):
        calls = []
        handle = TickHandle(on_cancel=calls.append)
        handle.cancel()
        handle.cancel()

        assert handle.cancelled
        assert calls == [handle]


class TestManualScheduler:

    def test_same_advances_same_ticks(self):
        def run():
            scheduler = ManualTickScheduler()
            scheduler.schedule_periodic(0.5, lambda: None)
            scheduler.advance(1.0)
            scheduler.advance(0.75)
            return scheduler.fired

        assert run() == run() == [0.5, 1.0, 1.5]

    def test_cancel_stops_ticks(self):
        ticks = []
        scheduler = ManualTickScheduler()
        handle = scheduler.schedule_periodic(1.0, lambda: ticks.append(scheduler.now))
        scheduler.advance(2.0)
        handle.cancel()
        scheduler.advance(5.0)

        assert ticks == [1.0, 2.0]
        assert scheduler.cancellations == 1

    def test_callback_cancelling_itself(self):
        scheduler = ManualTickScheduler()
        handles = []
        handles.append(scheduler.schedule_periodic(1.0, lambda: handles[0].cancel()))

        assert scheduler.advance(10.0) == 1

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ManualTickScheduler().schedule_periodic(0, lambda: None)


class TestAsyncioScheduler:

    def test_ticks_then_cancels(self):
        async def scenario():
            ticks = []
            scheduler = AsyncioTickScheduler()
            handle = scheduler.schedule_periodic(0.01, lambda: ticks.append(1))
            await asyncio.sleep(0.1)
            handle.cancel()
            count = len(ticks)
            await asyncio.sleep(0.05)
            return count, len(ticks)

        at_cancel, later = asyncio.run(scenario())

        assert at_cancel >= 2
        assert later == at_cancel

    def test_failing_callback_keeps_schedule(self):
        async def scenario():
            ticks = []

            def tick():
                ticks.append(1)
                if len(ticks) == 1:
                    raise RuntimeError("boom")

            loop = asyncio.get_running_loop()
            loop.set_exception_handler(lambda _loop, _ctx: None)
            handle = AsyncioTickScheduler(loop).schedule_periodic(0.01, tick)
            await asyncio.sleep(0.1)
            handle.cancel()
            return len(ticks)

        assert asyncio.run(scenario()) >= 2
