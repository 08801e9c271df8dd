"""
Tick Scheduler for Replay
=========================

Injectable periodic clock that drives the replay loop.

GUARANTEES:
- Tick N+1 is armed only after tick N's body has returned (no overlap)
- Every schedule returns a TickHandle acting as a cancellation token
- A cancelled handle never fires again; callbacks must still check
  the token because a tick may already be in flight

MODES:
1. ASYNCIO: real timer on the host event loop
2. MANUAL: deterministic, advanced explicitly by the caller
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from typing import Callable, List, Optional


class TickHandle:
    """Cancellation token for one periodic schedule."""

    def __init__(self, on_cancel: Optional[Callable[['TickHandle'], None]] = None):
        self._cancelled = False
        self._on_cancel = on_cancel

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Cancel the schedule. Cancelling twice is a no-op."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel(self)


class TickScheduler:
    """
    Abstract periodic scheduler.

    Implementations run callback every interval seconds until the
    returned handle is cancelled.
    """

    def schedule_periodic(
        self,
        interval: float,
        callback: Callable[[], None]
    ) -> TickHandle:
        raise NotImplementedError


class AsyncioTickScheduler(TickScheduler):
    """
    Periodic ticks on an asyncio event loop.

    Uses call_later and re-arms after each callback, so a slow tick
    delays the next one instead of overlapping it.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule_periodic(
        self,
        interval: float,
        callback: Callable[[], None]
    ) -> TickHandle:
        loop = self._get_loop()
        timer: List[Optional[asyncio.TimerHandle]] = [None]

        def _cancel_timer(_handle: TickHandle) -> None:
            if timer[0] is not None:
                timer[0].cancel()
                timer[0] = None

        handle = TickHandle(on_cancel=_cancel_timer)

        def _fire() -> None:
            timer[0] = None
            if handle.cancelled:
                return
            try:
                callback()
            finally:
                if not handle.cancelled:
                    timer[0] = loop.call_later(interval, _fire)

        timer[0] = loop.call_later(interval, _fire)
        return handle


@dataclass
class ScheduledTick:
    """A periodic task registered with the manual scheduler."""
    handle: TickHandle
    interval: float
    callback: Callable[[], None]
    next_due: float


@dataclass
class ManualTickScheduler(TickScheduler):
    """
    Deterministic scheduler advanced explicitly.

    Same sequence of advance() calls = same sequence of ticks.
    Every fired tick time is logged for inspection.
    """
    now: float = 0.0
    scheduled: List[ScheduledTick] = field(default_factory=list)
    fired: List[float] = field(default_factory=list)
    cancellations: int = 0

    def schedule_periodic(
        self,
        interval: float,
        callback: Callable[[], None]
    ) -> TickHandle:
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")
        handle = TickHandle(on_cancel=self._record_cancel)
        self.scheduled.append(ScheduledTick(
            handle=handle,
            interval=interval,
            callback=callback,
            next_due=self.now + interval
        ))
        return handle

    def _record_cancel(self, handle: TickHandle) -> None:
        self.cancellations += 1
        self.scheduled = [s for s in self.scheduled if s.handle is not handle]

    def active(self) -> List[ScheduledTick]:
        return [s for s in self.scheduled if not s.handle.cancelled]

    def advance(self, seconds: float) -> int:
        """
        Move time forward, firing due ticks in time order.

        Returns the number of ticks fired.
        """
        target = self.now + seconds
        count = 0
        while True:
            due = [s for s in self.active() if s.next_due <= target]
            if not due:
                break
            task = min(due, key=lambda s: s.next_due)
            self.now = task.next_due
            task.callback()
            self.fired.append(self.now)
            count += 1
            task.next_due += task.interval
        self.now = target
        return count

    def tick(self, count: int = 1) -> int:
        """Fire the next count ticks of the earliest schedule."""
        fired = 0
        for _ in range(count):
            active = self.active()
            if not active:
                break
            task = min(active, key=lambda s: s.next_due)
            fired += self.advance(task.next_due - self.now)
        return fired
