"""
Replay Engine
=============

Plays a recorded timeline back against the video clock.

STATES:
- IDLE: no cursor, no tick scheduled
- RUNNING: cursor active, periodic tick scheduled

INVARIANTS:
- The timeline is only read, never mutated, during replay
- The cursor is recomputed from the transport position on every tick,
  so scrubbing backward rewinds the displayed score
- Stopping is idempotent: a second stop has no side effects
- A tick firing after cancellation is a no-op
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from ..contracts.base import AppMode, TransportUnavailable
from ..video import read_position, transport_has_media
from .clock import TickHandle, TickScheduler

if TYPE_CHECKING:
    from ..session import Session


logger = logging.getLogger("clicker.replay")

PREROLL_SECONDS = 5.0
TICK_INTERVAL_SECONDS = 0.1
MAX_CONSECUTIVE_TRANSPORT_ERRORS = 3


class ReplayState(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class ReplaySettings:
    """Timing constants for the replay loop."""
    tick_interval: float = TICK_INTERVAL_SECONDS
    preroll: float = PREROLL_SECONDS
    max_transport_errors: int = MAX_CONSECUTIVE_TRANSPORT_ERRORS


CursorSink = Callable[[Optional[int]], None]


class Replayer:
    """
    Drives the replay cursor and the video transport.

    GUARANTEES:
    ===========
    1. start() seeks, then plays, then schedules, strictly in that order;
       a failed seek is skipped, a failed play leaves replay idle
    2. The cursor never exceeds the timeline size
    3. Transport failures skip a tick; repeated failures stop replay
    4. stop() cancels the tick, pauses, and resets the cursor exactly once
    """

    def __init__(
        self,
        session: Session,
        scheduler: TickScheduler,
        settings: Optional[ReplaySettings] = None,
        on_cursor: Optional[CursorSink] = None
    ):
        self._session = session
        self._scheduler = scheduler
        self._settings = settings or ReplaySettings()
        self._on_cursor = on_cursor

        self._state = ReplayState.IDLE
        self._handle: Optional[TickHandle] = None
        self._cursor: Optional[int] = None
        self._consecutive_errors = 0

    @property
    def scheduler(self) -> TickScheduler:
        return self._scheduler

    @property
    def state(self) -> ReplayState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is ReplayState.RUNNING

    @property
    def cursor(self) -> Optional[int]:
        """Entries consumed so far, or None when not replaying."""
        return self._cursor

    def can_start(self) -> bool:
        session = self._session
        return (
            session.mode is AppMode.PLAYBACK
            and bool(session.timeline)
            and transport_has_media(session.transport)
        )

    def start(self) -> bool:
        """
        Begin replay from a short pre-roll before the first reaction.

        Returns True if replay is running afterwards.
        """
        if self.running:
            return True
        if not self.can_start():
            logger.debug("Replay not started: session not ready for playback")
            return False

        transport = self._session.transport
        first_time = self._session.timeline.first_time()
        start_at = max(first_time - self._settings.preroll, 0.0)

        if getattr(transport, "supports_seek", False):
            try:
                transport.seek_to(start_at)
            except Exception as e:
                # Play from wherever the video is.
                logger.warning("Pre-roll seek failed, playing without it (%r)", e)

        try:
            transport.play()
        except Exception as e:
            logger.warning("Replay not started: transport failed (%r)", e)
            return False

        self._state = ReplayState.RUNNING
        self._consecutive_errors = 0
        self._cursor = 0
        self._handle = self._scheduler.schedule_periodic(
            self._settings.tick_interval,
            self._tick
        )
        logger.info(
            "Replay started at %.2fs over %d entries",
            start_at, len(self._session.timeline)
        )
        self._emit(self._cursor)
        return True

    def stop(self) -> None:
        """Return to IDLE. No-op if already idle."""
        if self._state is ReplayState.IDLE:
            return

        self._state = ReplayState.IDLE
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()

        try:
            self._session.transport.pause()
        except Exception as e:
            logger.warning("Transport failed to pause while stopping replay: %r", e)

        self._cursor = None
        self._consecutive_errors = 0
        logger.info("Replay stopped")
        self._emit(None)

    def _tick(self) -> None:
        handle = self._handle
        if self._state is not ReplayState.RUNNING or handle is None or handle.cancelled:
            return

        session = self._session
        if (
            session.mode is not AppMode.PLAYBACK
            or not session.timeline
            or not transport_has_media(session.transport)
        ):
            self.stop()
            return

        try:
            position = read_position(session.transport)
        except TransportUnavailable as e:
            self._consecutive_errors += 1
            logger.warning(
                "Replay tick skipped (%d/%d): %s",
                self._consecutive_errors, self._settings.max_transport_errors, e
            )
            if self._consecutive_errors >= self._settings.max_transport_errors:
                logger.warning("Stopping replay after repeated transport failures")
                self.stop()
            return

        self._consecutive_errors = 0
        self._cursor = session.timeline.count_at_or_before(position)
        self._emit(self._cursor)

    def _emit(self, cursor: Optional[int]) -> None:
        if self._on_cursor is None:
            return
        try:
            self._on_cursor(cursor)
        except Exception as e:
            logger.warning("Cursor listener failed: %r", e)
