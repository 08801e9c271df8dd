"""
Click Recorder

Turns key presses (and on-screen +1/-1 buttons) into timeline mutations.

GATING (all must hold, otherwise a silent no-op):
1. Session is in SCORING mode
2. Transport is ready with a positive finite duration
3. Key matches a binding exactly (case-sensitive)
4. Transport reports a finite, non-negative position

Failures never escape: the recorder runs inside the host's input
loop, where an exception would abort the whole session.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional

from ..contracts.base import AppMode, TransportUnavailable
from ..temporal.timeline import TimelineEntry
from ..video import KeyInputSource, read_duration, read_position, transport_is_ready

if TYPE_CHECKING:
    from ..session import Session


logger = logging.getLogger("clicker.recorder")


class Recorder:
    """
    Records judge reactions into the session timeline.

    Sole mutator of the timeline while the session is scoring.
    """

    def __init__(self, session: Session):
        self._session = session
        self._source: Optional[KeyInputSource] = None

    @property
    def attached(self) -> bool:
        return self._source is not None

    def attach(self, source: KeyInputSource) -> None:
        """
        Register for key presses.

        Re-attaching detaches the previous registration first, so one
        physical key press is recorded once no matter how often the
        bindings change.
        """
        self.detach()
        source.add_listener(self.handle_key_press)
        self._source = source

    def detach(self) -> None:
        if self._source is None:
            return
        self._source.remove_listener(self.handle_key_press)
        self._source = None

    def handle_key_press(self, key: str) -> Optional[TimelineEntry]:
        """Record a click for a bound key. Returns the updated entry, if any."""
        if self._session.mode is not AppMode.SCORING:
            return None
        sign = self._session.metadata.bindings.sign_for(key)
        if sign is None:
            return None
        return self.add_click(sign)

    def add_click(self, sign: int) -> Optional[TimelineEntry]:
        """Record +1 or -1 at the current playback position."""
        session = self._session
        if session.mode is not AppMode.SCORING:
            return None

        transport = session.transport
        if not transport_is_ready(transport):
            logger.debug("Click ignored: transport not ready")
            return None

        try:
            read_duration(transport)
            position = read_position(transport)
        except TransportUnavailable as e:
            logger.warning("Click ignored: %s", e)
            return None

        entry = session.timeline.upsert(position, sign)
        logger.debug("Recorded %+d at %.3fs (delta now %d)", sign, entry.time, entry.delta)

        self.regain_focus()
        return entry

    def on_transport_event(self) -> None:
        """Player state changed (play, pause, seek...): keep focus while scoring."""
        if self._session.mode is AppMode.SCORING:
            self.regain_focus()

    def regain_focus(self) -> None:
        surface = self._session.focus_target
        if surface is None:
            return
        try:
            surface.regain_focus()
        except Exception as e:
            logger.warning("Failed to restore focus to recording surface: %r", e)
