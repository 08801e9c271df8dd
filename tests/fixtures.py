"""
Test Doubles

Scriptable collaborators for the engine:
- FakeTransport: a player whose position and failures are set by the test
- FakeKeySource: delivers key presses to registered listeners
- FakeFocus: counts focus restorations
"""

from __future__ import annotations
from typing import Callable, List, Optional

from clicker.config import ClickerConfig
from clicker.contracts.base import AppMode
from clicker.preferences import PreferenceStore
from clicker.session import Session
from clicker.temporal.clock import ManualTickScheduler
from clicker.video import FocusTarget, KeyInputSource, VideoTransport


class FakeTransport(VideoTransport):
    """Player double. Every call is recorded in .calls."""

    def __init__(
        self,
        position: Optional[float] = 0.0,
        duration: Optional[float] = 120.0,
        ready: bool = True,
        supports_seek: bool = True
    ):
        self.position = position
        self.duration = duration
        self.ready = ready
        self.supports_seek = supports_seek
        self.fail_position = False
        self.fail_seek = False
        self.fail_play = False
        self.calls: List[tuple] = []

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def is_ready(self) -> bool:
        return self.ready

    def get_current_time(self) -> Optional[float]:
        if self.fail_position:
            raise RuntimeError("player went away")
        return self.position

    def get_duration(self) -> Optional[float]:
        return self.duration

    def seek_to(self, seconds: float) -> None:
        self.calls.append(("seek_to", seconds))
        if self.fail_seek:
            raise RuntimeError("seek rejected")
        self.position = seconds

    def play(self) -> None:
        self.calls.append(("play",))
        if self.fail_play:
            raise RuntimeError("autoplay blocked")

    def pause(self) -> None:
        self.calls.append(("pause",))

    def load(self, video_url: str) -> None:
        self.calls.append(("load", video_url))


class FakeKeySource(KeyInputSource):
    def __init__(self):
        self.listeners: List[Callable[[str], None]] = []

    def add_listener(self, listener: Callable[[str], None]) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: Callable[[str], None]) -> None:
        self.listeners = [l for l in self.listeners if l != listener]

    def press(self, key: str) -> None:
        for listener in list(self.listeners):
            listener(key)


class FakeFocus(FocusTarget):
    def __init__(self):
        self.count = 0

    def regain_focus(self) -> None:
        self.count += 1


def make_session(
    transport: Optional[FakeTransport] = None,
    key_source: Optional[FakeKeySource] = None,
    focus: Optional[FakeFocus] = None,
    config: Optional[ClickerConfig] = None,
    preference_store: Optional[PreferenceStore] = None
) -> Session:
    """Session on a manual scheduler so ticks are driven by the test."""
    return Session(
        transport=transport or FakeTransport(),
        scheduler=ManualTickScheduler(),
        config=config or ClickerConfig(preferences_path="unused.json"),
        key_source=key_source,
        focus_target=focus,
        preference_store=preference_store
    )


def record(session: Session, *clicks) -> None:
    """Record (time, sign) clicks through the recorder."""
    assert session.mode is AppMode.SCORING
    for time, sign in clicks:
        session.transport.position = time
        session.recorder.add_click(sign)
