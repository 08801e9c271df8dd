"""
Judging Session
===============

Explicit session context shared by the recorder, the replayer and the
transfer codec. Owns the mode, the timeline and the session metadata;
no component reaches for ambient globals.

MODE DISCIPLINE:
================
- SCORING: the recorder is the sole timeline mutator
- PLAYBACK: the replayer reads the timeline, nobody mutates it
- A mode switch fully quiesces the previous mode (detach key listener,
  cancel tick, pause) before the next mode's side effects begin
"""

from __future__ import annotations
import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .config import ClickerConfig
from .contracts.base import AppMode, KeyBindings, SessionMetadata
from .contracts.document import ScoreDocument
from .preferences import PreferenceStore, Preferences
from .scoring.aggregator import AggregateSnapshot, summarize
from .scoring.recorder import Recorder
from .temporal.clock import TickScheduler
from .temporal.replay import Replayer
from .temporal.timeline import Timeline, TimelineEntry
from .video import (
    DEFAULT_VIDEO_ID,
    FocusTarget,
    KeyInputSource,
    VideoTransport,
    youtube_video_id_to_url,
)


logger = logging.getLogger("clicker.session")

CursorListener = Callable[[Optional[int]], None]


def default_metadata() -> SessionMetadata:
    return SessionMetadata(
        video_id=DEFAULT_VIDEO_ID,
        video_url=youtube_video_id_to_url(DEFAULT_VIDEO_ID)
    )


class Session:
    """
    One judge scoring (or replaying) one video.

    Collaborators are injected: the video transport, the tick scheduler,
    and optionally the key input source and the focus target.
    With a preference store, the saved key bindings and judge name are
    applied at construction.
    """

    def __init__(
        self,
        transport: VideoTransport,
        scheduler: TickScheduler,
        config: Optional[ClickerConfig] = None,
        metadata: Optional[SessionMetadata] = None,
        key_source: Optional[KeyInputSource] = None,
        focus_target: Optional[FocusTarget] = None,
        preference_store: Optional[PreferenceStore] = None,
    ):
        self.config = config or ClickerConfig()
        self.transport = transport
        self.focus_target = focus_target
        self.timeline = Timeline()
        self._metadata = metadata or default_metadata()
        self._mode = AppMode.SCORING
        self._key_source = key_source
        self._cursor_listeners: List[CursorListener] = []
        self.preference_store = preference_store

        self.recorder = Recorder(self)
        self.replayer = Replayer(
            self,
            scheduler,
            settings=self.config.replay,
            on_cursor=self._publish_cursor
        )

        if preference_store is not None:
            self.apply_preferences(preference_store.load())

        if self._key_source is not None:
            self.recorder.attach(self._key_source)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def mode(self) -> AppMode:
        return self._mode

    @property
    def metadata(self) -> SessionMetadata:
        return self._metadata

    @property
    def replay_cursor(self) -> Optional[int]:
        return self.replayer.cursor

    def add_cursor_listener(self, listener: CursorListener) -> None:
        self._cursor_listeners.append(listener)

    def _publish_cursor(self, cursor: Optional[int]) -> None:
        for listener in list(self._cursor_listeners):
            listener(cursor)

    # =========================================================================
    # MODE SWITCHING
    # =========================================================================

    def set_mode(self, mode: AppMode) -> None:
        if mode is self._mode:
            return

        self._quiesce()
        logger.info("Session mode %s -> %s", self._mode.value, mode.value)
        self._mode = mode

        if mode is AppMode.SCORING:
            if self._key_source is not None:
                self.recorder.attach(self._key_source)
        else:
            self.replayer.start()

    def toggle_mode(self) -> AppMode:
        if self._mode is AppMode.SCORING:
            self.set_mode(AppMode.PLAYBACK)
        else:
            self.set_mode(AppMode.SCORING)
        return self._mode

    def _quiesce(self) -> None:
        self.recorder.detach()
        self.replayer.stop()

    def close(self) -> None:
        """Tear down all side effects (navigating away)."""
        self._quiesce()

    # =========================================================================
    # SESSION EDITS
    # =========================================================================

    def reset(self) -> None:
        """Clear the timeline. Metadata survives."""
        self.replayer.stop()
        self.timeline.clear()
        logger.info("Timeline reset")

    def set_bindings(self, bindings: KeyBindings) -> None:
        self._metadata = self._metadata.with_bindings(bindings)
        if self._mode is AppMode.SCORING and self._key_source is not None:
            self.recorder.attach(self._key_source)

    def set_judge_name(self, judge_name: str) -> None:
        self._metadata = self._metadata.with_judge(judge_name[:self.config.judge_name_limit])

    def apply_preferences(self, preferences: Preferences) -> None:
        self.set_bindings(preferences.bindings)
        self.set_judge_name(preferences.judge_name)

    def save_preferences(self) -> None:
        """Persist the current key bindings and judge name."""
        if self.preference_store is None:
            return
        metadata = self._metadata
        self.preference_store.save(Preferences(
            key_positive=metadata.bindings.positive,
            key_negative=metadata.bindings.negative,
            judge_name=metadata.judge_name
        ))

    def set_share_hash(self, share_hash: Optional[str]) -> None:
        self._metadata = self._metadata.with_share_hash(share_hash)

    def load_video(self, video_id: str, video_url: Optional[str] = None) -> None:
        """Point the session at another video and ask the transport to load it."""
        self.replayer.stop()
        url = video_url or youtube_video_id_to_url(video_id)
        self._metadata = self._metadata.with_video(video_id, url)
        self._load_transport(url)

    def replace_recording(self, document: ScoreDocument) -> None:
        """
        Swap in an imported recording wholesale.

        Replaces the timeline, the video reference, the judge name and
        the share hash; key bindings stay with the local judge.
        """
        self.replayer.stop()
        self.timeline.replace(document.entries)
        self._metadata = SessionMetadata(
            video_id=document.video_id,
            video_url=document.video_url,
            judge_name=document.judge_name,
            bindings=self._metadata.bindings,
            share_hash=document.share_hash
        )
        logger.info(
            "Loaded recording of %s with %d entries",
            document.video_id, len(self.timeline)
        )
        self._load_transport(document.video_url)

    def _load_transport(self, url: str) -> None:
        try:
            self.transport.load(url)
        except Exception as e:
            logger.warning("Transport failed to load %s: %r", url, e)

    # =========================================================================
    # TRANSPORT CALLBACKS
    # =========================================================================

    def on_transport_event(self) -> None:
        """Player reported play, pause, seek, buffering and the like."""
        self.recorder.on_transport_event()

    def on_transport_ready(self) -> None:
        """Player finished loading; a waiting playback session starts replay."""
        self.recorder.on_transport_event()
        if self._mode is AppMode.PLAYBACK and not self.replayer.running:
            self.replayer.start()

    # =========================================================================
    # DISPLAY
    # =========================================================================

    def display_entries(self) -> Tuple[TimelineEntry, ...]:
        """Entries to display: the replayed prefix during playback, else all."""
        cursor = self.replayer.cursor
        if (
            self._mode is AppMode.PLAYBACK
            and cursor is not None
            and 0 <= cursor < len(self.timeline)
        ):
            return self.timeline.prefix(cursor)
        return self.timeline.as_ordered_sequence()

    def display_snapshot(self) -> AggregateSnapshot:
        return summarize(self.display_entries())

    def live_snapshot(self) -> AggregateSnapshot:
        return summarize(self.timeline.as_ordered_sequence())

    def entries(self) -> Iterable[TimelineEntry]:
        return self.timeline.as_ordered_sequence()
