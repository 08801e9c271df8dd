"""
Video Transport Interface
=========================

Capability interfaces the engine depends on, instead of a concrete
player library:

- VideoTransport: position/duration queries, seek, play, pause, readiness
- FocusTarget: the recording surface that must keep keyboard focus
- KeyInputSource: where key presses come from

Every transport call is treated as fallible. The read helpers below
convert exceptions and unusable values into TransportUnavailable so
callers can degrade to a no-op.
"""

from __future__ import annotations
import math
from typing import Callable, Optional
from urllib.parse import parse_qs, urlparse

from .contracts.base import TransportUnavailable


YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
DEFAULT_VIDEO_ID = "Hnn_-y59a84"


# =============================================================================
# COLLABORATOR INTERFACES
# =============================================================================

class VideoTransport:
    """
    Abstract video transport.

    Implementations wrap a real player. Any method may raise or
    return None; the engine never trusts the answers blindly.
    """
    supports_seek: bool = True

    def is_ready(self) -> bool:
        raise NotImplementedError

    def get_current_time(self) -> Optional[float]:
        raise NotImplementedError

    def get_duration(self) -> Optional[float]:
        raise NotImplementedError

    def seek_to(self, seconds: float) -> None:
        raise NotImplementedError

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def load(self, video_url: str) -> None:
        """Load a new video. Readiness drops until the player reports ready."""
        raise NotImplementedError


class FocusTarget:
    """The surface that must own keyboard focus while scoring."""

    def regain_focus(self) -> None:
        raise NotImplementedError


class KeyInputSource:
    """Delivers key presses to registered listeners."""

    def add_listener(self, listener: Callable[[str], None]) -> None:
        raise NotImplementedError

    def remove_listener(self, listener: Callable[[str], None]) -> None:
        raise NotImplementedError


# =============================================================================
# FALLIBLE READS
# =============================================================================

def _usable_seconds(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def transport_is_ready(transport: Optional[VideoTransport]) -> bool:
    """Readiness that never raises."""
    if transport is None:
        return False
    try:
        return bool(transport.is_ready())
    except Exception:
        return False


def read_position(transport: VideoTransport) -> float:
    """Current playback seconds, or TransportUnavailable."""
    try:
        value = transport.get_current_time()
    except Exception as e:
        raise TransportUnavailable(
            "Transport failed to report position",
            context=(("cause", repr(e)),)
        ) from e
    if not _usable_seconds(value):
        raise TransportUnavailable(
            "Transport reported an unusable position",
            context=(("position", repr(value)),)
        )
    return float(value)


def read_duration(transport: VideoTransport) -> float:
    """Video duration in seconds, strictly positive, or TransportUnavailable."""
    try:
        value = transport.get_duration()
    except Exception as e:
        raise TransportUnavailable(
            "Transport failed to report duration",
            context=(("cause", repr(e)),)
        ) from e
    if not _usable_seconds(value) or value <= 0:
        raise TransportUnavailable(
            "Transport reported an unusable duration",
            context=(("duration", repr(value)),)
        )
    return float(value)


def transport_has_media(transport: Optional[VideoTransport]) -> bool:
    """Ready and reporting a positive finite duration."""
    if not transport_is_ready(transport):
        return False
    try:
        read_duration(transport)
    except TransportUnavailable:
        return False
    return True


# =============================================================================
# VIDEO REFERENCES
# =============================================================================

def youtube_video_id_to_url(video_id: str) -> str:
    """Canonical watch URL for a video identifier."""
    return YOUTUBE_WATCH_URL.format(video_id=video_id)


def parse_video_id(url: str) -> Optional[str]:
    """
    Extract a video identifier from a watch, short or embed URL.

    Returns None if the URL does not reference a video.
    """
    parsed = urlparse(url.strip())
    host = (parsed.hostname or "").lower()
    path = parsed.path.strip("/")

    if host == "youtu.be":
        return path.split("/")[0] or None

    if host.endswith("youtube.com") or host.endswith("youtube-nocookie.com"):
        if path == "watch":
            ids = parse_qs(parsed.query).get("v")
            return ids[0] if ids and ids[0] else None
        parts = path.split("/")
        if len(parts) >= 2 and parts[0] in ("embed", "shorts", "live", "v"):
            return parts[1] or None

    return None
