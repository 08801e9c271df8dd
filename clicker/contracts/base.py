"""
Base Contracts and Shared Types

Foundational types used by every layer of the clicker engine.
Error codes, exceptions, session modes and session metadata live here
so that the timeline, scoring and transfer layers depend only on
contracts, never on each other's implementations.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional, Tuple


DEFAULT_KEY_POSITIVE = "a"
DEFAULT_KEY_NEGATIVE = "s"
JUDGE_NAME_LIMIT = 64


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes.
    Every failure surfaced to a caller carries one of these.
    """
    # Transfer errors
    MALFORMED_DOCUMENT = auto()
    SHARE_NOT_FOUND = auto()
    REMOTE_UNREACHABLE = auto()

    # Transport errors
    TRANSPORT_UNAVAILABLE = auto()


class ClickerError(Exception):
    """
    Base exception carrying an error code and diagnostic context.

    Context is a tuple of (key, value) pairs so it can be logged
    or shown to the user verbatim.
    """
    code = ErrorCode.MALFORMED_DOCUMENT

    def __init__(self, message: str, context: Tuple[Tuple[str, str], ...] = ()):
        super().__init__(message)
        self.message = message
        self.context = context

    def with_context(self, key: str, value: str) -> 'ClickerError':
        """Attach another (key, value) pair and return self."""
        self.context = self.context + ((key, value),)
        return self

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in self.context)
        return f"{self.message} ({details})"


class ValidationError(ClickerError):
    """Document is malformed or out of contract. Session state is untouched."""
    code = ErrorCode.MALFORMED_DOCUMENT


class NotFound(ClickerError):
    """Remote lookup returned no matching document."""
    code = ErrorCode.SHARE_NOT_FOUND


class RemoteStoreError(ClickerError):
    """Remote share store could not be reached or answered badly."""
    code = ErrorCode.REMOTE_UNREACHABLE


class TransportUnavailable(ClickerError):
    """Video transport is not ready or raised while being queried."""
    code = ErrorCode.TRANSPORT_UNAVAILABLE


# =============================================================================
# SESSION TYPES
# =============================================================================

class AppMode(Enum):
    """Session mode. Exactly one mode owns the timeline at a time."""
    SCORING = "scoring"
    PLAYBACK = "playback"


@dataclass(frozen=True)
class KeyBindings:
    """Positive/negative key strings, matched case-sensitively."""
    positive: str = DEFAULT_KEY_POSITIVE
    negative: str = DEFAULT_KEY_NEGATIVE

    def __post_init__(self):
        for name in ("positive", "negative"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"{name} key binding must be a non-empty string")
        if self.positive == self.negative:
            raise ValueError("positive and negative key bindings must differ")

    def sign_for(self, key: str) -> Optional[int]:
        """Return +1, -1 or None for a pressed key."""
        if key == self.positive:
            return 1
        if key == self.negative:
            return -1
        return None


@dataclass(frozen=True)
class SessionMetadata:
    """
    Everything about a session except the timeline itself.

    Independent lifecycle from the timeline: a reset clears the
    timeline and leaves this untouched.
    """
    video_id: str
    video_url: str
    judge_name: str = ""
    bindings: KeyBindings = field(default_factory=KeyBindings)
    share_hash: Optional[str] = None

    def with_video(self, video_id: str, video_url: str) -> SessionMetadata:
        return replace(self, video_id=video_id, video_url=video_url)

    def with_judge(self, judge_name: str) -> SessionMetadata:
        return replace(self, judge_name=judge_name)

    def with_bindings(self, bindings: KeyBindings) -> SessionMetadata:
        return replace(self, bindings=bindings)

    def with_share_hash(self, share_hash: Optional[str]) -> SessionMetadata:
        return replace(self, share_hash=share_hash)
