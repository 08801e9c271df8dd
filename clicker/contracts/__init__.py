"""
Contracts shared by every layer.

Layers may import these types but never each other's internals.
"""

from .base import (
    AppMode,
    ClickerError,
    ErrorCode,
    KeyBindings,
    NotFound,
    RemoteStoreError,
    SessionMetadata,
    TransportUnavailable,
    ValidationError,
    DEFAULT_KEY_NEGATIVE,
    DEFAULT_KEY_POSITIVE,
    JUDGE_NAME_LIMIT,
)
from .document import ScoreDocument

__all__ = [
    'AppMode',
    'ClickerError',
    'ErrorCode',
    'KeyBindings',
    'NotFound',
    'RemoteStoreError',
    'ScoreDocument',
    'SessionMetadata',
    'TransportUnavailable',
    'ValidationError',
    'DEFAULT_KEY_NEGATIVE',
    'DEFAULT_KEY_POSITIVE',
    'JUDGE_NAME_LIMIT',
]
