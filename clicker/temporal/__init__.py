"""
Temporal Layer
==============

Time-indexed score storage and replay.

INVARIANTS:
- The timeline is sorted by time, one entry per distinct time
- Replay reads the timeline, never writes it
- Same timeline + same transport positions = same cursor sequence

Modules:
- timeline: Sorted time -> delta mapping
- clock: Periodic tick schedulers with cancellation tokens
- replay: Idle/Running replay state machine
"""

from .timeline import Timeline, TimelineEntry
from .clock import AsyncioTickScheduler, ManualTickScheduler, TickHandle, TickScheduler
from .replay import Replayer, ReplaySettings, ReplayState

__all__ = [
    'Timeline',
    'TimelineEntry',
    'AsyncioTickScheduler',
    'ManualTickScheduler',
    'TickHandle',
    'TickScheduler',
    'Replayer',
    'ReplaySettings',
    'ReplayState',
]
