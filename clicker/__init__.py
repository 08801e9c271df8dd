"""
Judge Clicker

Time-indexed reaction timeline engine. A judge scores moments of a
video with +1/-1 key presses; the recording replays in sync with the
same video and travels as a portable JSON document.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Error codes, exceptions, modes, metadata, the document shape

2. TEMPORAL (temporal/)
   - Timeline: sorted time -> delta mapping
   - Clock: periodic tick schedulers with cancellation tokens
   - Replay: drives the cursor and the transport during playback

3. SCORING (scoring/)
   - Recorder: key presses -> timeline mutations, gated by mode
   - Aggregator: pure sums and rates over a timeline prefix

4. TRANSFER (transfer/)
   - Codec: serialize / validate / deserialize documents
   - Files and remote share stores

5. API (api/)
   - Share server for published recordings

CONSTRAINTS ENFORCED:
=====================
- Single active mutator: recorder while scoring, nobody while replaying
- Ascending time order is structural, not incidental
- Transport failures degrade to no-ops; import failures surface
"""

from .config import ClickerConfig
from .contracts import AppMode, KeyBindings, SessionMetadata
from .session import Session

__all__ = [
    'AppMode',
    'ClickerConfig',
    'KeyBindings',
    'Session',
    'SessionMetadata',
]
