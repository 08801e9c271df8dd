"""
Score Document Contract

The portable, JSON-compatible form of a judging session.
One document per recording:

    {
      "videoId":   str,
      "videoUrl":  str,
      "judgeName": str,
      "hash":      str,                 # assigned on export
      "entries":   [[time, delta], ...] # ascending, unique times
    }
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


FIELD_VIDEO_ID = "videoId"
FIELD_VIDEO_URL = "videoUrl"
FIELD_JUDGE_NAME = "judgeName"
FIELD_HASH = "hash"
FIELD_ENTRIES = "entries"


@dataclass(frozen=True)
class ScoreDocument:
    """A validated document. Entries are strictly ascending by time."""
    video_id: str
    video_url: str
    judge_name: str
    entries: Tuple[Tuple[float, int], ...]
    share_hash: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            FIELD_VIDEO_ID: self.video_id,
            FIELD_VIDEO_URL: self.video_url,
            FIELD_JUDGE_NAME: self.judge_name,
            FIELD_ENTRIES: [[time, delta] for time, delta in self.entries],
        }
        if self.share_hash is not None:
            data[FIELD_HASH] = self.share_hash
        return data
