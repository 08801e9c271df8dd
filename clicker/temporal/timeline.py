"""
Score Timeline
==============

Sorted time -> accumulated delta mapping of every judge reaction.

INVARIANTS:
- Each distinct time appears at most once
- Iteration always yields strictly ascending times
- Ordering is structural (binary-search insert), never insertion order
- A click at an existing time adds to the delta; a zero delta persists

This is the SOURCE OF TRUTH for all score state.
Aggregates and replay cursors are DERIVED from it, never stored.
"""

from __future__ import annotations
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple
import math


@dataclass(frozen=True)
class TimelineEntry:
    """One reaction moment: playback seconds and accumulated delta."""
    time: float
    delta: int

    def as_pair(self) -> Tuple[float, int]:
        return (self.time, self.delta)


def is_valid_time(value) -> bool:
    """True for finite, non-negative real numbers (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


class Timeline:
    """
    Sorted mapping of playback time to accumulated delta.

    Backed by two parallel lists kept in ascending time order.
    Mutated only by the recorder (upsert) and bulk import (replace).
    """

    def __init__(self, entries: Optional[Iterable[Tuple[float, int]]] = None):
        self._times: List[float] = []
        self._deltas: List[int] = []
        if entries is not None:
            self.replace(entries)

    def __len__(self) -> int:
        return len(self._times)

    def __bool__(self) -> bool:
        return bool(self._times)

    def __iter__(self) -> Iterator[TimelineEntry]:
        return iter(self.as_ordered_sequence())

    def __repr__(self) -> str:
        return f"Timeline(size={len(self._times)})"

    def upsert(self, time: float, sign: int) -> TimelineEntry:
        """
        Add sign (+1 or -1) to the entry at time, creating it if absent.

        New times are inserted at their sorted position.
        Returns the resulting entry.
        """
        if not is_valid_time(time):
            raise ValueError(f"Timeline time must be finite and >= 0, got {time!r}")
        if sign not in (1, -1):
            raise ValueError(f"Timeline sign must be +1 or -1, got {sign!r}")

        time = float(time)
        index = bisect_left(self._times, time)
        if index < len(self._times) and self._times[index] == time:
            self._deltas[index] += sign
        else:
            self._times.insert(index, time)
            self._deltas.insert(index, sign)

        return TimelineEntry(time=time, delta=self._deltas[index])

    def clear(self) -> None:
        self._times.clear()
        self._deltas.clear()

    def replace(self, entries: Iterable[Tuple[float, int]]) -> None:
        """
        Replace the whole mapping with already-merged entries.

        Callers must hand over strictly ascending, non-negative times.
        Anything else is a programming error upstream.
        """
        times: List[float] = []
        deltas: List[int] = []
        for time, delta in entries:
            assert is_valid_time(time), f"invalid time {time!r}"
            assert not times or time > times[-1], f"time {time!r} not strictly ascending"
            times.append(float(time))
            deltas.append(int(delta))

        self._times = times
        self._deltas = deltas

    def as_ordered_sequence(self) -> Tuple[TimelineEntry, ...]:
        """Ascending snapshot of all entries (read-only view)."""
        return tuple(
            TimelineEntry(time=t, delta=d)
            for t, d in zip(self._times, self._deltas)
        )

    def prefix(self, n: int) -> Tuple[TimelineEntry, ...]:
        """First n entries, n clamped to [0, size]."""
        n = max(0, min(int(n), len(self._times)))
        return tuple(
            TimelineEntry(time=t, delta=d)
            for t, d in zip(self._times[:n], self._deltas[:n])
        )

    def count_at_or_before(self, time: float) -> int:
        """Number of entries whose time is <= the given time."""
        return bisect_right(self._times, time)

    def first_time(self) -> Optional[float]:
        return self._times[0] if self._times else None

    def get(self, time: float) -> Optional[int]:
        """Delta recorded at exactly this time, if any."""
        index = bisect_left(self._times, time)
        if index < len(self._times) and self._times[index] == time:
            return self._deltas[index]
        return None

    def as_pairs(self) -> List[List[float]]:
        """Entries as [time, delta] lists, the document wire shape."""
        return [[t, d] for t, d in zip(self._times, self._deltas)]
