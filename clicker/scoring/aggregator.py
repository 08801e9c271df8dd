"""
Score Aggregation

Pure functions deriving running sums and rates from a timeline prefix.
Nothing here is stored; call again with a different prefix to get the
"as of now" or "as of replay cursor" view.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Tuple
import math

from ..temporal.timeline import TimelineEntry


@dataclass(frozen=True)
class AggregateSnapshot:
    """Sums over a sequence of entries. negative_sum is always <= 0."""
    positive_sum: int = 0
    negative_sum: int = 0
    total_span: float = 0.0

    @property
    def total(self) -> int:
        return self.positive_sum + self.negative_sum

    def rates(self) -> Tuple[float, float, float]:
        """(negative, total, positive) reactions per second."""
        return (
            rate(self.negative_sum, self.total_span),
            rate(self.total, self.total_span),
            rate(self.positive_sum, self.total_span),
        )


def summarize(entries: Iterable[TimelineEntry]) -> AggregateSnapshot:
    """
    Summarize an ascending sequence of entries.

    Span is max(time) - min(time); zero for empty or single-entry input.
    """
    positive = 0
    negative = 0
    first = None
    last = None

    for entry in entries:
        if entry.delta > 0:
            positive += entry.delta
        elif entry.delta < 0:
            negative += entry.delta
        if first is None or entry.time < first:
            first = entry.time
        if last is None or entry.time > last:
            last = entry.time

    span = (last - first) if first is not None else 0.0
    return AggregateSnapshot(
        positive_sum=positive,
        negative_sum=negative,
        total_span=float(span)
    )


def rate(total: float, span: float) -> float:
    """total / span, or 0 when span is not a positive finite number."""
    if not math.isfinite(span) or span <= 0:
        return 0.0
    value = total / span
    return value if math.isfinite(value) else 0.0


def format_rate(total: float, span: float) -> str:
    """Caption shown under a score, e.g. '0.36/s'."""
    return f"{rate(total, span):.2f}/s"
