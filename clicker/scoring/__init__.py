"""Score recording and aggregation."""

from .aggregator import AggregateSnapshot, format_rate, rate, summarize
from .recorder import Recorder

__all__ = [
    'AggregateSnapshot',
    'Recorder',
    'format_rate',
    'rate',
    'summarize',
]
