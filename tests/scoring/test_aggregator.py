"""
Aggregator Tests

Sums, span and rate over timeline prefixes. Rates never divide by zero.
"""

import math

import pytest

from clicker.scoring.aggregator import AggregateSnapshot, format_rate, rate, summarize
from clicker.temporal.timeline import Timeline, TimelineEntry


class TestSummarize:

    def test_empty(self):
        assert summarize([]) == AggregateSnapshot(0, 0, 0.0)

    def test_single_entry_has_zero_span(self):
        snapshot = summarize([TimelineEntry(12.0, 1)])

        assert snapshot.positive_sum == 1
        assert snapshot.total_span == 0.0

    def test_recorded_scenario(self):
        timeline = Timeline()
        timeline.upsert(2.0, 1)
        timeline.upsert(2.0, 1)
        timeline.upsert(7.5, -1)

        snapshot = summarize(timeline.as_ordered_sequence())

        assert snapshot.positive_sum == 2
        assert snapshot.negative_sum == -1
        assert snapshot.total_span == pytest.approx(5.5)
        assert snapshot.total == 1

    def test_zero_delta_counts_toward_span_only(self):
        snapshot = summarize([TimelineEntry(1.0, 0), TimelineEntry(3.0, 1)])

        assert (snapshot.positive_sum, snapshot.negative_sum) == (1, 0)
        assert snapshot.total_span == 2.0

    def test_prefix_view(self):
        timeline = Timeline([(1.0, 1), (2.0, -1), (6.0, 1)])

        assert summarize(timeline.prefix(2)) == AggregateSnapshot(1, -1, 1.0)
        assert summarize(timeline.as_ordered_sequence()) == AggregateSnapshot(2, -1, 5.0)


class TestRate:

    def test_zero_span_is_zero(self):
        assert rate(5, 0) == 0.0

    def test_negative_or_non_finite_span_is_zero(self):
        assert rate(5, -1) == 0.0
        assert rate(5, math.nan) == 0.0
        assert rate(5, math.inf) == 0.0

    def test_regular(self):
        assert rate(3, 6.0) == 0.5

    def test_snapshot_rates(self):
        negative, total, positive = AggregateSnapshot(4, -2, 4.0).rates()

        assert (negative, total, positive) == (-0.5, 0.5, 1.0)

    def test_empty_snapshot_rates_are_finite(self):
        assert AggregateSnapshot().rates() == (0.0, 0.0, 0.0)

    def test_format_rate(self):
        assert format_rate(1, 5.5) == "0.18/s"
        assert format_rate(1, 0) == "0.00/s"
