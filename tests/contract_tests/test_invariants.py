"""
Property-Based Invariant Tests

Uses hypothesis to check timeline, aggregate and codec invariants
over generated click sequences.
"""

from hypothesis import given, strategies as st
from hypothesis.strategies import composite

from clicker.scoring.aggregator import rate, summarize
from clicker.temporal.timeline import Timeline
from clicker.transfer.codec import deserialize, serialize

from ..fixtures import make_session

# =============================================================================
# STRATEGIES (Generators)
# =============================================================================

click_times = st.floats(min_value=0, max_value=3600, allow_nan=False, allow_infinity=False)
signs = st.sampled_from([1, -1])


@composite
def click_sequences(draw):
    """Clicks in arbitrary time order, with repeated times likely."""
    pool = draw(st.lists(click_times, min_size=1, max_size=8))
    return draw(st.lists(st.tuples(st.sampled_from(pool), signs), max_size=40))


# =============================================================================
# PROPERTIES
# =============================================================================

@given(click_sequences())
def test_unique_ascending_times(clicks):
    timeline = Timeline()
    for t, sign in clicks:
        timeline.upsert(t, sign)

    ordered = [e.time for e in timeline.as_ordered_sequence()]
    assert ordered == sorted(set(t for t, _ in clicks))
    assert all(a < b for a, b in zip(ordered, ordered[1:]))


@given(click_sequences())
def test_deltas_equal_click_sums(clicks):
    timeline = Timeline()
    for t, sign in clicks:
        timeline.upsert(t, sign)

    for entry in timeline.as_ordered_sequence():
        assert entry.delta == sum(s for t, s in clicks if t == entry.time)


@given(click_sequences())
def test_summary_matches_deltas(clicks):
    timeline = Timeline()
    for t, sign in clicks:
        timeline.upsert(t, sign)
    snapshot = summarize(timeline.as_ordered_sequence())

    deltas = [e.delta for e in timeline.as_ordered_sequence()]
    assert snapshot.positive_sum == sum(d for d in deltas if d > 0)
    assert snapshot.negative_sum == sum(d for d in deltas if d < 0)
    assert snapshot.negative_sum <= 0
    assert snapshot.total_span >= 0


@given(st.integers(min_value=-1000, max_value=1000), st.floats(allow_nan=True))
def test_rate_is_always_finite(total, span):
    value = rate(total, span)
    assert value == value
    assert value not in (float("inf"), float("-inf"))


@given(click_sequences(), st.text(max_size=20))
def test_document_round_trip(clicks, judge):
    source = make_session()
    source.set_judge_name(judge)
    for t, sign in clicks:
        source.timeline.upsert(t, sign)

    target = make_session()
    deserialize(target, serialize(source))

    assert target.timeline.as_ordered_sequence() == source.timeline.as_ordered_sequence()
    assert target.metadata.video_id == source.metadata.video_id
    assert target.metadata.video_url == source.metadata.video_url
    assert target.metadata.judge_name == source.metadata.judge_name
