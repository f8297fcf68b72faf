"""Property-based checks of aggregation, chains, timings and lane packing."""

from __future__ import annotations

from collections import Counter

import pytest

pytest.importorskip("hypothesis")
from hypothesis import given, settings
from hypothesis import strategies as st

from item_timeline.core.aggregation import aggregate_phases
from item_timeline.core.chains import infer_chains
from item_timeline.core.layout import LayoutSettings, layout_timeline
from item_timeline.core.phases import PHASE_SEQUENCE
from item_timeline.core.timings import MAX_TOP_PER_PHASE, TimingEntry, build_synthetic_timings

_names = st.text(alphabet="abcdefghij", min_size=1, max_size=4)
_phase_items = st.dictionaries(_names, st.integers(min_value=0, max_value=10_000), max_size=12)
_popularity = st.fixed_dictionaries({phase: _phase_items for phase in PHASE_SEQUENCE})


@given(popularity=_popularity)
@settings(max_examples=60, deadline=None)
def test_aggregation_is_sorted_permutation(popularity) -> None:
    ranked = aggregate_phases(popularity)

    for phase in PHASE_SEQUENCE:
        entries = ranked[phase]
        assert Counter(entry.name for entry in entries) == Counter(popularity[phase].keys())
        counts = [entry.count for entry in entries]
        assert counts == sorted(counts, reverse=True)
        assert [entry.rank for entry in entries] == list(range(len(entries)))


@given(popularity=_popularity, top_k=st.integers(min_value=0, max_value=10))
@settings(max_examples=60, deadline=None)
def test_chains_are_bounded_and_well_formed(popularity, top_k) -> None:
    chains = infer_chains(popularity, top_k)
    ranked = aggregate_phases(popularity)

    assert len(chains) <= top_k
    for chain in chains:
        assert [step.step_index for step in chain] == list(range(len(chain)))
        phases = [PHASE_SEQUENCE.index(step.phase) for step in chain]
        assert phases == sorted(set(phases))
        seed_rank = chain[0].rank
        for previous, current in zip(chain, chain[1:]):
            if previous.name == current.name:
                # A repeat only survives when the rank clamps onto the last entry.
                assert seed_rank >= len(ranked[current.phase]) - 1


_crowded_phase_items = st.dictionaries(
    st.text(alphabet="abcdefghij", min_size=2, max_size=3),
    st.integers(min_value=0, max_value=10_000),
    max_size=45,
)
_crowded_popularity = st.fixed_dictionaries(
    {phase: _crowded_phase_items for phase in PHASE_SEQUENCE}
)


@given(popularity=_crowded_popularity, top_per_phase=st.integers(min_value=0, max_value=60))
@settings(max_examples=60, deadline=None)
def test_synthetic_minutes_follow_phase_order(popularity, top_per_phase) -> None:
    timings = build_synthetic_timings(popularity, top_per_phase)
    ranked = aggregate_phases(popularity)
    limit = min(top_per_phase, MAX_TOP_PER_PHASE)
    phase_of = {entry.name: phase for phase in PHASE_SEQUENCE for entry in ranked[phase][:limit]}

    assert set(timings) == set(phase_of)
    minutes: dict[str, list[float]] = {phase: [] for phase in PHASE_SEQUENCE}
    for name, entry in timings.items():
        assert entry.minute >= 0.0
        minutes[phase_of[name]].append(entry.minute)
    populated = [minutes[phase] for phase in PHASE_SEQUENCE if minutes[phase]]
    for earlier, later in zip(populated, populated[1:]):
        assert max(earlier) < min(later)


_timing_rows = st.dictionaries(
    _names,
    st.tuples(
        st.floats(min_value=0.0, max_value=80.0, allow_nan=False, allow_infinity=False),
        st.integers(min_value=0, max_value=500),
    ),
    max_size=25,
)


@given(
    rows=_timing_rows,
    gap=st.floats(min_value=0.0, max_value=300.0, allow_nan=False),
    card_width=st.floats(min_value=1.0, max_value=400.0, allow_nan=False),
)
@settings(max_examples=80, deadline=None)
def test_layout_lanes_never_overlap(rows, gap, card_width) -> None:
    timings = {name: TimingEntry(name, minute, uses) for name, (minute, uses) in rows.items()}
    layout_settings = LayoutSettings(minimum_gap_px=gap, card_width=card_width)

    layout = layout_timeline(timings, layout_settings)

    assert len(layout.cards) == len(timings)
    assert layout.lane_count == len({card.lane for card in layout.cards})
    for lane in layout.lanes():
        for previous, current in zip(lane, lane[1:]):
            assert current.left_px - previous.right_extent(layout_settings) >= gap
    for card in layout.cards:
        assert card.left_px >= 0.0
        assert 0.0 <= card.normalized_usage <= 1.0
    assert layout_timeline(timings, layout_settings) == layout
