from __future__ import annotations

import pytest

from item_timeline.core.timings import (
    PHASE_BASE_MINUTES,
    MAX_TOP_PER_PHASE,
    STAGGER_MINUTES,
    TimingEntry,
    build_synthetic_timings,
    normalise_timings,
    order_by_timing,
    resolve_timings,
    timings_from_explorer_rows,
)

from tests.helpers import SAMPLE_POPULARITY, build_popularity, build_timings


def test_single_start_item_lands_on_start_minute() -> None:
    timings = build_synthetic_timings(build_popularity(start={"A": 5}), 10)

    assert dict(timings) == {"A": TimingEntry("A", PHASE_BASE_MINUTES["start"], 5)}
    assert timings["A"].minute == 2.0


def test_synthetic_timings_stagger_within_phase() -> None:
    timings = build_synthetic_timings(build_popularity(mid={"X": 9, "Y": 7, "Z": 1}))

    assert [timings[name].minute for name in ("X", "Y", "Z")] == pytest.approx(
        [20.0, 20.0 + STAGGER_MINUTES, 20.0 + 2 * STAGGER_MINUTES]
    )


def test_synthetic_timings_respect_top_per_phase() -> None:
    timings = build_synthetic_timings(SAMPLE_POPULARITY, top_per_phase=2)

    assert set(timings) == {
        "Tango",
        "Iron Branch",
        "Magic Wand",
        "Power Treads",
        "Black King Bar",
        "Blink Dagger",
        "Satanic",
        "Butterfly",
    }


def test_synthetic_minutes_increase_with_phase_order() -> None:
    timings = build_synthetic_timings(SAMPLE_POPULARITY)

    latest_start = max(timings[name].minute for name in ("Tango", "Iron Branch", "Clarity"))
    earliest_late = min(timings[name].minute for name in ("Satanic", "Butterfly"))
    assert latest_start < earliest_late


def test_synthetic_timings_cap_items_per_phase_before_next_phase() -> None:
    crowded = build_popularity(
        start={f"start-{index}": 100 - index for index in range(30)},
        early={"Boots": 5},
    )

    timings = build_synthetic_timings(crowded, top_per_phase=50)

    start_minutes = [entry.minute for name, entry in timings.items() if name.startswith("start-")]
    assert len(start_minutes) == MAX_TOP_PER_PHASE
    assert max(start_minutes) < timings["Boots"].minute == PHASE_BASE_MINUTES["early"]


def test_item_in_several_phases_keeps_latest_phase() -> None:
    timings = build_synthetic_timings(build_popularity(start={"Boots": 3}, early={"Boots": 11}))

    assert timings["Boots"] == TimingEntry("Boots", 8.0, 11)


def test_empty_popularity_yields_empty_timings() -> None:
    assert not build_synthetic_timings(build_popularity())


def test_normalise_timings_defaults_malformed_fields() -> None:
    timings = normalise_timings(
        {"Blink Dagger": {"minute": "13.5", "uses": 40}, "Bad": {"minute": None}, "": {}}
    )

    assert timings["Blink Dagger"] == TimingEntry("Blink Dagger", 13.5, 40)
    assert timings["Bad"] == TimingEntry("Bad", 0.0, 0)
    assert "" not in timings


def test_explorer_rows_are_parsed() -> None:
    timings = timings_from_explorer_rows(
        {
            "rows": [
                {"item_key": "blink", "median_min": 12.25, "uses": 30},
                {"item_key": None, "median_min": 3},
                "garbage",
            ]
        }
    )

    assert dict(timings) == {"blink": TimingEntry("blink", 12.25, 30)}
    assert not timings_from_explorer_rows({"rows": "nope"})
    assert not timings_from_explorer_rows(None)


def test_resolve_prefers_real_timings() -> None:
    resolution = resolve_timings(SAMPLE_POPULARITY, {"Tango": {"minute": 0.5, "uses": 9}})

    assert resolution.source == "explorer"
    assert list(resolution.timings) == ["Tango"]
    assert not resolution.is_synthetic


def test_resolve_falls_back_to_synthetic_and_none() -> None:
    synthetic = resolve_timings(SAMPLE_POPULARITY, {})
    empty = resolve_timings(build_popularity())

    assert synthetic.source == "synthetic" and synthetic.is_synthetic
    assert empty.source == "none"
    assert not empty.timings


def test_order_by_timing_places_untimed_last() -> None:
    timings = build_timings(Wand=(9.0, 3), Boots=(4.0, 5), Satanic=(30.0, 1))
    selection = iter(["Satanic", "Mystery", "Boots", "Wand"])

    assert order_by_timing(selection, timings) == ("Boots", "Wand", "Satanic", "Mystery")
    assert order_by_timing(["Boots", "Mystery", "Satanic"], timings, ascending=False) == (
        "Satanic",
        "Boots",
        "Mystery",
    )
