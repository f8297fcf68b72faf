from __future__ import annotations

import json
import logging

import pytest

from item_timeline.analysis import TimelineOptions, compose_timeline
from item_timeline.core.layout import LayoutSettings

from tests.helpers import SAMPLE_POPULARITY, build_popularity


def test_compose_timeline_uses_synthetic_timings_without_telemetry() -> None:
    view = compose_timeline(SAMPLE_POPULARITY)

    assert view.timing_source == "synthetic"
    assert len(view.chains) == 4
    assert len(view.variants) == 3
    assert len(view.layout.cards) == len(view.timings) == 12
    assert view.timing_for("Tango").minute == 2.0
    assert view.timing_for("Unknown") is None


def test_compose_timeline_prefers_real_timings() -> None:
    real = {"Blink Dagger": {"minute": 14.0, "uses": 50}, "Tango": {"minute": 0.0, "uses": 80}}

    view = compose_timeline(SAMPLE_POPULARITY, real)

    assert view.timing_source == "explorer"
    assert set(view.timings) == {"Blink Dagger", "Tango"}
    assert view.badges.rank_of("Blink Dagger") == 1
    assert {card.phase for card in view.layout.cards} == {"mid", "start"}


def test_compose_timeline_with_empty_popularity() -> None:
    view = compose_timeline(build_popularity())

    assert view.timing_source == "none"
    assert view.chains == ()
    assert view.layout.lane_count == 0


def test_options_flow_into_every_stage() -> None:
    options = TimelineOptions(
        top_k=2,
        max_variants=1,
        top_per_phase=1,
        highlight_top_k=1,
        layout=LayoutSettings(pixels_per_minute=20.0),
    )

    view = compose_timeline(SAMPLE_POPULARITY, options=options)

    assert len(view.chains) == 2
    assert len(view.variants) == 1
    assert set(view.timings) == {"Tango", "Magic Wand", "Black King Bar", "Satanic"}
    assert view.badges.global_top == frozenset({"Tango"})
    assert view.layout.settings.pixels_per_minute == 20.0


def test_options_from_config_sections() -> None:
    options = TimelineOptions.from_config(
        {
            "chains": {"top_k": 4, "max_variants": "2"},
            "timings": {"top_per_phase": "bad"},
            "badges": {"top_k": 0, "top_fraction": 3},
            "layout": {"minimum_gap_px": 120},
        }
    )

    assert options.top_k == 4
    assert options.max_variants == 2
    assert options.top_per_phase == 10
    assert options.highlight_top_k == 0
    assert options.highlight_top_fraction == 1.0
    assert options.layout.minimum_gap_px == 120.0
    assert TimelineOptions.from_config(None) == TimelineOptions()


def test_payload_is_json_serialisable() -> None:
    view = compose_timeline(
        SAMPLE_POPULARITY,
        options=TimelineOptions(layout=LayoutSettings(highlight_phases=frozenset({"late", "mid"}))),
    )

    payload = view.as_payload(available_width=500.0)
    encoded = json.loads(json.dumps(payload))

    assert list(encoded["phases"]) == ["start", "early", "mid", "late"]
    assert encoded["timing_source"] == "synthetic"
    assert encoded["layout"]["settings"]["highlight_phases"] == ["mid", "late"]
    assert encoded["layout"]["fit"]["scale"] < 1.0
    assert encoded["badges"]["global_top"] == sorted(encoded["badges"]["global_top"])


def test_compose_timeline_logs_debug_summary(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="item_timeline")

    compose_timeline(SAMPLE_POPULARITY)

    summary = [record for record in caplog.records if record.getMessage() == "Timeline composed"]
    assert summary and summary[0].timing_source == "synthetic"
    assert summary[0].duration >= 0.0
