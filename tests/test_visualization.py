from __future__ import annotations

from item_timeline.analysis import TimelineOptions, compose_timeline
from item_timeline.core.aggregation import aggregate_phases
from item_timeline.core.layout import LayoutSettings, layout_timeline
from item_timeline.visualization import (
    layout_from_payload,
    render_lane_chart,
    render_sparkline,
    usage_sparkline,
)

from tests.helpers import SAMPLE_POPULARITY, build_timings


def test_render_sparkline_scales_between_extremes() -> None:
    assert render_sparkline([1, 2, 3]) == "▁▅█"
    assert render_sparkline([1, 2, 3], width=2) == "▁█"
    assert render_sparkline([3, 3]) == "██"
    assert render_sparkline([0, 0]) == "▁▁"
    assert render_sparkline([]) == ""
    assert render_sparkline([1, 2], width=0) == ""


def test_usage_sparkline_follows_rank_order() -> None:
    ranked = aggregate_phases(SAMPLE_POPULARITY)

    spark = usage_sparkline(ranked["start"])

    assert len(spark) == 4
    assert spark[0] == "█" and spark[-1] == "▁"


def test_lane_chart_draws_one_row_per_lane() -> None:
    layout = layout_timeline(build_timings(A=(10.0, 5), B=(10.0, 3)))

    lines = render_lane_chart(layout, columns=100).splitlines()

    assert len(lines) == 3
    assert "0m" in lines[0] and "10m" in lines[0]
    assert "[A" in lines[1]
    assert "[B" in lines[2]


def test_lane_chart_marks_badges_and_faded_cards() -> None:
    options = TimelineOptions(layout=LayoutSettings(highlight_phases=frozenset({"mid"})))
    view = compose_timeline(SAMPLE_POPULARITY, options=options)

    chart = render_lane_chart(view.layout, columns=400)

    assert "*Black King Bar TOP" in chart
    assert "*tango top" in chart


def test_lane_chart_from_payload_matches_layout() -> None:
    view = compose_timeline(SAMPLE_POPULARITY)
    payload = view.as_payload()["layout"]

    assert layout_from_payload(payload).cards == view.layout.cards
    assert render_lane_chart(payload, columns=160) == render_lane_chart(view.layout, columns=160)


def test_empty_layout_chart() -> None:
    chart = render_lane_chart(layout_timeline({}), columns=60)

    assert chart.splitlines()[-1] == "(no items)"
    assert render_lane_chart(layout_timeline({}), columns=0) == ""
