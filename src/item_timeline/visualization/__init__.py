"""Visualisation helpers for the item timeline."""

from item_timeline.visualization.lanes import (
    DEFAULT_CHART_COLUMNS,
    layout_from_payload,
    render_lane_chart,
)
from item_timeline.visualization.sparkline import (
    DEFAULT_SPARKLINE_BLOCKS,
    render_sparkline,
    usage_sparkline,
)

__all__ = [
    "DEFAULT_CHART_COLUMNS",
    "DEFAULT_SPARKLINE_BLOCKS",
    "layout_from_payload",
    "render_lane_chart",
    "render_sparkline",
    "usage_sparkline",
]
