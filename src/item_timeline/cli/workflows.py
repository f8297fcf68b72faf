"""Pipeline orchestration shared by the CLI commands."""

from __future__ import annotations

import argparse
import logging
from time import monotonic
from typing import Any, Dict, Iterable, Mapping, Optional

from item_timeline.analysis.timeline import TimelineView, compose_timeline
from item_timeline.cli.common import build_timeline_options
from item_timeline.cli.io import load_inputs
from item_timeline.resources import icon_url

__all__ = ["compose_view", "build_command_payload", "icon_table"]

logger = logging.getLogger(__name__)


def compose_view(namespace: argparse.Namespace, config: Mapping[str, Any]) -> TimelineView:
    """Load the inputs named on the command line and run the timeline pipeline."""

    started = monotonic()
    popularity, timings = load_inputs(namespace)
    options = build_timeline_options(namespace, config)
    view = compose_timeline(popularity, timings, options)
    logger.info(
        "Timeline computed",
        extra={
            "event": "cli.timeline",
            "command": getattr(namespace, "command", None),
            "timing_source": view.timing_source,
            "item_count": len(view.timings),
            "lane_count": view.layout.lane_count,
            "duration": monotonic() - started,
        },
    )
    return view


def icon_table(names: Iterable[str]) -> Dict[str, Optional[str]]:
    return {name: icon_url(name) for name in names}


def build_command_payload(
    view: TimelineView,
    sections: Iterable[str],
    *,
    namespace: argparse.Namespace,
    include_icons: bool = False,
) -> Dict[str, Any]:
    """Select ``sections`` of the view payload and attach rendering hints."""

    full = view.as_payload(getattr(namespace, "available_width", None))
    payload: Dict[str, Any] = {key: full[key] for key in sections if key in full}
    if include_icons:
        payload["icons"] = icon_table(view.timings)
    columns = getattr(namespace, "chart_columns", None)
    if columns:
        payload["_chart_columns"] = columns
    return payload
