"""Item build timelines from hero item popularity.

The package ranks items within the four match phases, links same-rank items
into build chains, estimates purchase minutes when real telemetry is missing,
annotates the most used items and packs timed item cards into timeline lanes.
"""

from item_timeline._version import __version__
from item_timeline.analysis import TimelineOptions, TimelineView, compose_timeline
from item_timeline.core import (
    PHASE_SEQUENCE,
    ChainStep,
    LayoutSettings,
    PlacedCard,
    RankBadges,
    RankedEntry,
    TimelineLayout,
    TimingEntry,
    aggregate_phases,
    build_synthetic_timings,
    classify_badges,
    infer_chains,
    infer_variants,
    layout_timeline,
    resolve_timings,
)
from item_timeline.exporters import exporters_registry
from item_timeline.ingestion import load_popularity, load_timings
from item_timeline.resources import IconResolver, icon_url

__all__ = [
    "__version__",
    "PHASE_SEQUENCE",
    "RankedEntry",
    "ChainStep",
    "TimingEntry",
    "RankBadges",
    "LayoutSettings",
    "PlacedCard",
    "TimelineLayout",
    "TimelineOptions",
    "TimelineView",
    "aggregate_phases",
    "infer_chains",
    "infer_variants",
    "build_synthetic_timings",
    "resolve_timings",
    "classify_badges",
    "layout_timeline",
    "compose_timeline",
    "load_popularity",
    "load_timings",
    "IconResolver",
    "icon_url",
    "exporters_registry",
]
