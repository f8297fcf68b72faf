"""Pure data transformations behind the item timeline."""

from item_timeline.core.aggregation import RankedEntry, aggregate_phases, rank_phase
from item_timeline.core.badges import BADGE_LABELS, RankBadges, classify_badges
from item_timeline.core.chains import ChainStep, infer_chains, infer_variants
from item_timeline.core.layout import (
    FittedLayout,
    LayoutSettings,
    PlacedCard,
    TimelineLayout,
    layout_timeline,
)
from item_timeline.core.phases import (
    PHASE_SEQUENCE,
    PHASE_WIRE_KEYS,
    build_phase_lookup,
    normalise_phase_key,
    normalise_popularity,
)
from item_timeline.core.timings import (
    PHASE_BASE_MINUTES,
    TimingEntry,
    TimingResolution,
    build_synthetic_timings,
    normalise_timings,
    order_by_timing,
    resolve_timings,
    timings_from_explorer_rows,
)

__all__ = [
    "PHASE_SEQUENCE",
    "PHASE_WIRE_KEYS",
    "PHASE_BASE_MINUTES",
    "BADGE_LABELS",
    "RankedEntry",
    "ChainStep",
    "TimingEntry",
    "TimingResolution",
    "RankBadges",
    "LayoutSettings",
    "PlacedCard",
    "FittedLayout",
    "TimelineLayout",
    "normalise_phase_key",
    "normalise_popularity",
    "build_phase_lookup",
    "rank_phase",
    "aggregate_phases",
    "infer_chains",
    "infer_variants",
    "build_synthetic_timings",
    "normalise_timings",
    "timings_from_explorer_rows",
    "resolve_timings",
    "order_by_timing",
    "classify_badges",
    "layout_timeline",
]
