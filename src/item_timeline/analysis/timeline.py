"""High-level pipeline turning popularity payloads into a timeline view."""

from __future__ import annotations

import logging
from collections.abc import Mapping as ABCMapping
from dataclasses import asdict, dataclass, field
from time import monotonic
from typing import Any, Dict, Mapping, Optional, Tuple

from item_timeline.core.aggregation import RankedPhases, aggregate_phases
from item_timeline.core.badges import (
    DEFAULT_HIGHLIGHT_TOP_FRACTION,
    DEFAULT_HIGHLIGHT_TOP_K,
    RankBadges,
    classify_badges,
)
from item_timeline.core.chains import (
    DEFAULT_MAX_VARIANTS,
    DEFAULT_TOP_K,
    Chain,
    chains_from_ranked,
)
from item_timeline.core.layout import LayoutSettings, TimelineLayout, layout_timeline
from item_timeline.core.phases import (
    PHASE_SEQUENCE,
    PopularityResponse,
    build_phase_lookup,
    normalise_popularity,
)
from item_timeline.core.timings import (
    DEFAULT_TOP_PER_PHASE,
    TimingEntry,
    TimingMap,
    TimingSource,
    resolve_timings_from_ranked,
)

__all__ = ["TimelineOptions", "TimelineView", "compose_timeline"]

logger = logging.getLogger(__name__)


def _coerce_int(value: Any, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def _coerce_fraction(value: Any, fallback: float) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return fallback
    return min(1.0, max(0.0, numeric))


def _section(config: Mapping[str, Any] | None, name: str) -> Mapping[str, Any]:
    if not isinstance(config, ABCMapping):
        return {}
    value = config.get(name)
    return value if isinstance(value, ABCMapping) else {}


@dataclass(frozen=True, slots=True)
class TimelineOptions:
    """Tunable knobs of :func:`compose_timeline`."""

    top_k: int = DEFAULT_TOP_K
    max_variants: int = DEFAULT_MAX_VARIANTS
    top_per_phase: int = DEFAULT_TOP_PER_PHASE
    highlight_top_k: int = DEFAULT_HIGHLIGHT_TOP_K
    highlight_top_fraction: float = DEFAULT_HIGHLIGHT_TOP_FRACTION
    layout: LayoutSettings = field(default_factory=LayoutSettings)

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> "TimelineOptions":
        """Build options from the ``[tool.item_timeline]`` table."""

        chains_cfg = _section(config, "chains")
        timings_cfg = _section(config, "timings")
        badges_cfg = _section(config, "badges")
        defaults = cls()
        return cls(
            top_k=_coerce_int(chains_cfg.get("top_k"), defaults.top_k),
            max_variants=_coerce_int(chains_cfg.get("max_variants"), defaults.max_variants),
            top_per_phase=_coerce_int(timings_cfg.get("top_per_phase"), defaults.top_per_phase),
            highlight_top_k=_coerce_int(badges_cfg.get("top_k"), defaults.highlight_top_k),
            highlight_top_fraction=_coerce_fraction(
                badges_cfg.get("top_fraction"), defaults.highlight_top_fraction
            ),
            layout=LayoutSettings.from_config(_section(config, "layout")),
        )


@dataclass(frozen=True, slots=True)
class TimelineView:
    """Every derived structure a renderer needs for one popularity payload."""

    popularity: PopularityResponse
    ranked: RankedPhases
    chains: Tuple[Chain, ...]
    variants: Tuple[Chain, ...]
    timings: TimingMap
    timing_source: TimingSource
    badges: RankBadges
    layout: TimelineLayout

    def timing_for(self, name: str) -> Optional[TimingEntry]:
        return self.timings.get(name)

    def as_payload(self, available_width: float | None = None) -> Dict[str, Any]:
        """Return a JSON-friendly representation used by the exporters.

        ``available_width`` is forwarded to :meth:`TimelineLayout.fit` so the
        payload carries the scale a renderer should apply.
        """

        layout = self.layout
        settings = asdict(layout.settings)
        if settings["highlight_phases"] is not None:
            settings["highlight_phases"] = [
                phase for phase in PHASE_SEQUENCE if phase in settings["highlight_phases"]
            ]
        return {
            "phases": {
                phase: [asdict(entry) for entry in self.ranked.get(phase, ())]
                for phase in PHASE_SEQUENCE
            },
            "chains": [[asdict(step) for step in chain] for chain in self.chains],
            "variants": [[asdict(step) for step in chain] for chain in self.variants],
            "timing_source": self.timing_source,
            "timings": {
                name: {"minute": entry.minute, "uses": entry.uses}
                for name, entry in self.timings.items()
            },
            "badges": {
                "global_top": sorted(self.badges.global_top),
                "phase_top_rank": dict(self.badges.phase_top_rank),
            },
            "layout": {
                "lane_count": layout.lane_count,
                "canvas_height": layout.canvas_height,
                "natural_width": layout.natural_width,
                "max_minute": layout.max_minute,
                "ticks": list(layout.ticks),
                "cards": [asdict(card) for card in layout.cards],
                "fit": asdict(layout.fit(available_width)),
                "settings": settings,
            },
        }


def compose_timeline(
    popularity: Mapping[str, Any],
    real_timings: Mapping[str, Any] | None = None,
    options: TimelineOptions | None = None,
) -> TimelineView:
    """Run aggregation, chain inference, timing resolution, badges and layout."""

    started = monotonic()
    options = options or TimelineOptions()
    normalised = normalise_popularity(popularity)
    ranked = aggregate_phases(normalised)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Composing timeline",
            extra={
                "phase_sizes": {phase: len(ranked[phase]) for phase in PHASE_SEQUENCE},
                "real_timing_count": len(real_timings or {}),
            },
        )

    chains = chains_from_ranked(ranked, options.top_k)
    variants = chains[: max(1, options.max_variants)]

    resolution = resolve_timings_from_ranked(ranked, real_timings, options.top_per_phase)
    timings = resolution.timings
    source = resolution.source

    phase_of = build_phase_lookup(normalised)
    badges = classify_badges(
        timings,
        phase_of,
        top_k=options.highlight_top_k,
        top_fraction=options.highlight_top_fraction,
    )
    layout = layout_timeline(timings, options.layout, badges=badges, phase_of=phase_of)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Timeline composed",
            extra={
                "chain_count": len(chains),
                "timing_source": source,
                "card_count": len(layout.cards),
                "lane_count": layout.lane_count,
                "duration": monotonic() - started,
            },
        )
    return TimelineView(
        popularity=normalised,
        ranked=ranked,
        chains=chains,
        variants=variants,
        timings=timings,
        timing_source=source,
        badges=badges,
        layout=layout,
    )
