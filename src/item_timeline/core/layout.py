"""Lane packing for the item timing timeline.

Cards are placed with a greedy first-fit scan ordered by horizontal position:
each card joins the first lane whose occupied extent ends at least
``minimum_gap_px`` before the card's left edge, otherwise a new lane is
opened. The placement is deterministic and runs in ``O(n * lanes)``. It does
not try to minimise the number of lanes; an interval-graph colouring would be
required for that.
"""

from __future__ import annotations

import math
from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, FrozenSet, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from item_timeline.core.badges import RankBadges
from item_timeline.core.phases import normalise_phase_key
from item_timeline.core.timings import TimingEntry

__all__ = [
    "MAX_AXIS_TICKS",
    "LayoutSettings",
    "PlacedCard",
    "FittedLayout",
    "TimelineLayout",
    "normalise_usage",
    "layout_timeline",
]


# Upper bound on axis intervals; longer axes use a wider tick step.
MAX_AXIS_TICKS = 200


@dataclass(frozen=True, slots=True)
class LayoutSettings:
    """Pixel constants driving the timeline layout."""

    pixels_per_minute: float = 55.0
    card_width: float = 300.0
    minimum_gap_px: float = 96.0
    side_padding: float = 18.0
    right_padding: float = 160.0
    axis_top: float = 34.0
    header_offset: float = 12.0
    lane_height: float = 50.0
    lane_gap: float = 10.0
    bottom_margin: float = 24.0
    anchor_fraction: float = 0.35
    extent_fraction: float = 0.76
    tick_step: int = 5
    min_axis_minutes: float = 10.0
    highlight_phases: Optional[FrozenSet[str]] = None
    auto_fit: bool = True

    @property
    def lane_pitch(self) -> float:
        return self.lane_height + self.lane_gap

    @property
    def occupied_width(self) -> float:
        """Part of a card that blocks its lane for later cards."""

        return self.card_width * self.extent_fraction

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> "LayoutSettings":
        """Coerce a ``[layout]`` table into settings.

        Unknown keys are ignored and values that cannot be converted fall back
        to the defaults.
        """

        defaults = cls()
        if not isinstance(config, ABCMapping):
            return defaults

        def _coerce_float(value: Any, fallback: float) -> float:
            try:
                numeric = float(value)
            except (TypeError, ValueError):
                return fallback
            if not math.isfinite(numeric) or numeric < 0.0:
                return fallback
            return numeric

        def _coerce_bool(value: Any, fallback: bool) -> bool:
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in {"1", "true", "yes", "on"}:
                    return True
                if lowered in {"0", "false", "no", "off"}:
                    return False
            return fallback

        overrides: dict[str, Any] = {}
        for entry in fields(cls):
            if entry.name not in config:
                continue
            raw = config[entry.name]
            fallback = getattr(defaults, entry.name)
            if entry.name == "highlight_phases":
                overrides[entry.name] = _coerce_phases(raw)
            elif entry.name == "auto_fit":
                overrides[entry.name] = _coerce_bool(raw, fallback)
            elif entry.name == "tick_step":
                step = int(_coerce_float(raw, fallback))
                overrides[entry.name] = step if step > 0 else fallback
            else:
                overrides[entry.name] = _coerce_float(raw, fallback)
        return replace(defaults, **overrides)


def _coerce_phases(value: Any) -> Optional[FrozenSet[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = [token for token in value.replace(",", " ").split() if token]
    if not isinstance(value, Sequence) and not isinstance(value, (set, frozenset)):
        return None
    phases = {normalise_phase_key(item) for item in value}
    phases.discard(None)
    return frozenset(phases)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class PlacedCard:
    """A timing entry positioned on the timeline."""

    name: str
    minute: float
    uses: int
    phase: Optional[str]
    left_px: float
    lane: int
    normalized_usage: float
    is_global_top: bool = False
    phase_rank: int = 0
    faded_by_phase: bool = False

    def right_extent(self, settings: LayoutSettings) -> float:
        return self.left_px + settings.occupied_width

    def top_px(self, settings: LayoutSettings) -> float:
        return settings.axis_top + settings.header_offset + self.lane * settings.lane_pitch


@dataclass(frozen=True, slots=True)
class FittedLayout:
    """Uniform scale applied to a layout to fit an available width."""

    scale: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class TimelineLayout:
    """Placed cards plus the canvas metrics needed to draw them."""

    cards: Tuple[PlacedCard, ...]
    lane_count: int
    canvas_height: float
    natural_width: float
    max_minute: float
    ticks: Tuple[float, ...]
    settings: LayoutSettings = field(default_factory=LayoutSettings)

    def lanes(self) -> Tuple[Tuple[PlacedCard, ...], ...]:
        """Return the cards grouped by lane, each lane ordered left to right."""

        grouped: List[List[PlacedCard]] = [[] for _ in range(self.lane_count)]
        for card in self.cards:
            grouped[card.lane].append(card)
        return tuple(
            tuple(sorted(lane, key=lambda card: card.left_px)) for lane in grouped
        )

    def tick_position(self, minute: float) -> float:
        return self.settings.side_padding + minute * self.settings.pixels_per_minute

    def fit(self, available_width: float | None) -> FittedLayout:
        """Scale the layout down to ``available_width`` without re-packing lanes."""

        scale = 1.0
        if (
            self.settings.auto_fit
            and available_width is not None
            and available_width > 0
            and self.natural_width > 0
        ):
            scale = min(1.0, float(available_width) / self.natural_width)
        return FittedLayout(
            scale=scale,
            width=self.natural_width * scale,
            height=self.canvas_height * scale,
        )


def normalise_usage(uses: Sequence[float]) -> np.ndarray:
    """Min-max scale ``uses`` into ``[0, 1]``; constant input maps to zeros."""

    values = np.asarray(uses, dtype=float)
    if values.size == 0:
        return values
    low = float(values.min())
    high = float(values.max())
    if high <= low:
        return np.zeros_like(values)
    return np.clip((values - low) / (high - low), 0.0, 1.0)


def _finite(value: Any, fallback: float = 0.0) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return fallback
    return numeric if math.isfinite(numeric) else fallback


def _canvas_height(settings: LayoutSettings, lane_count: int) -> float:
    lanes = max(1, lane_count)
    content = (
        settings.axis_top
        + settings.header_offset
        + lanes * settings.lane_height
        + (lanes - 1) * settings.lane_gap
    )
    return content + settings.bottom_margin


def _axis_span(settings: LayoutSettings, minutes: Sequence[float]) -> Tuple[float, Tuple[float, ...]]:
    step = max(1, int(settings.tick_step))
    longest = max([settings.min_axis_minutes, *minutes])
    count = math.ceil(longest / step)
    if count > MAX_AXIS_TICKS:
        # Widen the step in whole multiples so the tick count stays bounded.
        step *= math.ceil(count / MAX_AXIS_TICKS)
        count = math.ceil(longest / step)
    ticks = tuple(float(index * step) for index in range(count + 1))
    return float(count * step), ticks


def layout_timeline(
    timings: Mapping[str, TimingEntry],
    settings: LayoutSettings | None = None,
    *,
    badges: RankBadges | None = None,
    phase_of: Optional[Callable[[str], Optional[str]]] = None,
) -> TimelineLayout:
    """Place every timing entry into a lane of the timeline."""

    settings = settings or LayoutSettings()
    badges = badges or RankBadges()

    rows = [
        (entry.name, _finite(entry.minute), int(_finite(entry.uses)))
        for entry in timings.values()
    ]
    # Earlier first; at the same minute the more used item claims a lane first.
    rows.sort(key=lambda row: (row[1], -row[2]))
    usage = normalise_usage([row[2] for row in rows])

    lane_right: List[float] = []
    cards: List[PlacedCard] = []
    for index, (name, minute, uses) in enumerate(rows):
        left = (
            settings.side_padding
            + minute * settings.pixels_per_minute
            - settings.card_width * settings.anchor_fraction
        )
        left = max(0.0, left)

        lane = -1
        for candidate, occupied in enumerate(lane_right):
            if left - occupied >= settings.minimum_gap_px:
                lane = candidate
                break
        if lane == -1:
            lane = len(lane_right)
            lane_right.append(-math.inf)
        lane_right[lane] = left + settings.occupied_width

        phase = phase_of(name) if phase_of is not None else None
        faded = (
            settings.highlight_phases is not None
            and phase is not None
            and phase not in settings.highlight_phases
        )
        cards.append(
            PlacedCard(
                name=name,
                minute=minute,
                uses=uses,
                phase=phase,
                left_px=left,
                lane=lane,
                normalized_usage=float(usage[index]),
                is_global_top=name in badges.global_top,
                phase_rank=badges.rank_of(name),
                faded_by_phase=faded,
            )
        )

    max_minute, ticks = _axis_span(settings, [row[1] for row in rows])
    natural_width = (
        settings.side_padding
        + max_minute * settings.pixels_per_minute
        + settings.right_padding
        + settings.side_padding
    )
    return TimelineLayout(
        cards=tuple(cards),
        lane_count=len(lane_right),
        canvas_height=_canvas_height(settings, len(lane_right)),
        natural_width=natural_width,
        max_minute=max_minute,
        ticks=ticks,
        settings=settings,
    )
