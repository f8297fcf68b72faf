"""Item timing maps: synthetic estimates and real telemetry normalisation."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping as ABCMapping, Sequence as ABCSequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Literal, Mapping, Tuple

from item_timeline.core.aggregation import RankedPhases, aggregate_phases
from item_timeline.core.phases import PHASE_SEQUENCE, coerce_count

__all__ = [
    "PHASE_BASE_MINUTES",
    "STAGGER_MINUTES",
    "DEFAULT_TOP_PER_PHASE",
    "MAX_TOP_PER_PHASE",
    "TimingEntry",
    "TimingMap",
    "TimingSource",
    "TimingResolution",
    "coerce_minute",
    "build_synthetic_timings",
    "synthetic_timings_from_ranked",
    "normalise_timings",
    "timings_from_explorer_rows",
    "resolve_timings",
    "resolve_timings_from_ranked",
    "order_by_timing",
]

logger = logging.getLogger(__name__)

# Representative minute at which each phase happens in a typical match.
PHASE_BASE_MINUTES: Mapping[str, float] = MappingProxyType(
    {"start": 2.0, "early": 8.0, "mid": 20.0, "late": 35.0}
)
STAGGER_MINUTES = 0.3
DEFAULT_TOP_PER_PHASE = 10
# Twenty staggered start items end at minute 7.7, before the early base minute.
MAX_TOP_PER_PHASE = 20

TimingSource = Literal["explorer", "synthetic", "none"]


@dataclass(frozen=True, slots=True)
class TimingEntry:
    """Purchase minute and usage count for one item."""

    name: str
    minute: float
    uses: int


TimingMap = Mapping[str, TimingEntry]

_EMPTY_TIMINGS: TimingMap = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class TimingResolution:
    """Timing map selected for display together with where it came from."""

    timings: TimingMap
    source: TimingSource

    @property
    def is_synthetic(self) -> bool:
        return self.source == "synthetic"


def coerce_minute(value: Any) -> float:
    """Return ``value`` as a finite, non-negative minute (``0.0`` otherwise)."""

    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(numeric) or numeric < 0.0:
        return 0.0
    return numeric


def synthetic_timings_from_ranked(
    ranked: RankedPhases, top_per_phase: int = DEFAULT_TOP_PER_PHASE
) -> TimingMap:
    """Build synthetic timings from phases that were already ranked.

    ``top_per_phase`` is capped at :data:`MAX_TOP_PER_PHASE` so that every
    phase's staggered minutes stay below the next phase's base minute.
    """

    limit = min(max(0, int(top_per_phase)), MAX_TOP_PER_PHASE)
    if limit < top_per_phase:
        logger.debug(
            "Capping synthetic timings per phase",
            extra={"requested": top_per_phase, "limit": limit},
        )
    timings: dict[str, TimingEntry] = {}
    for phase in PHASE_SEQUENCE:
        base = PHASE_BASE_MINUTES[phase]
        for index, entry in enumerate(ranked.get(phase, ())[:limit]):
            # Staggered so same-phase cards never share an instant.
            timings[entry.name] = TimingEntry(
                name=entry.name,
                minute=base + index * STAGGER_MINUTES,
                uses=entry.count,
            )
    return MappingProxyType(timings)


def build_synthetic_timings(
    popularity: Mapping[str, Any], top_per_phase: int = DEFAULT_TOP_PER_PHASE
) -> TimingMap:
    """Fabricate ``(minute, uses)`` estimates from phase popularity.

    Each phase contributes its ``top_per_phase`` most used items at the
    phase's representative minute, staggered by :data:`STAGGER_MINUTES`.
    Items listed in several phases keep the value from the latest phase.
    """

    return synthetic_timings_from_ranked(aggregate_phases(popularity), top_per_phase)


def normalise_timings(payload: Mapping[str, Any] | None) -> TimingMap:
    """Return a timing map from a ``name -> {minute, uses}`` payload.

    Values are passed through as reported; only malformed fields are
    defaulted (minute ``0.0``, uses ``0``).
    """

    if not payload:
        return _EMPTY_TIMINGS
    if not isinstance(payload, ABCMapping):
        logger.warning(
            "Ignoring non-mapping timing payload",
            extra={"payload_type": type(payload).__name__},
        )
        return _EMPTY_TIMINGS
    timings: dict[str, TimingEntry] = {}
    for raw_name, raw_value in payload.items():
        name = str(raw_name).strip() if raw_name is not None else ""
        if not name:
            continue
        if isinstance(raw_value, TimingEntry):
            timings[name] = TimingEntry(name=name, minute=raw_value.minute, uses=raw_value.uses)
            continue
        if isinstance(raw_value, ABCMapping):
            minute = coerce_minute(raw_value.get("minute"))
            uses = coerce_count(raw_value.get("uses"))
        else:
            minute, uses = 0.0, 0
        timings[name] = TimingEntry(name=name, minute=minute, uses=uses)
    return MappingProxyType(timings)


def timings_from_explorer_rows(payload: Any) -> TimingMap:
    """Parse the explorer aggregation payload into a timing map.

    The payload carries a ``rows`` array of ``{"item_key", "median_min",
    "uses"}`` objects. A missing or malformed ``rows`` entry yields an empty
    map and rows without an item key are skipped.
    """

    rows = payload.get("rows") if isinstance(payload, ABCMapping) else None
    if not isinstance(rows, ABCSequence) or isinstance(rows, (str, bytes)):
        return _EMPTY_TIMINGS
    timings: dict[str, TimingEntry] = {}
    for row in rows:
        if not isinstance(row, ABCMapping):
            continue
        key = row.get("item_key")
        name = str(key).strip() if key is not None else ""
        if not name:
            continue
        timings[name] = TimingEntry(
            name=name,
            minute=coerce_minute(row.get("median_min")),
            uses=coerce_count(row.get("uses")),
        )
    return MappingProxyType(timings)


def resolve_timings(
    popularity: Mapping[str, Any],
    real: Mapping[str, Any] | None = None,
    top_per_phase: int = DEFAULT_TOP_PER_PHASE,
) -> TimingResolution:
    """Prefer real timings; fall back to synthetic estimates when empty."""

    return resolve_timings_from_ranked(aggregate_phases(popularity), real, top_per_phase)


def resolve_timings_from_ranked(
    ranked: RankedPhases,
    real: Mapping[str, Any] | None = None,
    top_per_phase: int = DEFAULT_TOP_PER_PHASE,
) -> TimingResolution:
    """Variant of :func:`resolve_timings` for phases that were already ranked."""

    real_timings = normalise_timings(real)
    if real_timings:
        return TimingResolution(timings=real_timings, source="explorer")
    synthetic = synthetic_timings_from_ranked(ranked, top_per_phase)
    if synthetic:
        logger.debug(
            "Real timings unavailable; using synthetic estimates",
            extra={"item_count": len(synthetic), "top_per_phase": top_per_phase},
        )
        return TimingResolution(timings=synthetic, source="synthetic")
    return TimingResolution(timings=_EMPTY_TIMINGS, source="none")


def order_by_timing(
    names: Iterable[str], timings: Mapping[str, TimingEntry], *, ascending: bool = True
) -> Tuple[str, ...]:
    """Order a selected build by purchase minute.

    Names without a timing are placed last regardless of ``ascending``.
    """

    candidates = list(names)
    timed = [name for name in candidates if name in timings]
    untimed = [name for name in candidates if name not in timings]
    timed.sort(key=lambda name: timings[name].minute, reverse=not ascending)
    return tuple(timed) + tuple(untimed)
