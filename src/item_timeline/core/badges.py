"""Global and per-phase rank badges for timeline items."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, FrozenSet, List, Mapping, Optional

from item_timeline.core.phases import PHASE_SEQUENCE
from item_timeline.core.timings import TimingEntry

__all__ = [
    "DEFAULT_HIGHLIGHT_TOP_K",
    "DEFAULT_HIGHLIGHT_TOP_FRACTION",
    "PHASE_PODIUM_SIZE",
    "BADGE_LABELS",
    "RankBadges",
    "select_global_top",
    "rank_phase_podiums",
    "classify_badges",
]

DEFAULT_HIGHLIGHT_TOP_K = 8
DEFAULT_HIGHLIGHT_TOP_FRACTION = 0.25
PHASE_PODIUM_SIZE = 3

BADGE_LABELS: Mapping[int, str] = MappingProxyType({1: "TOP", 2: "#2", 3: "#3"})


@dataclass(frozen=True, slots=True)
class RankBadges:
    """Highlight annotations computed from a timing map."""

    global_top: FrozenSet[str] = frozenset()
    phase_top_rank: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    def rank_of(self, name: str) -> int:
        """Return the podium rank of ``name`` within its phase (``0`` if none)."""

        return self.phase_top_rank.get(name, 0)

    def label_of(self, name: str) -> str | None:
        return BADGE_LABELS.get(self.rank_of(name))


def _by_uses(entries: List[TimingEntry]) -> List[TimingEntry]:
    return sorted(entries, key=lambda entry: -entry.uses)


def select_global_top(
    timings: Mapping[str, TimingEntry],
    top_k: int = DEFAULT_HIGHLIGHT_TOP_K,
    top_fraction: float = DEFAULT_HIGHLIGHT_TOP_FRACTION,
) -> FrozenSet[str]:
    """Return the names of the most used items across every phase.

    ``top_k`` entries are selected when positive; otherwise ``top_fraction`` of
    all items is used, always keeping at least one item.
    """

    if not timings:
        return frozenset()
    ordered = _by_uses(list(timings.values()))
    if top_k > 0:
        picked = ordered[: min(int(top_k), len(ordered))]
    else:
        fraction = min(1.0, max(0.0, float(top_fraction)))
        picked = ordered[: max(1, math.floor(len(ordered) * fraction))]
    return frozenset(entry.name for entry in picked)


def rank_phase_podiums(
    timings: Mapping[str, TimingEntry],
    phase_of: Optional[Callable[[str], Optional[str]]],
) -> Mapping[str, int]:
    """Return ``name -> 1|2|3`` for the three most used items of each phase."""

    if phase_of is None:
        return MappingProxyType({})
    buckets: dict[str, List[TimingEntry]] = {phase: [] for phase in PHASE_SEQUENCE}
    for entry in timings.values():
        phase = phase_of(entry.name)
        if phase in buckets:
            buckets[phase].append(entry)
    ranks: dict[str, int] = {}
    for phase in PHASE_SEQUENCE:
        for position, entry in enumerate(_by_uses(buckets[phase])[:PHASE_PODIUM_SIZE]):
            ranks[entry.name] = position + 1
    return MappingProxyType(ranks)


def classify_badges(
    timings: Mapping[str, TimingEntry],
    phase_of: Optional[Callable[[str], Optional[str]]] = None,
    *,
    top_k: int = DEFAULT_HIGHLIGHT_TOP_K,
    top_fraction: float = DEFAULT_HIGHLIGHT_TOP_FRACTION,
) -> RankBadges:
    """Annotate ``timings`` with global top-K and per-phase podium ranks."""

    return RankBadges(
        global_top=select_global_top(timings, top_k, top_fraction),
        phase_top_rank=rank_phase_podiums(timings, phase_of),
    )
