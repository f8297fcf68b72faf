"""Per-phase ranking of item popularity."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Tuple

from item_timeline.core.phases import PHASE_SEQUENCE, coerce_count, normalise_popularity

__all__ = ["RankedEntry", "RankedPhases", "rank_phase", "aggregate_phases"]


@dataclass(frozen=True, slots=True)
class RankedEntry:
    """Item usage count together with its 0-based rank inside a phase."""

    name: str
    count: int
    rank: int


RankedPhases = Mapping[str, Tuple[RankedEntry, ...]]


def rank_phase(items: Mapping[str, Any]) -> Tuple[RankedEntry, ...]:
    """Sort ``items`` by count descending, keeping input order on ties."""

    entries = [(str(name), coerce_count(count)) for name, count in items.items()]
    ordered = sorted(entries, key=lambda entry: -entry[1])
    return tuple(
        RankedEntry(name=name, count=count, rank=rank)
        for rank, (name, count) in enumerate(ordered)
    )


def aggregate_phases(popularity: Mapping[str, Any]) -> RankedPhases:
    """Return ranked entries for every phase of ``popularity`` in phase order."""

    normalised = normalise_popularity(popularity)
    return MappingProxyType(
        {phase: rank_phase(normalised[phase]) for phase in PHASE_SEQUENCE}
    )
