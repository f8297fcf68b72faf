"""Rank-following chain inference across match phases.

Chains start from the ``top_k`` most popular starting items and follow the
same rank through every later phase. When a phase has fewer entries than the
rank being followed, the chain telescopes onto the phase's last item. This is
a heuristic approximation of an upgrade path; it does not use co-occurrence
statistics, and several chains may legitimately reconverge on the same item.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Tuple

from item_timeline.core.aggregation import RankedEntry, RankedPhases, aggregate_phases
from item_timeline.core.phases import PHASE_SEQUENCE

__all__ = [
    "ChainStep",
    "Chain",
    "DEFAULT_TOP_K",
    "DEFAULT_MAX_VARIANTS",
    "infer_chains",
    "infer_variants",
    "chains_from_ranked",
]

DEFAULT_TOP_K = 6
DEFAULT_MAX_VARIANTS = 3


@dataclass(frozen=True, slots=True)
class ChainStep:
    """One phase of an inferred item progression."""

    phase: str
    name: str
    count: int
    rank: int
    step_index: int


Chain = Tuple[ChainStep, ...]


def _select_entry(
    entries: Sequence[RankedEntry], rank: int, previous: ChainStep | None
) -> RankedEntry:
    last_index = len(entries) - 1
    index = min(rank, last_index)
    entry = entries[index]
    if previous is not None and previous.name == entry.name:
        neighbour = entries[min(last_index, index + 1)]
        if neighbour.name != entry.name:
            return neighbour
    return entry


def chains_from_ranked(ranked: RankedPhases, top_k: int = DEFAULT_TOP_K) -> Tuple[Chain, ...]:
    """Infer chains from phases that were already ranked."""

    seeds = min(int(top_k), len(ranked.get(PHASE_SEQUENCE[0], ())))
    chains: List[Chain] = []
    for rank in range(max(0, seeds)):
        steps: List[ChainStep] = []
        for phase in PHASE_SEQUENCE:
            entries = ranked.get(phase, ())
            if not entries:
                continue
            previous = steps[-1] if steps else None
            entry = _select_entry(entries, rank, previous)
            steps.append(
                ChainStep(
                    phase=phase,
                    name=entry.name,
                    count=entry.count,
                    rank=entry.rank,
                    step_index=len(steps),
                )
            )
        if steps:
            chains.append(tuple(steps))
    return tuple(chains)


def infer_chains(popularity: Mapping[str, Any], top_k: int = DEFAULT_TOP_K) -> Tuple[Chain, ...]:
    """Return up to ``top_k`` rank-following chains for ``popularity``."""

    return chains_from_ranked(aggregate_phases(popularity), top_k)


def infer_variants(
    popularity: Mapping[str, Any],
    top_k_per_phase: int = DEFAULT_TOP_K,
    max_variants: int = DEFAULT_MAX_VARIANTS,
) -> Tuple[Chain, ...]:
    """Return the leading chains as alternative build variants."""

    chains = infer_chains(popularity, top_k_per_phase)
    return chains[: max(1, int(max_variants))]
