"""Shared definitions for match phase nomenclature and popularity payloads."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping as ABCMapping
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple

__all__ = [
    "PHASE_SEQUENCE",
    "PHASE_WIRE_KEYS",
    "PHASE_LABELS",
    "PopularityResponse",
    "PhaseLookup",
    "normalise_phase_key",
    "coerce_count",
    "normalise_popularity",
    "build_phase_lookup",
]

logger = logging.getLogger(__name__)

PHASE_SEQUENCE: Tuple[str, ...] = ("start", "early", "mid", "late")

PHASE_WIRE_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "start": "start_game_items",
        "early": "early_game_items",
        "mid": "mid_game_items",
        "late": "late_game_items",
    }
)

PHASE_LABELS: Mapping[str, str] = MappingProxyType(
    {"start": "Start", "early": "Early", "mid": "Mid", "late": "Late"}
)

_ALIASES: dict[str, str] = {phase: phase for phase in PHASE_SEQUENCE}
_ALIASES.update({wire: phase for phase, wire in PHASE_WIRE_KEYS.items()})

PopularityResponse = Mapping[str, Mapping[str, int]]
PhaseLookup = Callable[[str], Optional[str]]


def normalise_phase_key(phase: Any) -> str | None:
    """Return the canonical phase identifier for ``phase`` or ``None``.

    Both the short identifiers (``"mid"``) and the upstream wire keys
    (``"mid_game_items"``) are accepted, case insensitively.
    """

    if phase is None:
        return None
    key = str(phase).strip().lower()
    return _ALIASES.get(key)


def coerce_count(value: Any) -> int:
    """Return ``value`` as a non-negative integer usage count.

    Malformed values never raise: booleans, non-numeric payloads, NaN,
    infinities and negative numbers all collapse to ``0``.
    """

    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return max(0, value)
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(numeric) or numeric <= 0.0:
        return 0
    return int(numeric)


def _normalise_items(phase: str, payload: Any) -> Mapping[str, int]:
    if payload is None:
        return MappingProxyType({})
    if not isinstance(payload, ABCMapping):
        logger.warning(
            "Ignoring non-mapping phase payload",
            extra={"phase": phase, "payload_type": type(payload).__name__},
        )
        return MappingProxyType({})
    items: dict[str, int] = {}
    malformed = 0
    for raw_name, raw_count in payload.items():
        count = coerce_count(raw_count)
        if count == 0 and raw_count not in (0, 0.0):
            malformed += 1
        items[str(raw_name)] = count
    if malformed:
        logger.warning(
            "Defaulted malformed usage counts to zero",
            extra={"phase": phase, "malformed": malformed},
        )
    return MappingProxyType(items)


def normalise_popularity(payload: Mapping[str, Any] | None) -> PopularityResponse:
    """Return a read-only popularity response keyed by canonical phase.

    Missing phases become empty mappings and unknown top-level keys are
    ignored so downstream components always see all four phases.
    """

    collected: dict[str, Any] = {}
    if isinstance(payload, ABCMapping):
        for raw_key, value in payload.items():
            phase = normalise_phase_key(raw_key)
            if phase is None:
                continue
            collected[phase] = value
    elif payload is not None:
        logger.warning(
            "Popularity payload is not a mapping; using empty phases",
            extra={"payload_type": type(payload).__name__},
        )

    missing = [phase for phase in PHASE_SEQUENCE if phase not in collected]
    if missing and payload is not None:
        logger.warning(
            "Popularity payload is missing phases",
            extra={"missing_phases": missing},
        )

    return MappingProxyType(
        {phase: _normalise_items(phase, collected.get(phase)) for phase in PHASE_SEQUENCE}
    )


def build_phase_lookup(popularity: Mapping[str, Any]) -> PhaseLookup:
    """Return a callable mapping an item name to the phase listing it.

    When an item appears in several phases the latest phase wins.
    """

    normalised = normalise_popularity(popularity)
    lookup: dict[str, str] = {}
    for phase in PHASE_SEQUENCE:
        for name in normalised[phase]:
            lookup[name] = phase
    frozen = MappingProxyType(lookup)

    def phase_of(name: str) -> str | None:
        return frozen.get(name)

    return phase_of
