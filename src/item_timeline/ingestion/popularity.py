"""Readers for hero item popularity documents."""

from __future__ import annotations

import logging
from collections.abc import Mapping as ABCMapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from item_timeline.core.phases import (
    PHASE_SEQUENCE,
    PHASE_WIRE_KEYS,
    PopularityResponse,
    coerce_count,
    normalise_phase_key,
    normalise_popularity,
)
from item_timeline.ingestion._json import read_json_document
from item_timeline.ingestion.errors import IngestionError, PopularityFormatError

__all__ = [
    "prettify_slug",
    "item_names_from_constants",
    "name_popularity",
    "missing_phases",
    "load_item_constants",
    "load_popularity",
]

logger = logging.getLogger(__name__)


def prettify_slug(slug: str) -> str:
    """Turn an item slug such as ``black_king_bar`` into ``Black King Bar``."""

    if not slug or not slug.strip():
        return slug
    words = [part[:1].upper() + part[1:] for part in slug.split("_")]
    return " ".join(words)


def item_names_from_constants(constants: Mapping[str, Any]) -> Mapping[int, str]:
    """Build an ``item id -> display name`` table from item constants.

    ``constants`` maps item slugs to objects carrying an integer ``id`` and an
    optional ``dname``; entries without a usable id are skipped and missing
    display names fall back to the prettified slug.
    """

    names: dict[int, str] = {}
    if not isinstance(constants, ABCMapping):
        return MappingProxyType(names)
    for slug, node in constants.items():
        if not isinstance(node, ABCMapping):
            continue
        raw_id = node.get("id")
        if isinstance(raw_id, bool):
            continue
        try:
            item_id = int(raw_id)
        except (TypeError, ValueError):
            continue
        if item_id < 0:
            continue
        display = node.get("dname")
        if not isinstance(display, str) or not display.strip():
            display = prettify_slug(str(slug))
        names[item_id] = display
    return MappingProxyType(names)


def name_popularity(
    raw: Mapping[str, Any], item_names: Mapping[int, str]
) -> PopularityResponse:
    """Resolve numeric item ids of a raw popularity payload to display names.

    Ids missing from ``item_names`` become ``item#<id>``; keys that are not
    numeric ids are dropped.
    """

    named: dict[str, dict[str, int]] = {}
    for phase in PHASE_SEQUENCE:
        payload = _phase_payload(raw, phase)
        resolved: dict[str, int] = {}
        for raw_id, raw_count in payload.items():
            try:
                item_id = int(str(raw_id).strip())
            except ValueError:
                continue
            display = item_names.get(item_id, f"item#{item_id}")
            resolved[display] = coerce_count(raw_count)
        named[phase] = resolved
    return normalise_popularity(named)


def _phase_payload(raw: Mapping[str, Any], phase: str) -> Mapping[str, Any]:
    if not isinstance(raw, ABCMapping):
        return {}
    for key, value in raw.items():
        if normalise_phase_key(key) == phase and isinstance(value, ABCMapping):
            return value
    return {}


def missing_phases(payload: Any) -> tuple[str, ...]:
    """Return the phases absent from ``payload`` (in phase order)."""

    if not isinstance(payload, ABCMapping):
        return PHASE_SEQUENCE
    present = {normalise_phase_key(key) for key in payload}
    return tuple(phase for phase in PHASE_SEQUENCE if phase not in present)


def load_item_constants(path: Path | str) -> Mapping[int, str]:
    """Read an item constants document and return its id to name table."""

    payload = read_json_document(path, kind="item constants")
    if not isinstance(payload, ABCMapping):
        raise IngestionError(
            "Item constants must be a JSON object keyed by item slug",
            context={"path": str(path)},
        )
    return item_names_from_constants(payload)


def load_popularity(
    path: Path | str,
    *,
    item_names: Optional[Mapping[int, str]] = None,
    strict: bool = True,
) -> PopularityResponse:
    """Read a popularity document.

    With ``strict`` enabled, documents lacking any of the four phases raise
    :class:`PopularityFormatError`; otherwise missing phases are treated as
    empty. When ``item_names`` is supplied the document is expected to be
    keyed by numeric item ids.
    """

    payload = read_json_document(path, kind="popularity")
    if not isinstance(payload, ABCMapping):
        raise PopularityFormatError(
            "Popularity document must be a JSON object",
            context={"path": str(path), "payload_type": type(payload).__name__},
        )
    absent = missing_phases(payload)
    if absent and strict:
        expected = ", ".join(PHASE_WIRE_KEYS[phase] for phase in absent)
        raise PopularityFormatError(
            f"Popularity document is missing required phases: {expected}",
            context={"path": str(path), "missing": list(absent)},
        )
    if item_names is not None:
        return name_popularity(payload, item_names)
    logger.debug(
        "Loaded popularity document",
        extra={"path": str(path), "missing_phases": list(absent)},
    )
    return normalise_popularity(payload)
