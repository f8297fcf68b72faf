"""Readers for item timing telemetry documents."""

from __future__ import annotations

from collections.abc import Mapping as ABCMapping
from pathlib import Path

from item_timeline.core.timings import TimingMap, normalise_timings, timings_from_explorer_rows
from item_timeline.ingestion._json import read_json_document
from item_timeline.ingestion.errors import IngestionError

__all__ = ["load_timings"]


def load_timings(path: Path | str) -> TimingMap:
    """Read a timing document.

    Both the plain ``name -> {minute, uses}`` mapping and the explorer
    aggregation payload (``{"rows": [...]}``) are accepted. An empty document
    yields an empty map so callers can fall back to synthetic timings.
    """

    payload = read_json_document(path, kind="timings")
    if payload is None:
        return normalise_timings(None)
    if not isinstance(payload, ABCMapping):
        raise IngestionError(
            "Timing document must be a JSON object",
            context={"path": str(path), "payload_type": type(payload).__name__},
        )
    if "rows" in payload:
        return timings_from_explorer_rows(payload)
    return normalise_timings(payload)
