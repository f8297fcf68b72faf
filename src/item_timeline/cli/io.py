"""Input loading helpers for the item timeline CLI."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from item_timeline.cli.errors import CliError
from item_timeline.configuration import load_config
from item_timeline.core.phases import PopularityResponse
from item_timeline.core.timings import TimingMap
from item_timeline.ingestion import (
    IngestionError,
    load_item_constants,
    load_popularity,
    load_timings,
)

__all__ = [
    "load_cli_config",
    "load_popularity_input",
    "load_timings_input",
    "load_inputs",
]

logger = logging.getLogger(__name__)


def load_cli_config(path: Optional[Path] = None) -> dict[str, Any]:
    """Load CLI defaults, turning an unreadable explicit file into a usage error."""

    try:
        return load_config(path)
    except (OSError, ValueError) as exc:
        raise CliError(
            f"Unable to load configuration: {exc}",
            category="usage",
            context={"path": str(path) if path is not None else None},
        ) from exc


def _require_file(path: Path, *, kind: str) -> Path:
    resolved = Path(path).expanduser()
    if not resolved.exists():
        raise CliError(
            f"{kind.capitalize()} file {resolved} does not exist.",
            category="not_found",
            context={"path": str(resolved), "kind": kind},
        )
    return resolved


def _ingestion_failure(exc: IngestionError) -> CliError:
    return CliError(str(exc), category="io", context=exc.context)


def load_popularity_input(
    path: Path, *, items_path: Optional[Path] = None, strict: bool = True
) -> PopularityResponse:
    """Read the popularity document (and optional item constants) for a command."""

    source = _require_file(path, kind="popularity")
    item_names: Optional[Mapping[int, str]] = None
    try:
        if items_path is not None:
            item_names = load_item_constants(_require_file(items_path, kind="item constants"))
        return load_popularity(source, item_names=item_names, strict=strict)
    except IngestionError as exc:
        raise _ingestion_failure(exc) from exc


def load_timings_input(path: Optional[Path]) -> Optional[TimingMap]:
    if path is None:
        return None
    source = _require_file(path, kind="timings")
    try:
        return load_timings(source)
    except IngestionError as exc:
        raise _ingestion_failure(exc) from exc


def load_inputs(namespace: argparse.Namespace) -> tuple[PopularityResponse, Optional[TimingMap]]:
    """Load every input file referenced by ``namespace``."""

    popularity = load_popularity_input(
        namespace.popularity,
        items_path=getattr(namespace, "items", None),
        strict=not getattr(namespace, "lenient", False),
    )
    timings = load_timings_input(getattr(namespace, "timings", None))
    logger.debug(
        "Loaded CLI inputs",
        extra={
            "popularity": str(namespace.popularity),
            "timing_count": None if timings is None else len(timings),
        },
    )
    return popularity, timings
