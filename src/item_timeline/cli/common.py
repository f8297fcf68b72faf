"""Shared helpers for item timeline command modules."""

from __future__ import annotations

import argparse
from collections.abc import Mapping as ABCMapping
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from item_timeline.analysis.timeline import TimelineOptions
from item_timeline.cli.errors import CliError
from item_timeline.core.phases import PHASE_SEQUENCE, normalise_phase_key
from item_timeline.core.timings import MAX_TOP_PER_PHASE
from item_timeline.exporters import exporters_registry

__all__ = [
    "CliError",
    "command_section",
    "validated_export",
    "add_export_argument",
    "add_popularity_arguments",
    "add_timing_arguments",
    "add_chain_arguments",
    "add_layout_arguments",
    "build_timeline_options",
    "resolve_exports",
    "render_payload",
]


def command_section(config: Mapping[str, Any] | None, name: str) -> Dict[str, Any]:
    """Return ``config[name]`` as a plain dict (empty when absent or malformed)."""

    if not isinstance(config, ABCMapping):
        return {}
    value = config.get(name)
    return dict(value) if isinstance(value, ABCMapping) else {}


def validated_export(value: Any, *, fallback: str) -> str:
    """Return ``value`` when it names a registered exporter, else ``fallback``."""

    if isinstance(value, str) and value in exporters_registry:
        return value
    return fallback


def add_export_argument(
    parser: argparse.ArgumentParser, *, default: str, help_text: str
) -> None:
    """Register the ``--export`` flag on ``parser`` with standard semantics."""

    parser.add_argument(
        "--export",
        dest="exports",
        choices=sorted(exporters_registry.keys()),
        action="append",
        help=f"{help_text} Repeat the flag to combine exporters.",
    )
    parser.set_defaults(exports=None, export_default=default)


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def _non_negative_float(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a number, got {raw!r}") from exc
    if not value >= 0.0 or value == float("inf"):
        raise argparse.ArgumentTypeError(f"expected a finite non-negative number, got {raw}")
    return value


def _top_per_phase(raw: str) -> int:
    value = _positive_int(raw)
    if value > MAX_TOP_PER_PHASE:
        raise argparse.ArgumentTypeError(
            f"at most {MAX_TOP_PER_PHASE} items per phase fit before the next phase, got {value}"
        )
    return value


def _phase(raw: str) -> str:
    phase = normalise_phase_key(raw)
    if phase is None:
        choices = ", ".join(PHASE_SEQUENCE)
        raise argparse.ArgumentTypeError(f"unknown phase {raw!r} (choose from {choices})")
    return phase


def add_popularity_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "popularity",
        type=Path,
        help="Path to the hero item popularity JSON document.",
    )
    parser.add_argument(
        "--items",
        type=Path,
        default=None,
        help="Item constants JSON used to resolve numeric item ids to names.",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Treat phases missing from the popularity document as empty.",
    )


def add_chain_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--top-k",
        dest="top_k",
        type=_positive_int,
        default=None,
        help="Number of starting items that seed a chain (default: chains.top_k or 6).",
    )
    parser.add_argument(
        "--variants",
        dest="max_variants",
        type=_positive_int,
        default=None,
        help="Number of chains reported as build variants (default: 3).",
    )


def add_timing_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--timings",
        type=Path,
        default=None,
        help="Real timing telemetry (plain map or explorer rows); synthetic otherwise.",
    )
    parser.add_argument(
        "--top-per-phase",
        dest="top_per_phase",
        type=_top_per_phase,
        default=None,
        help="Items per phase used for synthetic timings (default: 10, at most 20).",
    )


def add_layout_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--px-per-minute",
        dest="pixels_per_minute",
        type=_non_negative_float,
        default=None,
        help="Horizontal pixels per match minute (default: 55).",
    )
    parser.add_argument(
        "--min-gap",
        dest="minimum_gap_px",
        type=_non_negative_float,
        default=None,
        help="Minimum horizontal gap between cards sharing a lane (default: 96).",
    )
    parser.add_argument(
        "--card-width",
        dest="card_width",
        type=_non_negative_float,
        default=None,
        help="Card width in pixels (default: 300).",
    )
    parser.add_argument(
        "--highlight-phase",
        dest="highlight_phases",
        type=_phase,
        action="append",
        default=None,
        help="Phase kept at full opacity; repeat to highlight several phases.",
    )
    parser.add_argument(
        "--width",
        dest="available_width",
        type=_non_negative_float,
        default=None,
        help="Available width in pixels used to compute the auto-fit scale.",
    )


def build_timeline_options(
    namespace: argparse.Namespace, config: Mapping[str, Any]
) -> TimelineOptions:
    """Combine ``[tool.item_timeline]`` defaults with command line overrides."""

    options = TimelineOptions.from_config(config)
    overrides = {
        name: getattr(namespace, name)
        for name in ("top_k", "max_variants", "top_per_phase")
        if getattr(namespace, name, None) is not None
    }
    layout_overrides = {
        name: getattr(namespace, name)
        for name in ("pixels_per_minute", "minimum_gap_px", "card_width")
        if getattr(namespace, name, None) is not None
    }
    phases = getattr(namespace, "highlight_phases", None)
    if phases:
        layout_overrides["highlight_phases"] = frozenset(phases)
    if layout_overrides:
        overrides["layout"] = replace(options.layout, **layout_overrides)
    return replace(options, **overrides) if overrides else options


def _unique_export_list(values: Sequence[str]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def resolve_exports(namespace: argparse.Namespace) -> List[str]:
    """Return the exporters requested by ``namespace`` or raise :class:`CliError`."""

    exports = getattr(namespace, "exports", None)
    if exports:
        return _unique_export_list(exports)
    default = getattr(namespace, "export_default", None)
    if isinstance(default, str):
        return [default]
    raise CliError("No exporter configured for this command.", category="usage")


def render_payload(payload: Mapping[str, Any], exporters: Sequence[str] | str) -> str:
    """Render ``payload`` with every exporter in ``exporters``."""

    selected = [exporters] if isinstance(exporters, str) else _unique_export_list(exporters)
    rendered_outputs: List[str] = []
    for exporter_name in selected:
        exporter = exporters_registry.get(exporter_name)
        if exporter is None:
            raise CliError(
                f"Unknown exporter '{exporter_name}'.",
                category="usage",
                context={"exporter": exporter_name},
            )
        try:
            rendered_outputs.append(exporter(payload).rstrip("\n"))
        except TypeError as exc:
            raise CliError(
                f"Exporter '{exporter_name}' cannot render this command's output: {exc}",
                category="usage",
                context={"exporter": exporter_name},
            ) from exc
    return "\n\n".join(rendered_outputs)
