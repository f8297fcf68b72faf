"""Exporter registry for item timeline outputs.

Every exporter receives the mapping produced by
:meth:`~item_timeline.analysis.timeline.TimelineView.as_payload` (or a subset
of its sections, as emitted by the narrower CLI commands) and returns a string.
Keys starting with an underscore carry rendering hints and are never exported.
"""

from __future__ import annotations

import json
from collections.abc import Mapping as ABCMapping
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable, List, Mapping, Protocol, Sequence

from item_timeline.core.badges import BADGE_LABELS
from item_timeline.core.phases import PHASE_LABELS, PHASE_SEQUENCE
from item_timeline.visualization import DEFAULT_CHART_COLUMNS, render_lane_chart, render_sparkline

__all__ = [
    "Exporter",
    "CSV_CARD_COLUMNS",
    "json_exporter",
    "csv_exporter",
    "markdown_exporter",
    "text_exporter",
    "exporters_registry",
]

CSV_CARD_COLUMNS: Sequence[str] = (
    "name",
    "minute",
    "uses",
    "phase",
    "lane",
    "left_px",
    "normalized_usage",
    "is_global_top",
    "phase_rank",
    "faded_by_phase",
)

_CHAIN_ARROW = " → "


class Exporter(Protocol):
    """Exporter callable protocol."""

    def __call__(self, results: Mapping[str, Any]) -> str:  # pragma: no cover - interface only
        ...


def _normalise(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [_normalise(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted(_normalise(item) for item in value)
    if isinstance(value, ABCMapping):
        return {key: _normalise(item) for key, item in value.items()}
    return value


def _public(results: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(results, ABCMapping):
        raise TypeError("Exporters expect a mapping payload")
    return {key: value for key, value in results.items() if not str(key).startswith("_")}


def _format_minute(value: Any) -> str:
    try:
        return f"{float(value):.1f}"
    except (TypeError, ValueError):
        return "-"


def _chain_text(chain: Iterable[Mapping[str, Any]]) -> str:
    return _CHAIN_ARROW.join(str(step.get("name", "?")) for step in chain)


def _timings_by_minute(timings: Mapping[str, Any]) -> List[tuple[str, Mapping[str, Any]]]:
    return sorted(
        timings.items(),
        key=lambda item: (float(item[1].get("minute", 0.0)), -int(item[1].get("uses", 0))),
    )


def _badge_for(name: str, badges: Mapping[str, Any]) -> str:
    labels: List[str] = []
    if name in set(badges.get("global_top", ())):
        labels.append("*")
    rank = badges.get("phase_top_rank", {}).get(name, 0)
    label = BADGE_LABELS.get(rank)
    if label:
        labels.append(label)
    return " ".join(labels)


def json_exporter(results: Mapping[str, Any]) -> str:
    payload = _normalise(_public(results))
    return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)


def csv_exporter(results: Mapping[str, Any]) -> str:
    """Render the most detailed tabular section of ``results`` as CSV.

    Placed cards are preferred, then the timing map and finally the inferred
    chains (one row per step).
    """

    import pandas as pd  # type: ignore

    payload = _normalise(_public(results))
    layout = payload.get("layout")
    if isinstance(layout, ABCMapping) and "cards" in layout:
        frame = pd.DataFrame(list(layout["cards"]), columns=list(CSV_CARD_COLUMNS))
    elif isinstance(payload.get("timings"), ABCMapping):
        rows = [
            {"name": name, "minute": entry.get("minute"), "uses": entry.get("uses")}
            for name, entry in _timings_by_minute(payload["timings"])
        ]
        frame = pd.DataFrame(rows, columns=["name", "minute", "uses"])
    elif isinstance(payload.get("chains"), list):
        rows = [
            {"chain": index, **step}
            for index, chain in enumerate(payload["chains"])
            for step in chain
        ]
        frame = pd.DataFrame(
            rows, columns=["chain", "step_index", "phase", "name", "count", "rank"]
        )
    else:
        raise TypeError("CSV exporter requires layout cards, timings or chains")
    return frame.to_csv(index=False, lineterminator="\n")


def markdown_exporter(results: Mapping[str, Any]) -> str:
    """Render phases, chains and timings as Markdown sections."""

    payload = _normalise(_public(results))
    lines: List[str] = []

    phases = payload.get("phases")
    if isinstance(phases, ABCMapping):
        lines.append("## Phases")
        for phase in PHASE_SEQUENCE:
            entries = phases.get(phase, [])
            spark = render_sparkline(entry.get("count", 0) for entry in entries)
            heading = f"### {PHASE_LABELS[phase]}"
            lines.extend(["", f"{heading} {spark}".rstrip(), ""])
            if not entries:
                lines.append("_No items._")
                continue
            lines.append("| Rank | Item | Uses |")
            lines.append("| ---: | --- | ---: |")
            for entry in entries:
                lines.append(
                    f"| {int(entry.get('rank', 0)) + 1} | {entry.get('name')} | {entry.get('count')} |"
                )
        lines.append("")

    for key, title in (("chains", "Chains"), ("variants", "Variants")):
        chains = payload.get(key)
        if not isinstance(chains, list):
            continue
        lines.extend([f"## {title}", ""])
        if not chains:
            lines.append("_No chains inferred._")
        for index, chain in enumerate(chains, start=1):
            lines.append(f"{index}. {_chain_text(chain)}")
        lines.append("")

    timings = payload.get("timings")
    if isinstance(timings, ABCMapping):
        source = payload.get("timing_source", "none")
        badges = payload.get("badges", {})
        lines.extend([f"## Timings ({source})", ""])
        if not timings:
            lines.append("_No timings available._")
        else:
            lines.append("| Minute | Item | Uses | Badge |")
            lines.append("| ---: | --- | ---: | --- |")
            for name, entry in _timings_by_minute(timings):
                lines.append(
                    f"| {_format_minute(entry.get('minute'))} | {name} | {entry.get('uses')} | {_badge_for(name, badges)} |"
                )
        lines.append("")

    layout = payload.get("layout")
    if isinstance(layout, ABCMapping):
        fit = layout.get("fit", {})
        lines.extend(
            [
                "## Layout",
                "",
                f"- Lanes: {layout.get('lane_count', 0)}",
                f"- Canvas: {layout.get('natural_width', 0):.0f} × {layout.get('canvas_height', 0):.0f} px",
                f"- Scale: {float(fit.get('scale', 1.0)):.3f}",
                "",
            ]
        )
    return "\n".join(lines).rstrip() + "\n"


def text_exporter(results: Mapping[str, Any]) -> str:
    """Render a plain-text report with the lane chart when a layout is present."""

    columns = results.get("_chart_columns") if isinstance(results, ABCMapping) else None
    payload = _public(results)
    blocks: List[str] = []

    chains = payload.get("chains")
    if isinstance(chains, (list, tuple)):
        rendered = [f"  {index}. {_chain_text(_normalise(chain))}" for index, chain in enumerate(chains, start=1)]
        blocks.append("\n".join(["Chains:", *(rendered or ["  (none)"])]))

    timings = payload.get("timings")
    if isinstance(timings, ABCMapping):
        normalised = _normalise(timings)
        rows = [
            f"  {_format_minute(entry.get('minute')):>6}m  {name} ({entry.get('uses')})"
            for name, entry in _timings_by_minute(normalised)
        ]
        source = payload.get("timing_source", "none")
        blocks.append("\n".join([f"Timings [{source}]:", *(rows or ["  (none)"])]))

    layout = payload.get("layout")
    if isinstance(layout, ABCMapping):
        chart = render_lane_chart(
            _normalise(layout),
            columns=int(columns) if columns else DEFAULT_CHART_COLUMNS,
        )
        blocks.append(f"Lanes: {layout.get('lane_count', 0)}\n{chart}")

    return "\n\n".join(blocks)


exporters_registry: Dict[str, Exporter] = {
    "json": json_exporter,
    "csv": csv_exporter,
    "markdown": markdown_exporter,
    "text": text_exporter,
}
