"""The ``report`` sub-command: every derived artifact in one document."""

from __future__ import annotations

import argparse
from typing import Any, Mapping

from item_timeline.cli.common import (
    add_chain_arguments,
    add_export_argument,
    add_layout_arguments,
    add_popularity_arguments,
    add_timing_arguments,
    command_section,
    render_payload,
    resolve_exports,
    validated_export,
)
from item_timeline.cli.layout import add_chart_argument
from item_timeline.cli.workflows import build_command_payload, compose_view

REPORT_SECTIONS = (
    "phases",
    "chains",
    "variants",
    "timing_source",
    "timings",
    "badges",
    "layout",
)


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register the ``report`` sub-command."""

    parser = subparsers.add_parser(
        "report",
        help="Run the full pipeline and render phases, chains, timings and layout.",
    )
    add_popularity_arguments(parser)
    add_chain_arguments(parser)
    add_timing_arguments(parser)
    add_layout_arguments(parser)
    add_chart_argument(parser, config)
    add_export_argument(
        parser,
        default=validated_export(
            command_section(config, "report").get("export"), fallback="markdown"
        ),
        help_text="Exporter used to render the report (default: markdown).",
    )
    parser.set_defaults(handler=handle)


def handle(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    """Execute the ``report`` command returning the rendered payload."""

    view = compose_view(namespace, config)
    payload = build_command_payload(view, REPORT_SECTIONS, namespace=namespace, include_icons=True)
    return render_payload(payload, resolve_exports(namespace))


__all__ = ["register_subparser", "handle", "REPORT_SECTIONS"]
