"""The ``layout`` sub-command: lane-packed timeline placement."""

from __future__ import annotations

import argparse
from typing import Any, Mapping

from item_timeline.cli.common import (
    add_export_argument,
    add_layout_arguments,
    add_popularity_arguments,
    add_timing_arguments,
    command_section,
    render_payload,
    resolve_exports,
    validated_export,
)
from item_timeline.cli.workflows import build_command_payload, compose_view

LAYOUT_SECTIONS = ("timing_source", "badges", "layout")


def add_chart_argument(parser: argparse.ArgumentParser, config: Mapping[str, Any]) -> None:
    layout_cfg = command_section(config, "layout")
    try:
        default_columns = int(layout_cfg.get("chart_columns", 0)) or None
    except (TypeError, ValueError):
        default_columns = None
    parser.add_argument(
        "--columns",
        dest="chart_columns",
        type=int,
        default=default_columns,
        help="Character width of the text lane chart (default: 120).",
    )


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register the ``layout`` sub-command."""

    parser = subparsers.add_parser(
        "layout",
        help="Pack timed item cards into non-overlapping timeline lanes.",
    )
    add_popularity_arguments(parser)
    add_timing_arguments(parser)
    add_layout_arguments(parser)
    add_chart_argument(parser, config)
    add_export_argument(
        parser,
        default=validated_export(command_section(config, "layout").get("export"), fallback="text"),
        help_text="Exporter used to render the layout (default: text).",
    )
    parser.set_defaults(handler=handle)


def handle(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    """Execute the ``layout`` command returning the rendered payload."""

    view = compose_view(namespace, config)
    payload = build_command_payload(view, LAYOUT_SECTIONS, namespace=namespace)
    return render_payload(payload, resolve_exports(namespace))


__all__ = ["register_subparser", "handle", "LAYOUT_SECTIONS", "add_chart_argument"]
