"""The ``timings`` sub-command: real or synthetic purchase minutes."""

from __future__ import annotations

import argparse
from typing import Any, Mapping

from item_timeline.cli.common import (
    add_export_argument,
    add_popularity_arguments,
    add_timing_arguments,
    command_section,
    render_payload,
    resolve_exports,
    validated_export,
)
from item_timeline.cli.workflows import build_command_payload, compose_view

TIMING_SECTIONS = ("timing_source", "timings", "badges")


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register the ``timings`` sub-command."""

    parser = subparsers.add_parser(
        "timings",
        help="Resolve item purchase minutes, estimating them from popularity if needed.",
    )
    add_popularity_arguments(parser)
    add_timing_arguments(parser)
    parser.add_argument(
        "--icons",
        action="store_true",
        help="Attach the icon URL of every item to the output.",
    )
    add_export_argument(
        parser,
        default=validated_export(command_section(config, "timings").get("export"), fallback="text"),
        help_text="Exporter used to render the timings (default: text).",
    )
    parser.set_defaults(handler=handle)


def handle(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    """Execute the ``timings`` command returning the rendered payload."""

    view = compose_view(namespace, config)
    payload = build_command_payload(
        view,
        TIMING_SECTIONS,
        namespace=namespace,
        include_icons=bool(getattr(namespace, "icons", False)),
    )
    return render_payload(payload, resolve_exports(namespace))


__all__ = ["register_subparser", "handle", "TIMING_SECTIONS"]
