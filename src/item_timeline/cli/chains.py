"""The ``chains`` sub-command: rank-following item chains."""

from __future__ import annotations

import argparse
from typing import Any, Mapping

from item_timeline.cli.common import (
    add_chain_arguments,
    add_export_argument,
    add_popularity_arguments,
    command_section,
    render_payload,
    resolve_exports,
    validated_export,
)
from item_timeline.cli.workflows import build_command_payload, compose_view

CHAIN_SECTIONS = ("phases", "chains", "variants")


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register the ``chains`` sub-command."""

    parser = subparsers.add_parser(
        "chains",
        help="Infer item chains by following popularity ranks across phases.",
    )
    add_popularity_arguments(parser)
    add_chain_arguments(parser)
    add_export_argument(
        parser,
        default=validated_export(command_section(config, "chains").get("export"), fallback="text"),
        help_text="Exporter used to render the chains (default: text).",
    )
    parser.set_defaults(handler=handle)


def handle(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    """Execute the ``chains`` command returning the rendered payload."""

    view = compose_view(namespace, config)
    payload = build_command_payload(view, CHAIN_SECTIONS, namespace=namespace)
    return render_payload(payload, resolve_exports(namespace))


__all__ = ["register_subparser", "handle", "CHAIN_SECTIONS"]
