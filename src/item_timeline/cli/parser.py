"""Argument parsing for the item timeline CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from item_timeline._version import __version__
from item_timeline.cli import chains as chains_command
from item_timeline.cli import layout as layout_command
from item_timeline.cli import report as report_command
from item_timeline.cli import timings as timings_command
from item_timeline.cli.common import command_section

__all__ = ["build_parser"]


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg = command_section(config, "logging")

    parser = argparse.ArgumentParser(
        prog="item-timeline",
        description="Item build chains, purchase timings and timeline lanes from hero item popularity.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml holding [tool.item_timeline].",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level", "info"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output", "stderr"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=logging_cfg.get("format", "json"),
        help="Logging formatter (json or text).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    chains_command.register_subparser(subparsers, config=config)
    timings_command.register_subparser(subparsers, config=config)
    layout_command.register_subparser(subparsers, config=config)
    report_command.register_subparser(subparsers, config=config)
    return parser
