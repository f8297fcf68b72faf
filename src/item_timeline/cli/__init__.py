"""Command line utilities for the item timeline."""

from item_timeline.cli.app import main, run_cli
from item_timeline.cli.errors import CliError

__all__ = ["CliError", "main", "run_cli"]
