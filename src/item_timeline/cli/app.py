"""Command line application entry point for the item timeline."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

from item_timeline.cli.errors import CliError, log_cli_error
from item_timeline.cli.io import load_cli_config
from item_timeline.cli.parser import build_parser
from item_timeline.logging.config import setup_logging

__all__ = ["CommandHandler", "run_cli", "main"]

CommandHandler = Callable[[argparse.Namespace, Mapping[str, Any]], str]


def _write(text: str) -> None:
    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")


def _fail(exc: CliError) -> SystemExit:
    if not exc.logged:
        log_cli_error(exc.payload, exc_info=exc)
        exc.logged = True
    if exc.payload.message:
        _write(exc.payload.message)
    return SystemExit(exc.status_code)


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Execute the item timeline command line interface."""

    config_parser = argparse.ArgumentParser(add_help=False)
    config_parser.add_argument("--config", dest="config_path", type=Path, default=None)
    config_parser.add_argument("--log-level", dest="log_level", default=None)
    config_parser.add_argument("--log-output", dest="log_output", default=None)
    config_parser.add_argument(
        "--log-format", dest="log_format", choices=("json", "text"), default=None
    )
    preliminary, remaining = config_parser.parse_known_args(args)

    try:
        config = load_cli_config(preliminary.config_path)
    except CliError as exc:
        raise _fail(exc) from exc

    logging_config = dict(config.get("logging", {}) or {})
    if preliminary.log_level is not None:
        logging_config["level"] = preliminary.log_level
    if preliminary.log_output is not None:
        logging_config["output"] = preliminary.log_output
    if preliminary.log_format is not None:
        logging_config["format"] = preliminary.log_format
    logging_config.setdefault("level", "info")
    logging_config.setdefault("output", "stderr")
    logging_config.setdefault("format", "json")
    config["logging"] = logging_config
    setup_logging(config)

    parser = build_parser(config)
    parser.set_defaults(
        config_path=preliminary.config_path,
        log_level=logging_config.get("level"),
        log_output=logging_config.get("output"),
        log_format=logging_config.get("format"),
    )
    namespace = parser.parse_args(list(remaining), namespace=preliminary)
    namespace.config = config
    namespace.config_path = namespace.config_path or config.get("_config_path")

    handler: Optional[CommandHandler] = getattr(namespace, "handler", None)
    try:
        if handler is None:
            raise CliError(
                f"Unknown command '{getattr(namespace, 'command', None)}'.",
                category="usage",
                context={"command": getattr(namespace, "command", None)},
            )
        result = handler(namespace, config=config)
    except CliError as exc:
        raise _fail(exc) from exc
    if result:
        _write(result)
    return result


def main() -> None:  # pragma: no cover - thin wrapper
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
