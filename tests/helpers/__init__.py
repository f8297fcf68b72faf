"""Convenience re-exports for test helpers."""

from __future__ import annotations

from tests.helpers.cli import run_cli_in_tmp
from tests.helpers.payloads import (
    SAMPLE_POPULARITY,
    build_popularity,
    build_timings,
    write_json,
)

__all__ = [
    "SAMPLE_POPULARITY",
    "build_popularity",
    "build_timings",
    "run_cli_in_tmp",
    "write_json",
]
