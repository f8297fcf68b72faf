"""CLI-related test helpers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

import pytest

from item_timeline.cli import run_cli as _run_cli


def run_cli_in_tmp(
    args: Sequence[str] | Iterable[str],
    *,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> str:
    """Execute ``run_cli`` with ``tmp_path`` as the working directory.

    The configuration environment variable is cleared so only files created
    by the test are picked up.
    """

    monkeypatch.delenv("ITEM_TIMELINE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return _run_cli(list(args))
