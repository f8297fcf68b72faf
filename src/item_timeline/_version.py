"""Package version lookup.

Installed distributions report the version recorded in their metadata; source
checkouts fall back to the newest ``## vX.Y.Z`` heading of ``CHANGELOG.md``.
"""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path

from packaging.version import InvalidVersion, Version

__all__ = ["DISTRIBUTION_NAME", "__version__"]

DISTRIBUTION_NAME = "item-timeline"

_CHANGELOG_HEADING = re.compile(r"^## v(?P<version>\d+\.\d+\.\d+)\b")


def _changelog_version(start: Path | None = None) -> str | None:
    here = (start or Path(__file__)).resolve()
    for directory in here.parents[:3]:
        changelog = directory / "CHANGELOG.md"
        if not changelog.is_file():
            continue
        for line in changelog.read_text(encoding="utf-8").splitlines():
            match = _CHANGELOG_HEADING.match(line)
            if match:
                return match.group("version")
    return None


def _validated(raw: str) -> str:
    try:
        release = Version(raw).release
    except InvalidVersion as exc:
        raise RuntimeError(f"{DISTRIBUTION_NAME} has an invalid version {raw!r}") from exc
    if len(release) != 3:
        raise RuntimeError(
            f"{DISTRIBUTION_NAME} versions must be MAJOR.MINOR.PATCH, found {raw!r}"
        )
    return raw


def load_version() -> str:
    """Return the validated ``MAJOR.MINOR.PATCH`` version string."""

    try:
        raw = metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        raw = _changelog_version()
        if raw is None:
            raise RuntimeError(
                f"Unable to determine the {DISTRIBUTION_NAME} version from metadata or CHANGELOG.md"
            ) from None
    return _validated(raw)


__version__ = load_version()
