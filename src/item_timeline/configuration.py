"""Helpers to load project-level configuration files."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping as ABCMapping
from pathlib import Path
from typing import Any, Dict, List, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    import tomli as tomllib  # type: ignore

__all__ = [
    "CONFIG_ENV_VAR",
    "PROJECT_CONFIG_FILENAME",
    "load_project_config",
    "load_config",
]

CONFIG_ENV_VAR = "ITEM_TIMELINE_CONFIG"
PROJECT_CONFIG_FILENAME = "pyproject.toml"
_TOOL_SECTION = "item_timeline"


def _as_dict(payload: ABCMapping[str, Any]) -> dict[str, Any]:
    """Recursively coerce TOML mappings into regular dictionaries."""

    result: dict[str, Any] = {}
    for key, value in payload.items():
        key_str = str(key)
        if isinstance(value, ABCMapping):
            result[key_str] = _as_dict(value)
        elif isinstance(value, list):
            result[key_str] = [
                _as_dict(item) if isinstance(item, ABCMapping) else item for item in value
            ]
        else:
            result[key_str] = value
    return result


def _resolve_pyproject_path(candidate: Path) -> Path | None:
    """Return the concrete ``pyproject.toml`` path for ``candidate`` if possible."""

    candidate = candidate.expanduser()
    if candidate.name == PROJECT_CONFIG_FILENAME:
        return candidate
    if candidate.suffix:
        return None
    return candidate / PROJECT_CONFIG_FILENAME


def _iter_unique_paths(paths: Iterable[Path]) -> list[Path]:
    seen: dict[Path, None] = {}
    ordered: list[Path] = []
    for path in paths:
        resolved = path.expanduser().resolve(strict=False)
        if resolved in seen:
            continue
        seen[resolved] = None
        ordered.append(resolved)
    return ordered


def _load_toml_mapping(path: Path) -> dict[str, Any] | None:
    if not path.is_file():
        return None
    with path.open("rb") as handle:
        data = tomllib.load(handle)
    if isinstance(data, ABCMapping):
        return _as_dict(data)
    return None


def load_project_config(path: Path) -> tuple[dict[str, Any], Path] | None:
    """Load the ``[tool.item_timeline]`` section from ``pyproject.toml``."""

    pyproject_path = _resolve_pyproject_path(path)
    if pyproject_path is None:
        return None

    pyproject_path = pyproject_path.expanduser().resolve(strict=False)
    pyproject_payload = _load_toml_mapping(pyproject_path)
    if not pyproject_payload:
        return None

    tool_section = pyproject_payload.get("tool")
    if not isinstance(tool_section, ABCMapping):
        return None

    section = tool_section.get(_TOOL_SECTION)
    if not isinstance(section, ABCMapping):
        return None

    return _as_dict(section), pyproject_path


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Return the first configuration found in the lookup order.

    Explicit ``path`` first, then :data:`CONFIG_ENV_VAR`, then the current
    working directory. The resolved file is recorded under ``_config_path``.
    """

    candidates: List[Path] = []
    if path is not None:
        candidates.append(Path(path))
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        candidates.append(Path(env_config))
    candidates.append(Path.cwd())

    for base in candidates:
        pyproject = _resolve_pyproject_path(base)
        if pyproject is None:
            continue
        for candidate in _iter_unique_paths([pyproject]):
            loaded = load_project_config(candidate)
            if not loaded:
                continue
            payload, resolved = loaded
            payload["_config_path"] = str(resolved)
            return payload

    return {"_config_path": None}
