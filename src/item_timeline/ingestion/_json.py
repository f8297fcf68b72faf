"""JSON document reading shared by the ingestion loaders."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from item_timeline.ingestion.errors import IngestionError


def read_json_document(path: Path | str, *, kind: str) -> Any:
    source = Path(path).expanduser()
    if not source.is_file():
        raise IngestionError(
            f"{kind.capitalize()} file {source} does not exist",
            context={"path": str(source), "kind": kind},
        )
    try:
        with source.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise IngestionError(
            f"{kind.capitalize()} file {source} is not valid JSON: {exc.msg}",
            context={"path": str(source), "kind": kind, "line": exc.lineno},
        ) from exc
    except OSError as exc:
        raise IngestionError(
            f"Unable to read {kind} file {source}: {exc.strerror or exc}",
            context={"path": str(source), "kind": kind},
        ) from exc
