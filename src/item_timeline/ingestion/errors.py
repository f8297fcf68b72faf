"""Exceptions raised while reading upstream payloads."""

from __future__ import annotations

from typing import Any, Mapping, Optional

__all__ = ["IngestionError", "PopularityFormatError"]


class IngestionError(ValueError):
    """Raised when an upstream payload cannot be read or decoded."""

    def __init__(self, message: str, *, context: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.context = dict(context or {})


class PopularityFormatError(IngestionError):
    """Raised when a popularity document violates the four-phase contract."""
