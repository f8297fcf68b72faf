"""Error helpers for the item timeline command line tool.

Every failure a command can report maps onto one of four categories, each
with its own process exit status: ``runtime`` (1), ``usage`` (2), ``io`` (3)
and ``not_found`` (4).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

__all__ = [
    "EXIT_STATUS",
    "CliError",
    "ErrorPayload",
    "build_error_payload",
    "log_cli_error",
]

EXIT_STATUS: Mapping[str, int] = MappingProxyType(
    {"runtime": 1, "usage": 2, "io": 3, "not_found": 4}
)

_FALLBACK_CATEGORY = "runtime"

logger = logging.getLogger("item_timeline.cli")


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """What a failed command reports: message, category, exit status, context."""

    message: str
    category: str = _FALLBACK_CATEGORY
    context: Mapping[str, Any] = field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return EXIT_STATUS[self.category]

    def as_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "category": self.category,
            "message": self.message,
            "context": dict(self.context),
        }


def _scalar(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def build_error_payload(
    message: str,
    *,
    category: str = _FALLBACK_CATEGORY,
    context: Optional[Mapping[str, Any]] = None,
) -> ErrorPayload:
    """Create an :class:`ErrorPayload`; unknown categories become ``runtime``."""

    if category not in EXIT_STATUS:
        category = _FALLBACK_CATEGORY
    scalars = {str(key): _scalar(value) for key, value in (context or {}).items()}
    return ErrorPayload(message=message, category=category, context=MappingProxyType(scalars))


def log_cli_error(
    payload: ErrorPayload,
    *,
    target: Optional[logging.Logger] = None,
    exc_info: Optional[BaseException] = None,
) -> None:
    """Emit ``payload`` through ``logger.error`` with structured context."""

    (target or logger).error(
        payload.message,
        extra={
            "event": "cli.error",
            "category": payload.category,
            "status_code": payload.status_code,
            "context": dict(payload.context),
        },
        exc_info=exc_info,
    )


class CliError(RuntimeError):
    """Error raised by command handlers; carries the process exit status."""

    def __init__(
        self,
        message: str,
        *,
        category: str = _FALLBACK_CATEGORY,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.payload = build_error_payload(message, category=category, context=context)
        self.logged = False

    @property
    def category(self) -> str:
        return self.payload.category

    @property
    def status_code(self) -> int:
        return self.payload.status_code

    @property
    def context(self) -> dict[str, Any]:
        return dict(self.payload.context)
