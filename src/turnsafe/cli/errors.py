"""Error reporting for the turnsafe command line tools.

Every failure surfaced by a command is a :class:`CliError`. Its category
decides the process exit status; the attached :class:`ErrorPayload` is what
gets logged under the ``cli.error`` event.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from turnsafe_core.models import InvalidParameterError

__all__ = [
    "EXIT_STATUS",
    "CliError",
    "ErrorPayload",
    "build_error_payload",
    "exit_status_for",
    "log_cli_error",
]

EXIT_STATUS: Mapping[str, int] = MappingProxyType(
    {
        "runtime": 1,
        "usage": 2,
        "io": 3,
        "not_found": 4,
    }
)

logger = logging.getLogger("turnsafe.cli")


def exit_status_for(category: str) -> int:
    """Exit status of ``category``; unknown categories count as runtime errors."""

    return EXIT_STATUS.get(category, EXIT_STATUS["runtime"])


def _plain(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """What a failed command reports: category, message and scalar context."""

    category: str
    message: str
    context: Mapping[str, Any] = field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return exit_status_for(self.category)

    def as_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "category": self.category,
            "message": self.message,
            "context": dict(self.context),
        }


def build_error_payload(
    message: str,
    *,
    category: str = "runtime",
    context: Optional[Mapping[str, Any]] = None,
) -> ErrorPayload:
    """Create an :class:`ErrorPayload`, stringifying non-scalar context values."""

    plain = {str(key): _plain(value) for key, value in (context or {}).items()}
    return ErrorPayload(category=category or "runtime", message=message, context=plain)


def log_cli_error(payload: ErrorPayload, *, exc_info: Optional[BaseException] = None) -> None:
    logger.error(
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
    """A command failure carrying its exit status and structured context."""

    def __init__(
        self,
        message: str,
        *,
        category: str = "runtime",
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
    def context(self) -> Mapping[str, Any]:
        return self.payload.context

    @classmethod
    def from_invalid_parameter(cls, exc: InvalidParameterError) -> "CliError":
        """Translate a rejected physics parameter into a usage error."""

        return cls(
            str(exc),
            category="usage",
            context={"parameter": exc.parameter, "value": exc.value},
        )

    @classmethod
    def from_config_value(
        cls, table: str, key: str, value: Any, *, expected: str
    ) -> "CliError":
        """Usage error for a ``[tool.turnsafe.<table>]`` entry of the wrong type."""

        return cls(
            f"Invalid configuration: [tool.turnsafe.{table}] {key} must be {expected}, "
            f"got {value!r}.",
            category="usage",
            context={"table": table, "key": key, "value": value},
        )
