"""
promptforge — structured logging setup

File: src/promptforge/observability/logging.py
Last updated: 2026-10-19

Purpose
- Configure structlog once per process so library modules can log named events.

What should be included in this file
- Level filtering and a choice of console or JSON-lines rendering.
- Context binding for the running command.

Functional requirements
- Logs go to stderr; stdout is reserved for command output.
- Reconfiguring replaces the previous setup.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, Any, Final

import structlog

DEFAULT_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_LOG_FORMAT: Final[str] = "text"
_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    normalized = level.strip().upper()
    if normalized not in _LEVELS:
        expected = ", ".join(_LEVELS)
        raise ValueError(f"unknown log level {level!r}; expected one of: {expected}")
    return _LEVELS[normalized]


def configure_logging(
    level: int | str = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    *,
    stream: IO[str] | None = None,
    colors: bool = False,
) -> None:
    """Route structlog events at ``level`` and above to ``stream`` (stderr by default)."""

    if log_format not in {"text", "json"}:
        raise ValueError(f"unknown log format {log_format!r}; expected json or text")

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if log_format == "json":
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(sort_keys=True),
            ]
        )
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def configure_from_config(
    config: dict[str, Any],
    *,
    colors: bool = False,
) -> None:
    """Apply the ``[observability]`` table of an effective config."""

    observability = config.get("observability")
    section = observability if isinstance(observability, dict) else {}
    configure_logging(
        section.get("log_level", DEFAULT_LOG_LEVEL),
        section.get("log_format", DEFAULT_LOG_FORMAT),
        colors=colors,
    )


@contextmanager
def command_context(command: str, **values: object) -> Iterator[None]:
    """Bind ``command`` (and extra values) to every event logged inside the block."""

    with structlog.contextvars.bound_contextvars(command=command, **values):
        yield


__all__ = [
    "DEFAULT_LOG_FORMAT",
    "DEFAULT_LOG_LEVEL",
    "command_context",
    "configure_from_config",
    "configure_logging",
    "resolve_level",
]
