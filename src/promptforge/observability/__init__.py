"""Observability exports: structlog configuration and command context."""

from promptforge.observability.logging import (
    command_context,
    configure_from_config,
    configure_logging,
)

__all__ = ["command_context", "configure_from_config", "configure_logging"]
