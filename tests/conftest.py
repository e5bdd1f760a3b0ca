"""Shared pytest fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """CLI runs configure structlog globally; never leak that into the next test."""

    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
