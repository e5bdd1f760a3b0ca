"""
promptforge — unit tests for observability logging

File: tests/unit/observability/test_logging.py
Last updated: 2026-10-19

Purpose
- Validate structlog configuration: level filtering, JSON rendering and command context binding.

What this test file should cover
- JSON line validity and deterministic key ordering.
- Level filtering, including level names from config.
- Command context propagation and cleanup.
- Rejection of unknown levels and formats.

Functional requirements
- Offline operation.

Non-functional requirements
- Deterministic and non-flaky.
"""

from __future__ import annotations

import io
import json

import pytest
import structlog

from promptforge.observability.logging import (
    command_context,
    configure_from_config,
    configure_logging,
    resolve_level,
)


def _json_lines(stream: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


@pytest.mark.unit
def test_json_format_emits_one_object_per_event() -> None:
    stream = io.StringIO()
    configure_logging("INFO", "json", stream=stream)

    structlog.get_logger("promptforge.tests").info("ir_compiled", rules=7)

    (record,) = _json_lines(stream)
    assert record["event"] == "ir_compiled"
    assert record["level"] == "info"
    assert record["rules"] == 7
    assert "timestamp" in record
    assert list(record) == sorted(record)


@pytest.mark.unit
def test_events_below_level_are_dropped() -> None:
    stream = io.StringIO()
    configure_logging("WARNING", "json", stream=stream)
    logger = structlog.get_logger("promptforge.tests")

    logger.debug("hidden")
    logger.info("hidden")
    logger.warning("shown")

    assert [record["event"] for record in _json_lines(stream)] == ["shown"]


@pytest.mark.unit
def test_text_format_is_human_readable() -> None:
    stream = io.StringIO()
    configure_logging("debug", "text", stream=stream)

    structlog.get_logger("promptforge.tests").debug("plan_linted", diagnostics=2)

    output = stream.getvalue()
    assert "plan_linted" in output
    assert "diagnostics=2" in output
    assert "\x1b[" not in output


@pytest.mark.unit
def test_command_context_binds_and_unbinds() -> None:
    stream = io.StringIO()
    configure_logging("INFO", "json", stream=stream)
    logger = structlog.get_logger("promptforge.tests")

    with command_context("compile", explain=True):
        logger.info("inside")
    logger.info("outside")

    inside, outside = _json_lines(stream)
    assert inside["command"] == "compile"
    assert inside["explain"] is True
    assert "command" not in outside


@pytest.mark.unit
def test_reconfiguring_replaces_previous_stream() -> None:
    first = io.StringIO()
    second = io.StringIO()
    logger = structlog.get_logger("promptforge.tests")

    configure_logging("INFO", "json", stream=first)
    logger.info("one")
    configure_logging("INFO", "json", stream=second)
    logger.info("two")

    assert [record["event"] for record in _json_lines(first)] == ["one"]
    assert [record["event"] for record in _json_lines(second)] == ["two"]


@pytest.mark.unit
def test_configure_from_config_uses_observability_table(
    capsys: pytest.CaptureFixture[str],
) -> None:
    configure_from_config({"observability": {"log_level": "ERROR", "log_format": "json"}})
    logger = structlog.get_logger("promptforge.tests")

    logger.warning("dropped")
    logger.error("kept")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert [json.loads(line)["event"] for line in captured.err.splitlines()] == ["kept"]


@pytest.mark.unit
def test_resolve_level() -> None:
    assert resolve_level("warning") == 30
    assert resolve_level(" DEBUG ") == 10
    assert resolve_level(40) == 40
    with pytest.raises(ValueError, match="unknown log level 'TRACE'"):
        resolve_level("TRACE")


@pytest.mark.unit
def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="unknown log format 'xml'"):
        configure_logging("INFO", "xml")
