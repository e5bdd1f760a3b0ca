"""
promptforge — unit tests for config schema validation

File: tests/unit/config/test_schema.py
Last updated: 2026-10-19

Purpose
- Validate strict config schema behavior and structured errors.

What this test file should cover
- Defaults validate successfully and are returned as independent copies.
- Unknown keys and invalid types are rejected with actionable paths.
- Deep merge semantics.
"""

from __future__ import annotations

import pytest

from promptforge.config.schema import (
    ConfigValidationError,
    assert_valid_config,
    default_config,
    merge_config,
    validate_config,
)


def test_defaults_are_valid() -> None:
    result = validate_config(default_config())
    assert result.is_valid
    assert result.config == default_config()


def test_default_config_returns_copies() -> None:
    first = default_config()
    first["lint"]["fail_on_warnings"] = True
    assert default_config()["lint"]["fail_on_warnings"] is False


def test_unknown_keys_are_rejected_with_paths() -> None:
    result = validate_config(
        {
            "paths": {"plan": "plan.md", "output": "x"},
            "lint": {"strict": True},
            "telemetry": {},
        }
    )
    assert not result.is_valid
    assert [(issue.path, issue.message) for issue in result.issues] == [
        ("telemetry", "unknown field"),
        ("paths.output", "unknown field"),
        ("lint.strict", "unknown field"),
    ]


def test_invalid_types_are_reported() -> None:
    result = validate_config(
        {
            "paths": {"plan": "", "ir": 3},
            "observability": {"log_level": "verbose", "log_format": "text"},
        }
    )
    assert [(issue.path, issue.message) for issue in result.issues] == [
        ("paths.ir", "expected string, got int"),
        ("paths.plan", "must not be empty"),
        (
            "observability.log_level",
            "invalid value 'VERBOSE'; expected one of: DEBUG, ERROR, INFO, WARNING",
        ),
    ]


def test_section_must_be_a_table() -> None:
    result = validate_config({"lint": "yes"})
    assert [(issue.path, issue.message) for issue in result.issues] == [
        ("lint", "expected object, got str")
    ]


def test_log_level_is_case_insensitive() -> None:
    config = assert_valid_config({"observability": {"log_level": "debug"}})
    assert config["observability"]["log_level"] == "DEBUG"


def test_assert_valid_config_raises_with_all_issues() -> None:
    with pytest.raises(ConfigValidationError) as excinfo:
        assert_valid_config({"paths": {"plan": 1}, "extra": True})
    assert len(excinfo.value.issues) == 2
    assert str(excinfo.value).startswith("invalid config:\n- extra: unknown field")


def test_merge_config_is_deep_and_non_destructive() -> None:
    base = default_config()
    merged = merge_config(base, {"paths": {"ir": "out/ir.json"}, "lint": {}})
    assert merged["paths"]["ir"] == "out/ir.json"
    assert merged["paths"]["plan"] == "promptforge/plan.md"
    assert base["paths"]["ir"] == "prompt.ir.json"
