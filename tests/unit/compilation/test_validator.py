"""Unit tests for structural PromptIR validation."""

from __future__ import annotations

import dataclasses

import pytest

from promptforge.compilation.validator import is_valid_ir, validate_ir
from promptforge.domain.errors import IRValidationError
from promptforge.domain.models import FailureMode, PromptIR, Rule, Schema


def _valid_ir() -> PromptIR:
    return PromptIR(
        version="1",
        system_role="Test role",
        rules=(Rule(id="r1", description="Rule one"), Rule(id="r2", description="Rule two")),
        input_schema=Schema(type="object"),
        output_schema=Schema(type="object"),
        failure_modes=(FailureMode(id="f1", condition="Cond", response="Resp"),),
    )


@pytest.mark.unit
def test_valid_ir_passes() -> None:
    validate_ir(_valid_ir())
    assert is_valid_ir(_valid_ir())


@pytest.mark.unit
def test_none_is_rejected() -> None:
    with pytest.raises(IRValidationError, match="prompt IR is nil"):
        validate_ir(None)
    assert not is_valid_ir(None)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("changes", "message"),
    [
        ({"system_role": ""}, "system_role is required and cannot be empty"),
        ({"rules": ()}, "rules array cannot be empty"),
        (
            {"rules": (Rule(id="", description="x"),)},
            "rules[0].id is required and cannot be empty",
        ),
        (
            {"rules": (Rule(id="a", description="x"), Rule(id="b", description=""))},
            "rules[1].description is required and cannot be empty",
        ),
        ({"input_schema": Schema(type="")}, "input_schema.type is required and cannot be empty"),
        (
            {"output_schema": Schema(type="")},
            "output_schema.type is required and cannot be empty",
        ),
        ({"failure_modes": ()}, "failure_modes array cannot be empty"),
        (
            {"failure_modes": (FailureMode(id="", condition="c", response="r"),)},
            "failure_modes[0].id is required and cannot be empty",
        ),
        (
            {"failure_modes": (FailureMode(id="f", condition="", response="r"),)},
            "failure_modes[0].condition is required and cannot be empty",
        ),
        (
            {"failure_modes": (FailureMode(id="f", condition="c", response=""),)},
            "failure_modes[0].response is required and cannot be empty",
        ),
    ],
)
def test_each_required_field(changes: dict[str, object], message: str) -> None:
    broken = dataclasses.replace(_valid_ir(), **changes)
    with pytest.raises(IRValidationError) as excinfo:
        validate_ir(broken)
    assert str(excinfo.value) == message


@pytest.mark.unit
def test_first_violation_wins() -> None:
    broken = dataclasses.replace(_valid_ir(), system_role="", rules=())
    with pytest.raises(IRValidationError, match="^system_role"):
        validate_ir(broken)


@pytest.mark.unit
def test_duplicate_rule_ids_are_rejected() -> None:
    broken = dataclasses.replace(
        _valid_ir(),
        rules=(
            Rule(id="dup", description="one"),
            Rule(id="other", description="two"),
            Rule(id="dup", description="three"),
        ),
    )
    with pytest.raises(IRValidationError) as excinfo:
        validate_ir(broken)
    assert str(excinfo.value) == "rules[2].id duplicates rules[0].id ('dup')"
    assert excinfo.value.field == "rules[2].id"


@pytest.mark.unit
def test_duplicate_failure_mode_ids_are_rejected() -> None:
    mode = FailureMode(id="same", condition="c", response="r")
    broken = dataclasses.replace(_valid_ir(), failure_modes=(mode, mode))
    with pytest.raises(IRValidationError, match=r"failure_modes\[1\]\.id duplicates"):
        validate_ir(broken)
