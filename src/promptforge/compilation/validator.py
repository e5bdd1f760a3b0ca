"""Structural validation of a PromptIR before it is written or trusted."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

from promptforge.domain.errors import IRValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from promptforge.domain.models import PromptIR


def _reject(field: str, message: str) -> NoReturn:
    raise IRValidationError(f"{field} {message}", field=field)


def _require(value: str, field: str) -> None:
    if not value:
        _reject(field, "is required and cannot be empty")


def _check_unique(ids: Iterable[str], collection: str) -> None:
    seen: dict[str, int] = {}
    for index, identifier in enumerate(ids):
        if identifier in seen:
            _reject(
                f"{collection}[{index}].id",
                f"duplicates {collection}[{seen[identifier]}].id ({identifier!r})",
            )
        seen[identifier] = index


def validate_ir(ir: PromptIR | None) -> None:
    """Raise ``IRValidationError`` on the first structural violation found."""

    if ir is None:
        raise IRValidationError("prompt IR is nil")

    _require(ir.system_role, "system_role")

    if not ir.rules:
        _reject("rules", "array cannot be empty")
    for index, rule in enumerate(ir.rules):
        _require(rule.id, f"rules[{index}].id")
        _require(rule.description, f"rules[{index}].description")

    _require(ir.input_schema.type, "input_schema.type")
    _require(ir.output_schema.type, "output_schema.type")

    if not ir.failure_modes:
        _reject("failure_modes", "array cannot be empty")
    for index, mode in enumerate(ir.failure_modes):
        _require(mode.id, f"failure_modes[{index}].id")
        _require(mode.condition, f"failure_modes[{index}].condition")
        _require(mode.response, f"failure_modes[{index}].response")

    _check_unique((rule.id for rule in ir.rules), "rules")
    _check_unique((mode.id for mode in ir.failure_modes), "failure_modes")


def is_valid_ir(ir: PromptIR | None) -> bool:
    try:
        validate_ir(ir)
    except IRValidationError:
        return False
    return True


__all__ = ["is_valid_ir", "validate_ir"]
