"""Frozen dataclass models for plans, the PromptIR contract, diagnostics and provenance."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import NoReturn

from promptforge.domain.errors import IRFormatError

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]


class Severity(StrEnum):
    ERROR = "error"
    WARN = "warn"


class SourceKind(StrEnum):
    BASELINE = "baseline"
    PLAN = "plan"


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PlanItem:
    """One list entry of a plan section with its 1-based document line."""

    text: str
    line: int


@dataclass(frozen=True, slots=True)
class Plan:
    """Parsed Goal / Constraints / Out of Scope sections of a plan document."""

    goal: str
    goal_line: int = -1
    constraints: tuple[PlanItem, ...] = ()
    out_of_scope: tuple[PlanItem, ...] = ()

    @property
    def constraint_texts(self) -> tuple[str, ...]:
        return tuple(item.text for item in self.constraints)

    @property
    def out_of_scope_texts(self) -> tuple[str, ...]:
        return tuple(item.text for item in self.out_of_scope)


# ---------------------------------------------------------------------------
# PromptIR
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Rule:
    id: str
    description: str
    condition: str | None = None

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {"id": self.id, "description": self.description}
        if self.condition:
            payload["condition"] = self.condition
        return payload

    @classmethod
    def from_dict(cls, data: object, path: str = "rule") -> Rule:
        obj = _expect_object(data, path)
        return cls(
            id=_as_text(obj.get("id"), f"{path}.id"),
            description=_as_text(obj.get("description"), f"{path}.description"),
            condition=_as_optional_text(obj.get("condition"), f"{path}.condition"),
        )


@dataclass(frozen=True, slots=True)
class FailureMode:
    id: str
    condition: str
    response: str

    def to_dict(self) -> dict[str, JSONValue]:
        return {"id": self.id, "condition": self.condition, "response": self.response}

    @classmethod
    def from_dict(cls, data: object, path: str = "failure_mode") -> FailureMode:
        obj = _expect_object(data, path)
        return cls(
            id=_as_text(obj.get("id"), f"{path}.id"),
            condition=_as_text(obj.get("condition"), f"{path}.condition"),
            response=_as_text(obj.get("response"), f"{path}.response"),
        )


@dataclass(frozen=True, slots=True)
class Property:
    """A single field of an object schema."""

    type: str
    description: str | None = None
    enum: tuple[JSONScalar, ...] = ()
    properties: Mapping[str, Property] = field(default_factory=dict)
    items: Schema | None = None

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {"type": self.type}
        if self.description:
            payload["description"] = self.description
        if self.enum:
            payload["enum"] = list(self.enum)
        if self.properties:
            payload["properties"] = {
                name: prop.to_dict() for name, prop in self.properties.items()
            }
        if self.items is not None:
            payload["items"] = self.items.to_dict()
        return payload

    @classmethod
    def from_dict(cls, data: object, path: str = "property") -> Property:
        obj = _expect_object(data, path)
        enum_raw = obj.get("enum")
        enum: tuple[JSONScalar, ...] = ()
        if enum_raw is not None:
            values = _as_list(enum_raw, f"{path}.enum")
            for index, value in enumerate(values):
                if isinstance(value, (list, dict)):
                    _fail(f"{path}.enum[{index}]", "enum values must be JSON scalars")
            enum = tuple(values)  # type: ignore[arg-type]
        items_raw = obj.get("items")
        return cls(
            type=_as_text(obj.get("type"), f"{path}.type"),
            description=_as_optional_text(obj.get("description"), f"{path}.description"),
            enum=enum,
            properties=_properties_from(obj.get("properties"), f"{path}.properties"),
            items=None if items_raw is None else Schema.from_dict(items_raw, f"{path}.items"),
        )


@dataclass(frozen=True, slots=True)
class Schema:
    """Recursive input/output schema description carried by the IR."""

    type: str
    properties: Mapping[str, Property] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    items: Schema | None = None

    def __post_init__(self) -> None:
        # required has set semantics; keep first occurrence order.
        object.__setattr__(self, "required", tuple(dict.fromkeys(self.required)))

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {"type": self.type}
        if self.properties:
            payload["properties"] = {
                name: prop.to_dict() for name, prop in self.properties.items()
            }
        if self.required:
            payload["required"] = list(self.required)
        if self.items is not None:
            payload["items"] = self.items.to_dict()
        return payload

    @classmethod
    def from_dict(cls, data: object, path: str = "schema") -> Schema:
        obj = _expect_object(data, path)
        required_raw = obj.get("required")
        required: tuple[str, ...] = ()
        if required_raw is not None:
            required = tuple(
                _as_text(item, f"{path}.required[{index}]")
                for index, item in enumerate(_as_list(required_raw, f"{path}.required"))
            )
        items_raw = obj.get("items")
        return cls(
            type=_as_text(obj.get("type"), f"{path}.type"),
            properties=_properties_from(obj.get("properties"), f"{path}.properties"),
            required=required,
            items=None if items_raw is None else Schema.from_dict(items_raw, f"{path}.items"),
        )


@dataclass(frozen=True, slots=True)
class PromptIR:
    """The compiled, machine-enforceable prompt contract."""

    version: str
    system_role: str
    rules: tuple[Rule, ...]
    input_schema: Schema
    output_schema: Schema
    failure_modes: tuple[FailureMode, ...]

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "version": self.version,
            "system_role": self.system_role,
            "rules": [rule.to_dict() for rule in self.rules],
            "input_schema": self.input_schema.to_dict(),
            "output_schema": self.output_schema.to_dict(),
            "failure_modes": [mode.to_dict() for mode in self.failure_modes],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"

    @classmethod
    def from_json(cls, raw: str) -> PromptIR:
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise IRFormatError(f"invalid JSON: {exc}") from exc
        return cls.from_dict(parsed)

    @classmethod
    def from_dict(cls, data: object) -> PromptIR:
        """Build an IR from decoded JSON.

        Missing fields decode to empty values so the validator, not the decoder,
        reports them. Wrongly typed fields raise ``IRFormatError``.
        """

        obj = _expect_object(data, "<root>")
        return cls(
            version=_as_text(obj.get("version"), "version"),
            system_role=_as_text(obj.get("system_role"), "system_role"),
            rules=tuple(
                Rule.from_dict(item, f"rules[{index}]")
                for index, item in enumerate(_as_list(obj.get("rules", []), "rules"))
            ),
            input_schema=_schema_or_empty(obj.get("input_schema"), "input_schema"),
            output_schema=_schema_or_empty(obj.get("output_schema"), "output_schema"),
            failure_modes=tuple(
                FailureMode.from_dict(item, f"failure_modes[{index}]")
                for index, item in enumerate(
                    _as_list(obj.get("failure_modes", []), "failure_modes")
                )
            ),
        )


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One lint finding against a plan document."""

    severity: Severity
    code: str
    message: str
    line: int = 1
    column: int = 1

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }


@dataclass(frozen=True, slots=True)
class AuditIssue:
    severity: Severity
    message: str

    def to_dict(self) -> dict[str, JSONValue]:
        return {"severity": self.severity.value, "message": self.message}


# ---------------------------------------------------------------------------
# Explain report
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExplainSource:
    """Where an IR value came from: the baseline tables or a plan line."""

    kind: SourceKind
    section: str | None = None
    line: int | None = None

    @classmethod
    def baseline(cls) -> ExplainSource:
        return cls(kind=SourceKind.BASELINE)

    @classmethod
    def plan(cls, section: str, line: int) -> ExplainSource:
        return cls(kind=SourceKind.PLAN, section=section, line=line if line > 0 else None)

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {"type": self.kind.value}
        if self.section:
            payload["section"] = self.section
        if self.line is not None:
            payload["line"] = self.line
        return payload


@dataclass(frozen=True, slots=True)
class ExplainValue:
    value: str
    source: ExplainSource

    def to_dict(self) -> dict[str, JSONValue]:
        return {"value": self.value, "source": self.source.to_dict()}


@dataclass(frozen=True, slots=True)
class ExplainRule:
    id: ExplainValue
    description: ExplainValue
    condition: ExplainValue | None = None

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {
            "id": self.id.to_dict(),
            "description": self.description.to_dict(),
        }
        if self.condition is not None:
            payload["condition"] = self.condition.to_dict()
        return payload


@dataclass(frozen=True, slots=True)
class ExplainFailureMode:
    id: ExplainValue
    condition: ExplainValue
    response: ExplainValue

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "id": self.id.to_dict(),
            "condition": self.condition.to_dict(),
            "response": self.response.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class ExplainSchema:
    type: ExplainValue

    def to_dict(self) -> dict[str, JSONValue]:
        return {"type": self.type.to_dict()}


@dataclass(frozen=True, slots=True)
class ExplainReport:
    """Provenance mirror of a PromptIR: every scalar paired with its source."""

    version: ExplainValue
    system_role: ExplainValue
    rules: tuple[ExplainRule, ...]
    input_schema: ExplainSchema
    output_schema: ExplainSchema
    failure_modes: tuple[ExplainFailureMode, ...]

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "version": self.version.to_dict(),
            "system_role": self.system_role.to_dict(),
            "rules": [rule.to_dict() for rule in self.rules],
            "input_schema": self.input_schema.to_dict(),
            "output_schema": self.output_schema.to_dict(),
            "failure_modes": [mode.to_dict() for mode in self.failure_modes],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"


# ---------------------------------------------------------------------------
# Decoding helpers
# ---------------------------------------------------------------------------


def _fail(path: str, message: str) -> NoReturn:
    raise IRFormatError(f"{path}: {message}")


def _expect_object(value: object, path: str) -> dict[str, object]:
    if not isinstance(value, Mapping):
        _fail(path, f"expected object, got {type(value).__name__}")
    parsed: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            _fail(path, f"object keys must be strings, got {type(key).__name__}")
        parsed[key] = item
    return parsed


def _as_text(value: object, path: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        _fail(path, f"expected string, got {type(value).__name__}")
    return value


def _as_optional_text(value: object, path: str) -> str | None:
    if value is None:
        return None
    return _as_text(value, path) or None


def _as_list(value: object, path: str) -> list[object]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    _fail(path, f"expected array, got {type(value).__name__}")


def _properties_from(value: object, path: str) -> dict[str, Property]:
    if value is None:
        return {}
    obj = _expect_object(value, path)
    return {name: Property.from_dict(item, f"{path}.{name}") for name, item in obj.items()}


def _schema_or_empty(value: object, path: str) -> Schema:
    if value is None:
        return Schema(type="")
    return Schema.from_dict(value, path)


__all__ = [
    "AuditIssue",
    "Diagnostic",
    "ExplainFailureMode",
    "ExplainReport",
    "ExplainRule",
    "ExplainSchema",
    "ExplainSource",
    "ExplainValue",
    "FailureMode",
    "JSONScalar",
    "JSONValue",
    "Plan",
    "PlanItem",
    "PromptIR",
    "Property",
    "Rule",
    "Schema",
    "Severity",
    "SourceKind",
]
