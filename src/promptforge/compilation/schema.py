"""JSON Schema describing the persisted PromptIR artifact, plus conformance checks."""

from __future__ import annotations

import json
from typing import Any, Final

import jsonschema

from promptforge.constants import JSON_SCHEMA_DIALECT, PROMPT_IR_SCHEMA_ID

SCHEMA_TITLE: Final[str] = "PromptForge Prompt IR"

_NON_EMPTY_STRING: Final[dict[str, Any]] = {"type": "string", "minLength": 1}


def _closed_object(required: list[str], properties: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "object",
        "required": required,
        "additionalProperties": False,
        "properties": properties,
    }


def prompt_ir_schema() -> dict[str, Any]:
    """Return a fresh copy of the PromptIR JSON Schema (draft 2020-12)."""

    property_map = {"type": "object", "additionalProperties": {"$ref": "#/$defs/property"}}
    return {
        "$schema": JSON_SCHEMA_DIALECT,
        "$id": PROMPT_IR_SCHEMA_ID,
        "title": SCHEMA_TITLE,
        **_closed_object(
            ["version", "system_role", "rules", "input_schema", "output_schema", "failure_modes"],
            {
                "version": dict(_NON_EMPTY_STRING),
                "system_role": dict(_NON_EMPTY_STRING),
                "rules": {"type": "array", "minItems": 1, "items": {"$ref": "#/$defs/rule"}},
                "input_schema": {"$ref": "#/$defs/schema"},
                "output_schema": {"$ref": "#/$defs/schema"},
                "failure_modes": {
                    "type": "array",
                    "minItems": 1,
                    "items": {"$ref": "#/$defs/failure_mode"},
                },
            },
        ),
        "$defs": {
            "rule": _closed_object(
                ["id", "description"],
                {
                    "id": dict(_NON_EMPTY_STRING),
                    "description": dict(_NON_EMPTY_STRING),
                    "condition": {"type": "string"},
                },
            ),
            "schema": _closed_object(
                ["type"],
                {
                    "type": dict(_NON_EMPTY_STRING),
                    "properties": dict(property_map),
                    "required": {"type": "array", "items": {"type": "string"}},
                    "items": {"$ref": "#/$defs/schema"},
                },
            ),
            "property": _closed_object(
                ["type"],
                {
                    "type": dict(_NON_EMPTY_STRING),
                    "description": {"type": "string"},
                    "enum": {"type": "array"},
                    "properties": dict(property_map),
                    "items": {"$ref": "#/$defs/schema"},
                },
            ),
            "failure_mode": _closed_object(
                ["id", "condition", "response"],
                {
                    "id": dict(_NON_EMPTY_STRING),
                    "condition": dict(_NON_EMPTY_STRING),
                    "response": dict(_NON_EMPTY_STRING),
                },
            ),
        },
    }


def prompt_ir_schema_json() -> str:
    """Serialized schema artifact: sorted keys, two-space indent, trailing newline."""

    return json.dumps(prompt_ir_schema(), indent=2, sort_keys=True) + "\n"


def schema_violations(payload: object) -> list[str]:
    """Return every way ``payload`` breaks the PromptIR JSON Schema, path-ordered."""

    validator = jsonschema.Draft202012Validator(prompt_ir_schema())
    errors = sorted(
        validator.iter_errors(payload),
        key=lambda error: (error.json_path, error.message),
    )
    return [f"{error.json_path}: {error.message}" for error in errors]


__all__ = [
    "SCHEMA_TITLE",
    "prompt_ir_schema",
    "prompt_ir_schema_json",
    "schema_violations",
]
