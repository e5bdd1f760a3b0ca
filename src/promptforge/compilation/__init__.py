"""
promptforge — compilation

File: src/promptforge/compilation/__init__.py
Last updated: 2026-10-19

Purpose
- Plan to PromptIR compilation, IR validation, the IR JSON Schema and artifact I/O.

Functional requirements
- Compilation is deterministic: identical plans yield byte-identical artifacts.
"""

from promptforge.compilation.artifacts import (
    read_ir,
    read_ir_payload,
    write_explain_report,
    write_ir,
    write_ir_schema,
)
from promptforge.compilation.compiler import (
    BASELINE_FAILURE_MODES,
    BASELINE_RULES,
    compile_plan,
    compile_plan_with_explain,
    generate_system_role,
)
from promptforge.compilation.schema import prompt_ir_schema, prompt_ir_schema_json
from promptforge.compilation.validator import validate_ir

__all__ = [
    "BASELINE_FAILURE_MODES",
    "BASELINE_RULES",
    "compile_plan",
    "compile_plan_with_explain",
    "generate_system_role",
    "prompt_ir_schema",
    "prompt_ir_schema_json",
    "read_ir",
    "read_ir_payload",
    "validate_ir",
    "write_explain_report",
    "write_ir",
    "write_ir_schema",
]
