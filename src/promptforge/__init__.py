"""
promptforge — plan-to-prompt-IR compiler

File: src/promptforge/__init__.py
Last updated: 2026-10-19

Purpose
- Turn a Markdown plan (Goal / Constraints / Out of Scope) into a deterministic,
  validated prompt IR with a JSON Schema and an optional explain report.

What should be included in this file
- Package version and the high-level compile entrypoints.
"""

from promptforge.compilation import compile_plan, compile_plan_with_explain, validate_ir
from promptforge.linting import lint_plan
from promptforge.plan_ingestion import parse_plan

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "compile_plan",
    "compile_plan_with_explain",
    "lint_plan",
    "parse_plan",
    "validate_ir",
]
