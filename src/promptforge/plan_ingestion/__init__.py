"""
promptforge — plan ingestion

File: src/promptforge/plan_ingestion/__init__.py
Last updated: 2026-10-19

Purpose
- Turn a human-authored plan.md into a structured Plan.

What should be included in this file
- Section extraction shared with the linter.
- List normalization and Goal enforcement.
"""

from promptforge.plan_ingestion.parser import iter_list_items, normalize_list, parse_plan
from promptforge.plan_ingestion.sections import (
    DocumentOutline,
    Heading,
    Section,
    extract_section,
    scan_outline,
)

__all__ = [
    "DocumentOutline",
    "Heading",
    "Section",
    "extract_section",
    "iter_list_items",
    "normalize_list",
    "parse_plan",
    "scan_outline",
]
