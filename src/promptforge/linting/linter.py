"""
promptforge — plan linter

File: src/promptforge/linting/linter.py
Last updated: 2026-10-19

Purpose
- Report structural and quality problems in a plan document without compiling it.

What should be included in this file
- Stable diagnostic codes (PF1xx errors, PF2xx warnings) and their messages.
- Heading checks: unknown names, repeated recognized names.
- Section checks: Goal presence and length, Constraints and Out of Scope presence, vague constraints.

Functional requirements
- Shares the section outline with the plan parser, so lint and compile agree on section bounds.
- Never raises on malformed input; every problem is a Diagnostic.

Non-functional requirements
- Output order is deterministic: heading diagnostics in document order, then section checks.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from promptforge.constants import SECTION_CONSTRAINTS, SECTION_GOAL, SECTION_OUT_OF_SCOPE
from promptforge.domain.models import Diagnostic, Severity
from promptforge.plan_ingestion.parser import decode_plan, iter_list_items
from promptforge.plan_ingestion.sections import DocumentOutline, scan_outline

if TYPE_CHECKING:
    from collections.abc import Iterable

CODE_STRUCTURE: Final[str] = "PF100"
CODE_EMPTY_GOAL: Final[str] = "PF101"
CODE_DUPLICATE_SECTION: Final[str] = "PF102"
CODE_UNKNOWN_SECTION: Final[str] = "PF103"
CODE_CONSTRAINTS_MISSING: Final[str] = "PF200"
CODE_OUT_OF_SCOPE_MISSING: Final[str] = "PF201"
CODE_SHORT_GOAL: Final[str] = "PF202"
CODE_VAGUE_CONSTRAINT: Final[str] = "PF203"

MIN_GOAL_CHARS: Final[int] = 15
MIN_GOAL_WORDS: Final[int] = 3
VAGUE_TERMS: Final[tuple[str, ...]] = ("etc", "misc", "various", "stuff", "things")

_VAGUE_TERMS_RE: Final[re.Pattern[str]] = re.compile(
    r"\b(" + "|".join(VAGUE_TERMS) + r")\b", re.ASCII
)


def _error(code: str, message: str, line: int = 1) -> Diagnostic:
    return Diagnostic(severity=Severity.ERROR, code=code, message=message, line=line)


def _warn(code: str, message: str, line: int = 1) -> Diagnostic:
    return Diagnostic(severity=Severity.WARN, code=code, message=message, line=line)


def is_goal_too_short(goal: str) -> bool:
    stripped = goal.strip()
    return len(stripped) < MIN_GOAL_CHARS or len(stripped.split()) < MIN_GOAL_WORDS


def is_vague(text: str) -> bool:
    return _VAGUE_TERMS_RE.search(text.lower()) is not None


def _heading_diagnostics(outline: DocumentOutline) -> list[Diagnostic]:
    diagnostics = [
        _error(CODE_UNKNOWN_SECTION, f"unknown section heading: {heading.name}", heading.line)
        for heading in outline.headings
        if not heading.is_known
    ]
    first_seen: dict[str, int] = {}
    for heading in outline.headings:
        if not heading.is_known:
            continue
        if heading.key in first_seen:
            diagnostics.append(
                _error(
                    CODE_DUPLICATE_SECTION,
                    f"duplicate section heading: {heading.name}",
                    heading.line,
                )
            )
            continue
        first_seen[heading.key] = heading.line
    return diagnostics


def _goal_diagnostics(outline: DocumentOutline) -> list[Diagnostic]:
    section = outline.section(SECTION_GOAL)
    if section is None:
        return [_error(CODE_STRUCTURE, "missing required section: Goal")]
    goal = section.text
    if not goal:
        return [_error(CODE_EMPTY_GOAL, "Goal section is empty", section.heading.line)]
    if is_goal_too_short(goal):
        return [
            _warn(CODE_SHORT_GOAL, "Goal looks too short; add more detail", section.heading.line)
        ]
    return []


def _constraint_diagnostics(outline: DocumentOutline) -> list[Diagnostic]:
    section = outline.section(SECTION_CONSTRAINTS)
    if section is None:
        return [_warn(CODE_CONSTRAINTS_MISSING, "Constraints section is missing")]
    items = list(iter_list_items(section.numbered_lines()))
    diagnostics: list[Diagnostic] = []
    if not items:
        diagnostics.append(
            _warn(CODE_CONSTRAINTS_MISSING, "Constraints section is empty", section.heading.line)
        )
    diagnostics.extend(
        _warn(
            CODE_VAGUE_CONSTRAINT,
            "Constraint looks vague; avoid words like 'etc' or 'various'",
            item.line,
        )
        for item in items
        if is_vague(item.text)
    )
    return diagnostics


def _out_of_scope_diagnostics(outline: DocumentOutline) -> list[Diagnostic]:
    section = outline.section(SECTION_OUT_OF_SCOPE)
    if section is None:
        return [_warn(CODE_OUT_OF_SCOPE_MISSING, "Out of Scope section is missing")]
    if not any(True for _ in iter_list_items(section.numbered_lines())):
        return [
            _warn(
                CODE_OUT_OF_SCOPE_MISSING, "Out of Scope section is empty", section.heading.line
            )
        ]
    return []


def lint_plan(content: bytes | str) -> list[Diagnostic]:
    """Lint plan document content and return diagnostics in report order."""

    try:
        text = decode_plan(content)
    except ValueError as exc:
        return [_error(CODE_STRUCTURE, str(exc))]
    if not text.strip():
        return [_error(CODE_STRUCTURE, "plan content is empty")]

    outline = scan_outline(text)
    return [
        *_heading_diagnostics(outline),
        *_goal_diagnostics(outline),
        *_constraint_diagnostics(outline),
        *_out_of_scope_diagnostics(outline),
    ]


def has_errors(diagnostics: Iterable[Diagnostic], *, warnings_as_errors: bool = False) -> bool:
    for diagnostic in diagnostics:
        if diagnostic.severity is Severity.ERROR or warnings_as_errors:
            return True
    return False


def format_diagnostic(path: str, diagnostic: Diagnostic) -> str:
    """``path:line:col: severity CODE message``"""

    return (
        f"{path}:{diagnostic.line}:{diagnostic.column}: "
        f"{diagnostic.severity.value} {diagnostic.code} {diagnostic.message}"
    )


__all__ = [
    "CODE_CONSTRAINTS_MISSING",
    "CODE_DUPLICATE_SECTION",
    "CODE_EMPTY_GOAL",
    "CODE_OUT_OF_SCOPE_MISSING",
    "CODE_SHORT_GOAL",
    "CODE_STRUCTURE",
    "CODE_UNKNOWN_SECTION",
    "CODE_VAGUE_CONSTRAINT",
    "VAGUE_TERMS",
    "format_diagnostic",
    "has_errors",
    "is_goal_too_short",
    "is_vague",
    "lint_plan",
]
