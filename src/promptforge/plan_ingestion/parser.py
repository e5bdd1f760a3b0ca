"""Plan document parsing: section bodies into ordered, deduplicated list items."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from promptforge.constants import SECTION_CONSTRAINTS, SECTION_GOAL, SECTION_OUT_OF_SCOPE
from promptforge.domain.errors import PlanStructureError
from promptforge.domain.models import Plan, PlanItem
from promptforge.plan_ingestion.sections import Section, scan_outline

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

_BULLET_RE: Final[re.Pattern[str]] = re.compile(r"^\s*[-*•]\s+")
_NUMBERED_RE: Final[re.Pattern[str]] = re.compile(r"^\d+\.\s+")
_COMMENT_PREFIX: Final[str] = "<!--"


def iter_list_items(numbered_lines: Iterable[tuple[int, str]]) -> Iterator[PlanItem]:
    """Yield one item per list-shaped line, markers removed, no deduplication."""

    for line_number, raw_line in numbered_lines:
        line = raw_line.strip()
        if not line or line.startswith(_COMMENT_PREFIX):
            continue
        line = _BULLET_RE.sub("", line, count=1)
        line = _NUMBERED_RE.sub("", line, count=1).strip()
        if not line:
            continue
        yield PlanItem(text=line, line=line_number)


def normalize_list(body: str, *, start_line: int = 1) -> tuple[PlanItem, ...]:
    """Turn a section body into items, dropping case-insensitive repeats.

    ``start_line`` is the document line of the first body line. The first
    occurrence of a repeated item keeps its position and line.
    """

    lines = body.split("\n")
    seen: dict[str, PlanItem] = {}
    for item in iter_list_items(enumerate(lines, start=start_line)):
        seen.setdefault(item.text.lower(), item)
    if seen:
        return tuple(seen.values())

    cleaned = body.strip()
    if not cleaned or cleaned.startswith(_COMMENT_PREFIX):
        return ()
    first_line = next(
        (number for number, line in enumerate(lines, start=start_line) if line.strip()),
        start_line,
    )
    return (PlanItem(text=cleaned, line=first_line),)


def _section_items(section: Section | None) -> tuple[PlanItem, ...]:
    if section is None:
        return ()
    return normalize_list("\n".join(section.lines), start_line=section.start_line)


def decode_plan(content: bytes | str) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PlanStructureError(f"plan content is not valid UTF-8: {exc}") from exc


def parse_plan(content: bytes | str) -> Plan:
    """Parse a plan document.

    Raises ``PlanStructureError`` when the document is empty or the Goal section
    is missing or blank. Constraints and Out of Scope are optional.
    """

    text = decode_plan(content)
    if not text.strip():
        raise PlanStructureError("plan content is empty", line=1)

    outline = scan_outline(text)
    goal_section = outline.section(SECTION_GOAL)
    if goal_section is None:
        raise PlanStructureError(
            "Goal section is required but not found. Expected: ## Goal", line=1
        )
    goal = goal_section.text
    if not goal:
        raise PlanStructureError(
            f"Goal section is empty at line {goal_section.heading.line}. "
            "Please provide a goal description",
            line=goal_section.heading.line,
        )

    return Plan(
        goal=goal,
        goal_line=goal_section.start_line,
        constraints=_section_items(outline.section(SECTION_CONSTRAINTS)),
        out_of_scope=_section_items(outline.section(SECTION_OUT_OF_SCOPE)),
    )


__all__ = ["decode_plan", "iter_list_items", "normalize_list", "parse_plan"]
