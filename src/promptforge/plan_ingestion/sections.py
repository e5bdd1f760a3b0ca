"""
promptforge — plan section extraction

File: src/promptforge/plan_ingestion/sections.py
Last updated: 2026-10-19

Purpose
- Locate `## Goal`, `## Constraints` and `## Out of Scope` in a plan document and return their bodies.

What should be included in this file
- Newline normalization and HTML comment stripping that keeps line numbers stable.
- A single outline scan shared by the plan parser and the linter.

Functional requirements
- A heading is `##` at column 1 followed by at least one whitespace character; `##Goal` is not a heading.
- A body ends at the next heading (recognized or not) or at a line whose trimmed content is `---`.
- For each recognized name, the first heading wins.

Non-functional requirements
- Pure functions; no I/O.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from promptforge.constants import KNOWN_SECTIONS

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

NOT_FOUND: Final[int] = -1
SEPARATOR_LINE: Final[str] = "---"

_HEADING_RE: Final[re.Pattern[str]] = re.compile(r"^##\s+(?P<name>\S.*?)\s*$")
_COMMENT_OPEN: Final[str] = "<!--"
_COMMENT_CLOSE: Final[str] = "-->"
_KNOWN_KEYS: Final[dict[str, str]] = {name.lower(): name for name in KNOWN_SECTIONS}


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def section_key(name: str) -> str:
    return name.strip().lower()


def canonical_section_name(name: str) -> str | None:
    """Return the canonical spelling of a recognized section, else ``None``."""

    return _KNOWN_KEYS.get(section_key(name))


def strip_html_comments(lines: Sequence[str]) -> list[str]:
    """Remove ``<!-- ... -->`` spans, including ones that cross lines.

    The result has exactly one entry per input line; a line entirely inside a
    comment becomes ``""``.
    """

    visible: list[str] = []
    in_comment = False
    for raw_line in lines:
        sanitized_line, in_comment = _strip_html_comments(raw_line, in_comment)
        visible.append(sanitized_line)
    return visible


def _strip_html_comments(line: str, in_comment: bool) -> tuple[str, bool]:
    output: list[str] = []
    cursor = 0

    while cursor < len(line):
        if in_comment:
            end = line.find(_COMMENT_CLOSE, cursor)
            if end < 0:
                return ("".join(output), True)
            cursor = end + len(_COMMENT_CLOSE)
            in_comment = False
            continue

        start = line.find(_COMMENT_OPEN, cursor)
        if start < 0:
            output.append(line[cursor:])
            break
        output.append(line[cursor:start])
        cursor = start + len(_COMMENT_OPEN)
        in_comment = True

    return ("".join(output), in_comment)


@dataclass(frozen=True, slots=True)
class Heading:
    """A `##` heading line. ``line`` is 1-based."""

    name: str
    line: int

    @property
    def key(self) -> str:
        return section_key(self.name)

    @property
    def canonical_name(self) -> str | None:
        return canonical_section_name(self.name)

    @property
    def is_known(self) -> bool:
        return self.canonical_name is not None


@dataclass(frozen=True, slots=True)
class Section:
    """Body of one section with comments already removed."""

    heading: Heading
    lines: tuple[str, ...]

    @property
    def start_line(self) -> int:
        return self.heading.line + 1

    @property
    def text(self) -> str:
        return "\n".join(self.lines).strip()

    def numbered_lines(self) -> Iterator[tuple[int, str]]:
        for offset, line in enumerate(self.lines):
            yield (self.start_line + offset, line)


@dataclass(frozen=True, slots=True)
class DocumentOutline:
    """Comment-free lines of a plan document plus every heading found in them."""

    lines: tuple[str, ...]
    headings: tuple[Heading, ...]

    def first(self, name: str) -> Heading | None:
        key = section_key(name)
        for heading in self.headings:
            if heading.key == key:
                return heading
        return None

    def occurrences(self, name: str) -> tuple[Heading, ...]:
        key = section_key(name)
        return tuple(heading for heading in self.headings if heading.key == key)

    def section(self, name: str) -> Section | None:
        heading = self.first(name)
        if heading is None:
            return None
        return self.body_of(heading)

    def body_of(self, heading: Heading) -> Section:
        body: list[str] = []
        # heading.line is 1-based, so it is also the 0-based index of the next line.
        for line in self.lines[heading.line :]:
            if _HEADING_RE.match(line) is not None:
                break
            if line.strip() == SEPARATOR_LINE:
                break
            body.append(line)
        return Section(heading=heading, lines=tuple(body))


def scan_outline(text: str) -> DocumentOutline:
    lines = tuple(strip_html_comments(normalize_newlines(text).split("\n")))
    headings: list[Heading] = []
    for index, line in enumerate(lines):
        match = _HEADING_RE.match(line)
        if match is None:
            continue
        headings.append(Heading(name=match.group("name").strip(), line=index + 1))
    return DocumentOutline(lines=lines, headings=tuple(headings))


def extract_section(text: str, name: str) -> tuple[int, str]:
    """Return ``(body_start_line, body_text)`` for the first ``## name`` heading.

    ``(-1, "")`` when the heading is absent.
    """

    section = scan_outline(text).section(name)
    if section is None:
        return (NOT_FOUND, "")
    return (section.start_line, section.text)


__all__ = [
    "DocumentOutline",
    "Heading",
    "NOT_FOUND",
    "SEPARATOR_LINE",
    "Section",
    "canonical_section_name",
    "extract_section",
    "normalize_newlines",
    "scan_outline",
    "section_key",
    "strip_html_comments",
]
