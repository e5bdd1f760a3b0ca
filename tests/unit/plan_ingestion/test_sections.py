"""
promptforge — unit tests for plan section extraction

File: tests/unit/plan_ingestion/test_sections.py
Last updated: 2026-10-19

Purpose
- Pin down heading recognition, body boundaries and line numbering of the shared outline scan.

What this test file should cover
- `## Name` detection rules and case-insensitive lookup.
- Body termination at the next heading and at `---`.
- HTML comment stripping, including multi-line comments.
- Newline normalization (CRLF and lone CR).
"""

from __future__ import annotations

import pytest

from promptforge.plan_ingestion.sections import (
    NOT_FOUND,
    canonical_section_name,
    extract_section,
    normalize_newlines,
    scan_outline,
    strip_html_comments,
)


@pytest.mark.unit
def test_extract_section_returns_body_and_first_body_line() -> None:
    text = "# Plan\n\n## Goal\nShip it quickly\n\n## Constraints\n- One\n"
    start, body = extract_section(text, "Goal")
    assert start == 4
    assert body == "Ship it quickly"


@pytest.mark.unit
def test_extract_section_missing_heading() -> None:
    assert extract_section("## Goal\nx\n", "Constraints") == (NOT_FOUND, "")


@pytest.mark.unit
def test_heading_lookup_is_case_insensitive() -> None:
    text = "## out of scope\n- Billing\n"
    start, body = extract_section(text, "Out of Scope")
    assert start == 2
    assert body == "- Billing"


@pytest.mark.unit
def test_heading_requires_space_after_hashes() -> None:
    outline = scan_outline("##Goal\ntext\n## Goal\nreal\n")
    assert [heading.line for heading in outline.headings] == [3]
    section = outline.section("Goal")
    assert section is not None
    assert section.text == "real"


@pytest.mark.unit
def test_hashes_without_a_name_are_not_a_heading() -> None:
    outline = scan_outline("## Goal\nship it\n##   \nmore\n")
    assert [heading.line for heading in outline.headings] == [1]
    section = outline.section("Goal")
    assert section is not None
    assert section.text.startswith("ship it")
    assert section.text.endswith("more")


@pytest.mark.unit
def test_level_three_heading_is_not_a_section_heading() -> None:
    outline = scan_outline("## Goal\nfirst\n### Detail\nsecond\n")
    section = outline.section("Goal")
    assert section is not None
    assert section.text == "first\n### Detail\nsecond"


@pytest.mark.unit
def test_body_stops_at_next_heading_even_if_unrecognized() -> None:
    text = "## Goal\nDo the thing\n## Notes\nnot part of goal\n"
    assert extract_section(text, "Goal") == (2, "Do the thing")


@pytest.mark.unit
def test_body_stops_at_separator_line() -> None:
    text = "## Constraints\n- A\n  ---  \n- B\n"
    assert extract_section(text, "Constraints") == (2, "- A")


@pytest.mark.unit
def test_first_occurrence_wins() -> None:
    text = "## Goal\nfirst goal\n## Goal\nsecond goal\n"
    outline = scan_outline(text)
    assert [heading.line for heading in outline.occurrences("goal")] == [1, 3]
    assert extract_section(text, "Goal") == (2, "first goal")


@pytest.mark.unit
def test_heading_trailing_whitespace_is_ignored() -> None:
    outline = scan_outline("##   Goal   \nbody\n")
    assert outline.headings[0].name == "Goal"
    assert outline.headings[0].is_known


@pytest.mark.unit
def test_canonical_section_name() -> None:
    assert canonical_section_name("  CONSTRAINTS ") == "Constraints"
    assert canonical_section_name("out of scope") == "Out of Scope"
    assert canonical_section_name("Notes") is None


@pytest.mark.unit
def test_normalize_newlines() -> None:
    assert normalize_newlines("a\r\nb\rc\n") == "a\nb\nc\n"


@pytest.mark.unit
def test_crlf_document_keeps_line_numbers() -> None:
    text = "# Plan\r\n\r\n## Goal\r\nWindows goal\r\n"
    assert extract_section(text, "Goal") == (4, "Windows goal")


@pytest.mark.unit
def test_strip_html_comments_single_line() -> None:
    assert strip_html_comments(["keep <!-- drop --> this"]) == ["keep  this"]


@pytest.mark.unit
def test_strip_html_comments_multi_line_preserves_line_count() -> None:
    lines = ["before <!-- start", "inside", "end --> after", "plain"]
    assert strip_html_comments(lines) == ["before ", "", " after", "plain"]


@pytest.mark.unit
def test_commented_out_heading_is_not_detected() -> None:
    text = "<!--\n## Goal\nhidden\n-->\n## Goal\nvisible\n"
    outline = scan_outline(text)
    assert [heading.line for heading in outline.headings] == [5]
    assert extract_section(text, "Goal") == (6, "visible")


@pytest.mark.unit
def test_numbered_lines_are_document_lines() -> None:
    outline = scan_outline("# T\n## Constraints\n- a\n- b\n")
    section = outline.section("Constraints")
    assert section is not None
    assert list(section.numbered_lines()) == [(3, "- a"), (4, "- b"), (5, "")]
