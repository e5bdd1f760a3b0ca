"""Output rendering abstraction for the promptforge CLI.

File: src/promptforge/ui/render.py
Last updated: 2026-10-19

Purpose
- Provide a thin rendering layer for CLI output.
- Respect NO_COLOR environment variable and --no-color CLI flag.

What should be included in this file
- CLIRenderer class with methods for common output patterns.
- Factory function to create a renderer with appropriate settings.

Functional requirements
- Diagnostic and audit lines keep their exact machine-readable shape regardless of color.
- Command results go to stdout; run_cli owns stderr.

Non-functional requirements
- No mandatory dependencies beyond the standard library.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from promptforge.domain.models import AuditIssue


def _color_allowed(no_color_flag: bool) -> bool:
    """Check whether color output should be attempted."""

    if no_color_flag:
        return False
    if os.environ.get("NO_COLOR", ""):
        return False
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


class CLIRenderer:
    """Thin CLI output renderer.

    Produces clean, deterministic plain-text output.
    """

    def __init__(self, *, no_color: bool = False) -> None:
        self._color = _color_allowed(no_color)

    @property
    def color(self) -> bool:
        return self._color

    def text(self, line: str) -> None:
        print(line)

    def lines(self, entries: Sequence[str]) -> None:
        for entry in entries:
            print(entry)

    def audit_issue(self, issue: AuditIssue) -> None:
        print(f"{issue.severity.value}: {issue.message}")

    def next_steps(self, steps: Sequence[str]) -> None:
        """Print actionable next-step hints."""

        if not steps:
            return
        print("\nNext steps:")
        for step in steps:
            print(f"  $ {step}")


def create_renderer(*, no_color: bool = False) -> CLIRenderer:
    return CLIRenderer(no_color=no_color)


__all__ = ["CLIRenderer", "create_renderer"]
