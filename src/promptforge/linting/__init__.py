"""Plan linting: stable PFxxx diagnostics over the raw plan document."""

from promptforge.linting.linter import format_diagnostic, has_errors, lint_plan

__all__ = ["format_diagnostic", "has_errors", "lint_plan"]
