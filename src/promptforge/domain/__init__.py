"""
promptforge — domain layer

File: src/promptforge/domain/__init__.py
Last updated: 2026-10-19

Purpose
- Types shared across the pipeline: Plan, PromptIR, Diagnostic, AuditIssue, ExplainReport.

What should be included in this file
- Re-export of core domain entities for convenience.
- Keep domain layer free of IO side effects.
"""

from promptforge.domain.errors import (
    ArtifactIOError,
    IRFormatError,
    IRValidationError,
    IRVersionError,
    PlanStructureError,
    PromptForgeError,
    TemplateError,
)
from promptforge.domain.models import (
    AuditIssue,
    Diagnostic,
    ExplainReport,
    ExplainSource,
    ExplainValue,
    FailureMode,
    Plan,
    PlanItem,
    PromptIR,
    Property,
    Rule,
    Schema,
    Severity,
    SourceKind,
)

__all__ = [
    "ArtifactIOError",
    "AuditIssue",
    "Diagnostic",
    "ExplainReport",
    "ExplainSource",
    "ExplainValue",
    "FailureMode",
    "IRFormatError",
    "IRValidationError",
    "IRVersionError",
    "Plan",
    "PlanItem",
    "PlanStructureError",
    "PromptForgeError",
    "PromptIR",
    "Property",
    "Rule",
    "Schema",
    "Severity",
    "SourceKind",
    "TemplateError",
]
