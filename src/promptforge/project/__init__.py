"""
promptforge — project operations

File: src/promptforge/project/__init__.py
Last updated: 2026-10-19

Purpose
- Project-directory entrypoints: init, compile, lint, migrate and audit.

What should be included in this file
- Re-exports of the workspace, migration and audit entrypoints used by the CLI.
"""

from promptforge.project.audit import audit_project
from promptforge.project.migrate import MigrationResult, migrate_project
from promptforge.project.workspace import (
    CompileResult,
    ProjectLayout,
    compile_project,
    initialize_project,
    lint_project,
)

__all__ = [
    "CompileResult",
    "MigrationResult",
    "ProjectLayout",
    "audit_project",
    "compile_project",
    "initialize_project",
    "lint_project",
    "migrate_project",
]
