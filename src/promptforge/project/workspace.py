"""
promptforge — project workspace operations

File: src/promptforge/project/workspace.py
Last updated: 2026-10-19

Purpose
- Resolve where a project's plan and artifacts live and run init / compile / lint against them.

What should be included in this file
- ProjectLayout with defaults and config overrides.
- Scaffolding of promptforge/plan.md from a template.
- Compile with validate-before-write and optional explain report.

Functional requirements
- init never overwrites an existing plan.
- compile writes the IR and the schema artifact on every success.
- A missing plan tells the user to run `promptforge init`.

Non-functional requirements
- Artifact writes are atomic.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import structlog

from promptforge.compilation.artifacts import (
    read_artifact_text,
    write_explain_report,
    write_ir,
    write_ir_schema,
)
from promptforge.compilation.compiler import compile_plan_with_explain
from promptforge.constants import IR_EXPLAIN_FILE, IR_FILE, IR_SCHEMA_FILE, PLAN_FILE
from promptforge.domain.errors import ArtifactIOError
from promptforge.domain.models import Diagnostic, ExplainReport, PromptIR
from promptforge.linting.linter import lint_plan
from promptforge.templates.registry import render_plan
from promptforge.utils.fs import atomic_write, ensure_parent

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ProjectLayout:
    """Absolute locations of a project's plan and generated artifacts."""

    project_dir: Path
    plan_path: Path
    ir_path: Path
    schema_path: Path
    explain_path: Path

    @classmethod
    def default(cls, project_dir: Path | str) -> ProjectLayout:
        root = Path(project_dir)
        return cls(
            project_dir=root,
            plan_path=root / PLAN_FILE,
            ir_path=root / IR_FILE,
            schema_path=root / IR_SCHEMA_FILE,
            explain_path=root / IR_EXPLAIN_FILE,
        )

    @classmethod
    def from_config(cls, project_dir: Path | str, config: Mapping[str, object]) -> ProjectLayout:
        """Layout from the ``[paths]`` table; absent keys keep their defaults."""

        layout = cls.default(project_dir)
        paths = config.get("paths")
        if not isinstance(paths, Mapping):
            return layout

        def _pick(key: str, fallback: Path) -> Path:
            value = paths.get(key)
            if not isinstance(value, str):
                return fallback
            candidate = Path(value)
            return candidate if candidate.is_absolute() else layout.project_dir / candidate

        return cls(
            project_dir=layout.project_dir,
            plan_path=_pick("plan", layout.plan_path),
            ir_path=_pick("ir", layout.ir_path),
            schema_path=_pick("schema", layout.schema_path),
            explain_path=_pick("explain", layout.explain_path),
        )


@dataclass(frozen=True, slots=True)
class CompileResult:
    ir: PromptIR
    ir_path: Path
    schema_path: Path
    explain: ExplainReport | None = None
    explain_path: Path | None = None


def _as_layout(project: ProjectLayout | Path | str) -> ProjectLayout:
    return project if isinstance(project, ProjectLayout) else ProjectLayout.default(project)


def require_project_dir(project_dir: Path | str) -> Path:
    """Return ``project_dir`` as a Path, failing if it is empty or missing."""

    if str(project_dir) == "":
        raise ArtifactIOError("project directory cannot be empty", path="")
    root = Path(project_dir)
    if not root.exists():
        raise ArtifactIOError(f"project directory does not exist: {root}", path=root)
    if not root.is_dir():
        raise ArtifactIOError(f"project path is not a directory: {root}", path=root)
    return root


def read_plan(layout: ProjectLayout) -> str:
    if not layout.plan_path.exists():
        raise ArtifactIOError(
            f"plan.md not found at {layout.plan_path}. Run 'promptforge init' first",
            path=layout.plan_path,
        )
    return read_artifact_text(layout.plan_path, "plan.md")


def initialize_project(
    project: ProjectLayout | Path | str,
    description: str = "",
    template_name: str | None = None,
) -> Path:
    """Create the plan document from a template; returns its path."""

    layout = _as_layout(project)
    require_project_dir(layout.project_dir)
    if layout.plan_path.exists():
        raise ArtifactIOError(
            f"plan.md already exists at {layout.plan_path}", path=layout.plan_path
        )

    content = render_plan(template_name, description)
    try:
        ensure_parent(layout.plan_path)
        atomic_write(layout.plan_path, content)
    except PermissionError as exc:
        raise ArtifactIOError(
            f"permission denied: cannot write to {layout.plan_path}", path=layout.plan_path
        ) from exc
    except OSError as exc:
        raise ArtifactIOError(
            f"failed to create {layout.plan_path}: {exc}", path=layout.plan_path
        ) from exc

    logger.info(
        "project_initialized",
        plan=str(layout.plan_path),
        template=template_name or "blank",
        described=bool(description.strip()),
    )
    return layout.plan_path


def compile_project(
    project: ProjectLayout | Path | str,
    *,
    explain: bool = False,
) -> CompileResult:
    """Compile the project plan and write the IR, the schema and optionally the explain report."""

    layout = _as_layout(project)
    require_project_dir(layout.project_dir)
    content = read_plan(layout)

    ir, report = compile_plan_with_explain(content)
    write_ir(ir, layout.ir_path)
    write_ir_schema(layout.schema_path)
    if explain:
        write_explain_report(report, layout.explain_path)

    logger.info(
        "ir_compiled",
        plan=str(layout.plan_path),
        ir=str(layout.ir_path),
        rules=len(ir.rules),
        failure_modes=len(ir.failure_modes),
        explain=explain,
    )
    return CompileResult(
        ir=ir,
        ir_path=layout.ir_path,
        schema_path=layout.schema_path,
        explain=report if explain else None,
        explain_path=layout.explain_path if explain else None,
    )


def lint_project(project: ProjectLayout | Path | str) -> list[Diagnostic]:
    layout = _as_layout(project)
    require_project_dir(layout.project_dir)
    diagnostics = lint_plan(read_plan(layout))
    logger.info("plan_linted", plan=str(layout.plan_path), diagnostics=len(diagnostics))
    return diagnostics


__all__ = [
    "CompileResult",
    "ProjectLayout",
    "compile_project",
    "initialize_project",
    "lint_project",
    "read_plan",
    "require_project_dir",
]
