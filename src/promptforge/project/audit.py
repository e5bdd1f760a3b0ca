"""Read-only integrity audit of a project's prompt.ir.json and schema artifact."""

from __future__ import annotations

from pathlib import Path

import structlog

from promptforge.compilation.artifacts import read_ir_payload
from promptforge.compilation.schema import prompt_ir_schema_json, schema_violations
from promptforge.compilation.validator import validate_ir
from promptforge.constants import CURRENT_IR_VERSION
from promptforge.domain.errors import ArtifactIOError, IRValidationError
from promptforge.domain.models import AuditIssue, PromptIR, Severity
from promptforge.project.workspace import ProjectLayout, require_project_dir

logger = structlog.get_logger(__name__)


def _read_schema_bytes(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except PermissionError as exc:
        raise ArtifactIOError(
            f"permission denied: cannot read {path.name} at {path}", path=path
        ) from exc
    except OSError as exc:
        raise ArtifactIOError(f"failed to read {path.name} at {path}: {exc}", path=path) from exc


def _schema_issues(schema_path: Path) -> list[AuditIssue]:
    on_disk = _read_schema_bytes(schema_path)
    if on_disk is None:
        return [AuditIssue(Severity.WARN, f"{schema_path.name} is missing")]
    if on_disk != prompt_ir_schema_json().encode("utf-8"):
        return [
            AuditIssue(
                Severity.WARN,
                f"{schema_path.name} does not match the current schema. "
                "Run 'promptforge compile' to refresh.",
            )
        ]
    return []


def audit_project(project: ProjectLayout | Path | str) -> list[AuditIssue]:
    """Check the IR and schema artifacts without modifying anything.

    Unreadable or unparsable IR files raise; everything else is reported as an
    AuditIssue.
    """

    layout = project if isinstance(project, ProjectLayout) else ProjectLayout.default(project)
    require_project_dir(layout.project_dir)

    payload = read_ir_payload(layout.ir_path)
    ir = PromptIR.from_dict(payload)

    issues: list[AuditIssue] = []
    try:
        validate_ir(ir)
    except IRValidationError as exc:
        issues.append(AuditIssue(Severity.ERROR, f"IR validation failed: {exc}"))

    if ir.version != CURRENT_IR_VERSION:
        issues.append(
            AuditIssue(
                Severity.ERROR,
                f"IR version {ir.version} does not match current {CURRENT_IR_VERSION}. "
                "Run 'promptforge migrate'.",
            )
        )

    # Shape problems already reported above would show up again as schema violations.
    if not issues:
        violations = schema_violations(payload)
        if violations:
            issues.append(
                AuditIssue(
                    Severity.ERROR,
                    f"{layout.ir_path.name} does not conform to the IR JSON Schema: "
                    + "; ".join(violations),
                )
            )

    issues.extend(_schema_issues(layout.schema_path))

    logger.info(
        "ir_audited",
        ir=str(layout.ir_path),
        errors=sum(1 for issue in issues if issue.severity is Severity.ERROR),
        warnings=sum(1 for issue in issues if issue.severity is Severity.WARN),
    )
    return issues


__all__ = ["audit_project"]
