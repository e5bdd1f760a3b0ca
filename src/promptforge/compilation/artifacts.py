"""
promptforge — artifact persistence

File: src/promptforge/compilation/artifacts.py
Last updated: 2026-10-19

Purpose
- Read and write the IR, its JSON Schema and the explain report.

What should be included in this file
- Validate-before-write gate for the IR.
- Translation of OS failures into ArtifactIOError messages that name the path.

Functional requirements
- Writes are atomic (temp file + replace); no retries.
- A failed validation never touches the destination file.

Non-functional requirements
- Output bytes are a pure function of the in-memory artifact.
"""

from __future__ import annotations

import errno
import json
from pathlib import Path
from typing import TYPE_CHECKING, Final

import structlog

from promptforge.compilation.schema import prompt_ir_schema_json
from promptforge.compilation.validator import validate_ir
from promptforge.domain.errors import ArtifactIOError, IRFormatError, IRValidationError
from promptforge.domain.models import PromptIR
from promptforge.utils.fs import atomic_write

if TYPE_CHECKING:
    from promptforge.domain.models import ExplainReport

logger = structlog.get_logger(__name__)

_DISK_FULL_ERRNOS: Final[frozenset[int]] = frozenset(
    {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}
)


def _require_path(path: Path | str | None) -> Path:
    if path is None or str(path) == "":
        raise ArtifactIOError("output path cannot be empty", path="")
    return Path(path)


def _write(path: Path, text: str, label: str) -> None:
    try:
        atomic_write(path, text)
    except PermissionError as exc:
        raise ArtifactIOError(f"permission denied: cannot write to {path}", path=path) from exc
    except FileNotFoundError as exc:
        raise ArtifactIOError(
            f"failed to write {label} to {path}: directory does not exist", path=path
        ) from exc
    except OSError as exc:
        if exc.errno in _DISK_FULL_ERRNOS:
            raise ArtifactIOError(f"disk full: cannot write to {path}", path=path) from exc
        raise ArtifactIOError(f"failed to write {label} to {path}: {exc}", path=path) from exc
    logger.debug("artifact_written", artifact=label, path=str(path), size=len(text))


def write_ir(ir: PromptIR, path: Path | str) -> None:
    """Validate ``ir`` and persist it; invalid IR is never written."""

    try:
        validate_ir(ir)
    except IRValidationError as exc:
        raise IRValidationError(f"IR validation failed: {exc}", field=exc.field) from exc
    _write(_require_path(path), ir.to_json(), "IR file")


def write_ir_schema(path: Path | str) -> None:
    _write(_require_path(path), prompt_ir_schema_json(), "IR schema")


def write_explain_report(report: ExplainReport | None, path: Path | str) -> None:
    if report is None:
        raise ValueError("explain report is nil")
    _write(_require_path(path), report.to_json(), "explain report")


def read_artifact_text(path: Path | str, label: str) -> str:
    target = Path(path)
    try:
        return target.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ArtifactIOError(f"{label} not found: {target}", path=target) from exc
    except PermissionError as exc:
        raise ArtifactIOError(f"permission denied: cannot read {target}", path=target) from exc
    except UnicodeDecodeError as exc:
        raise ArtifactIOError(f"{label} is not valid UTF-8: {target}", path=target) from exc
    except OSError as exc:
        raise ArtifactIOError(f"failed to read {label} {target}: {exc}", path=target) from exc


def read_ir_payload(path: Path | str) -> object:
    """Return the decoded JSON value of the IR artifact, untyped."""

    raw = read_artifact_text(path, "IR file")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise IRFormatError(f"failed to parse IR JSON in {path}: {exc}") from exc


def read_ir(path: Path | str) -> PromptIR:
    return PromptIR.from_dict(read_ir_payload(path))


__all__ = [
    "read_artifact_text",
    "read_ir",
    "read_ir_payload",
    "write_explain_report",
    "write_ir",
    "write_ir_schema",
]
