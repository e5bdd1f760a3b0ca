"""
promptforge — IR version migration

File: src/promptforge/project/migrate.py
Last updated: 2026-10-19

Purpose
- Bring a persisted prompt.ir.json up to the current IR version.

What should be included in this file
- Version classification: unversioned, current, unsupported.
- An ordered chain of migration steps applied until the payload is current.

Functional requirements
- Unsupported versions fail before anything is written.
- The migrated IR is validated before it replaces the old file.
- The schema artifact is rewritten after every successful migrate.

Non-functional requirements
- Running migrate on a current project changes nothing but the schema artifact.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any, Final

import structlog

from promptforge.compilation.artifacts import read_ir_payload, write_ir, write_ir_schema
from promptforge.constants import CURRENT_IR_VERSION, UNVERSIONED_IR_VERSIONS
from promptforge.domain.errors import IRFormatError, IRVersionError
from promptforge.domain.models import PromptIR
from promptforge.project.workspace import ProjectLayout, require_project_dir

logger = structlog.get_logger(__name__)

IRPayload = dict[str, Any]


class IRVersionState(StrEnum):
    UNVERSIONED = "unversioned"
    CURRENT = "current"
    UNSUPPORTED = "unsupported"


def payload_version(payload: Mapping[str, object]) -> str:
    raw = payload.get("version")
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise IRFormatError(f"version: expected string, got {type(raw).__name__}")
    return raw


def classify_version(version: str) -> IRVersionState:
    if version == CURRENT_IR_VERSION:
        return IRVersionState.CURRENT
    if version in UNVERSIONED_IR_VERSIONS:
        return IRVersionState.UNVERSIONED
    return IRVersionState.UNSUPPORTED


@dataclass(frozen=True, slots=True)
class MigrationStep:
    """One hop from any of ``from_versions`` to ``to_version``."""

    from_versions: frozenset[str]
    to_version: str
    transform: Callable[[IRPayload], IRPayload]

    def applies_to(self, version: str) -> bool:
        return version in self.from_versions


def _stamp_current_version(payload: IRPayload) -> IRPayload:
    return {**payload, "version": CURRENT_IR_VERSION}


MIGRATION_STEPS: Final[tuple[MigrationStep, ...]] = (
    MigrationStep(
        from_versions=UNVERSIONED_IR_VERSIONS,
        to_version=CURRENT_IR_VERSION,
        transform=_stamp_current_version,
    ),
)


def migrate_payload(
    payload: Mapping[str, object],
    steps: tuple[MigrationStep, ...] = MIGRATION_STEPS,
) -> tuple[IRPayload, bool]:
    """Bring ``payload`` to the current version.

    Current payloads are returned unchanged, unsupported versions raise
    ``IRVersionError`` and unversioned payloads walk ``steps`` until current.
    Returns the (possibly new) payload and whether any step ran.
    """

    current: IRPayload = dict(payload)
    start = payload_version(current)
    state = classify_version(start)
    if state is IRVersionState.CURRENT:
        return current, False
    if state is IRVersionState.UNSUPPORTED:
        raise IRVersionError(start, CURRENT_IR_VERSION)

    # Bounded: a cyclic chain of steps must not loop forever.
    for _ in range(len(steps) + 1):
        version = payload_version(current)
        if classify_version(version) is IRVersionState.CURRENT:
            return current, True
        step = next((candidate for candidate in steps if candidate.applies_to(version)), None)
        if step is None:
            raise IRVersionError(version, CURRENT_IR_VERSION)
        current = step.transform(current)
        if payload_version(current) != step.to_version:
            raise IRFormatError(
                f"migration from {version or '<unversioned>'} did not produce {step.to_version}"
            )
    raise IRVersionError(payload_version(current), CURRENT_IR_VERSION)


@dataclass(frozen=True, slots=True)
class MigrationResult:
    from_version: str
    to_version: str
    migrated: bool
    ir_path: Path
    schema_path: Path


def migrate_project(project: ProjectLayout | Path | str) -> MigrationResult:
    """Upgrade the project's IR file in place and refresh its schema artifact."""

    layout = project if isinstance(project, ProjectLayout) else ProjectLayout.default(project)
    require_project_dir(layout.project_dir)

    payload = read_ir_payload(layout.ir_path)
    if not isinstance(payload, dict):
        raise IRFormatError(f"{layout.ir_path}: IR root must be a JSON object")
    original_version = payload_version(payload)

    migrated, changed = migrate_payload(payload)
    if changed:
        write_ir(PromptIR.from_dict(migrated), layout.ir_path)
    write_ir_schema(layout.schema_path)

    logger.info(
        "ir_migrated" if changed else "ir_already_current",
        ir=str(layout.ir_path),
        from_version=original_version,
        to_version=CURRENT_IR_VERSION,
        state=classify_version(original_version).value,
    )
    return MigrationResult(
        from_version=original_version,
        to_version=CURRENT_IR_VERSION,
        migrated=changed,
        ir_path=layout.ir_path,
        schema_path=layout.schema_path,
    )


__all__ = [
    "IRVersionState",
    "MIGRATION_STEPS",
    "MigrationResult",
    "MigrationStep",
    "classify_version",
    "migrate_payload",
    "migrate_project",
    "payload_version",
]
