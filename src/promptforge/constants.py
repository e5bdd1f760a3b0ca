"""Stable constants shared across the compiler, linter and project commands."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

# IR contract version written by the current compiler.
CURRENT_IR_VERSION: Final[str] = "1"
# Versions treated as "never versioned" by the migrator.
UNVERSIONED_IR_VERSIONS: Final[frozenset[str]] = frozenset({"", "0"})

PROMPT_IR_SCHEMA_ID: Final[str] = "https://promptforge.dev/schemas/prompt-ir.schema.json"
JSON_SCHEMA_DIALECT: Final[str] = "https://json-schema.org/draft/2020-12/schema"

# Default project layout (relative to the project directory).
PLAN_DIR: Final[PurePosixPath] = PurePosixPath("promptforge")
PLAN_FILE: Final[PurePosixPath] = PLAN_DIR / "plan.md"
IR_FILE: Final[PurePosixPath] = PurePosixPath("prompt.ir.json")
IR_SCHEMA_FILE: Final[PurePosixPath] = PurePosixPath("prompt.ir.schema.json")
IR_EXPLAIN_FILE: Final[PurePosixPath] = PurePosixPath("prompt.ir.explain.json")
CONFIG_FILE: Final[str] = "promptforge.toml"

# Recognized plan sections, in canonical spelling.
SECTION_GOAL: Final[str] = "Goal"
SECTION_CONSTRAINTS: Final[str] = "Constraints"
SECTION_OUT_OF_SCOPE: Final[str] = "Out of Scope"
KNOWN_SECTIONS: Final[tuple[str, ...]] = (
    SECTION_GOAL,
    SECTION_CONSTRAINTS,
    SECTION_OUT_OF_SCOPE,
)

__all__ = [
    "CONFIG_FILE",
    "CURRENT_IR_VERSION",
    "IR_EXPLAIN_FILE",
    "IR_FILE",
    "IR_SCHEMA_FILE",
    "JSON_SCHEMA_DIALECT",
    "KNOWN_SECTIONS",
    "PLAN_DIR",
    "PLAN_FILE",
    "PROMPT_IR_SCHEMA_ID",
    "SECTION_CONSTRAINTS",
    "SECTION_GOAL",
    "SECTION_OUT_OF_SCOPE",
    "UNVERSIONED_IR_VERSIONS",
]
