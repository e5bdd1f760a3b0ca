"""Error taxonomy for plan compilation, IR validation, migration and artifact I/O."""

from __future__ import annotations

from pathlib import Path


class PromptForgeError(Exception):
    """Base class for every contract-level failure raised by promptforge."""


class PlanStructureError(PromptForgeError, ValueError):
    """The plan document is missing a required section or is empty."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.line = line
        super().__init__(message)


class IRValidationError(PromptForgeError, ValueError):
    """A PromptIR violates a structural invariant."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class IRFormatError(PromptForgeError, ValueError):
    """Persisted JSON cannot be interpreted as a PromptIR document."""


class IRVersionError(PromptForgeError, ValueError):
    """The persisted IR carries a version this release cannot migrate."""

    def __init__(self, version: str, current: str) -> None:
        self.version = version
        self.current = current
        super().__init__(f"unsupported IR version: {version} (current is {current})")


class ArtifactIOError(PromptForgeError, OSError):
    """Reading or writing a project artifact failed."""

    def __init__(self, message: str, *, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else f"I/O failure at {self.path}"


class TemplateError(PromptForgeError, LookupError):
    """A plan template could not be found or rendered."""


__all__ = [
    "ArtifactIOError",
    "IRFormatError",
    "IRValidationError",
    "IRVersionError",
    "PlanStructureError",
    "PromptForgeError",
    "TemplateError",
]
