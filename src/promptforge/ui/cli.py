"""Command-line interface router for promptforge."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from promptforge.config import (
    ConfigLoadError,
    ConfigValidationError,
    dump_effective_config,
    load_config,
)
from promptforge.domain.errors import PromptForgeError
from promptforge.domain.models import Severity
from promptforge.linting import format_diagnostic, has_errors
from promptforge.observability import command_context, configure_from_config
from promptforge.project import (
    ProjectLayout,
    audit_project,
    compile_project,
    initialize_project,
    lint_project,
    migrate_project,
)
from promptforge.templates import DEFAULT_TEMPLATE, list_templates
from promptforge.ui.render import CLIRenderer, create_renderer

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="promptforge",
        description=(
            "promptforge - compile human-written plans into a validated prompt IR.\n\n"
            "Common workflows:\n"
            '  promptforge init "Summarize tickets"   Scaffold promptforge/plan.md\n'
            "  promptforge lint                       Check the plan for problems\n"
            "  promptforge compile --explain          Write prompt.ir.json (+ explain)\n"
            "  promptforge audit                      Verify the written artifacts\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--project-dir",
        default=".",
        help="Project directory (default: current working directory).",
    )
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to promptforge TOML config (default: ./promptforge.toml if present).",
    )
    common.add_argument(
        "--log-level",
        default=None,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        type=str.upper,
        help="Override the configured log level.",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable colored output (also respects NO_COLOR env var).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # init ----------------------------------------------------------------
    init_parser = subparsers.add_parser(
        "init",
        parents=[common],
        help="Create promptforge/plan.md from a template",
        description=(
            "Scaffold a plan document. The optional description becomes the Goal.\n\n"
            "Examples:\n"
            "  promptforge init\n"
            '  promptforge init "Summarize support tickets into JSON"\n'
            "  promptforge init --template api-guardrails\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    init_parser.add_argument(
        "description",
        nargs="*",
        help="Goal description (words are joined with spaces).",
    )
    init_parser.add_argument(
        "--template",
        default=None,
        help=f"Plan template name (default: {DEFAULT_TEMPLATE}; see `promptforge templates`).",
    )
    init_parser.set_defaults(handler=_cmd_init)

    # compile -------------------------------------------------------------
    compile_parser = subparsers.add_parser(
        "compile",
        parents=[common],
        help="Compile plan.md into prompt.ir.json",
        description=(
            "Compile the plan into the IR and its JSON Schema artifact.\n\n"
            "Examples:\n"
            "  promptforge compile\n"
            "  promptforge compile --explain\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    compile_parser.add_argument(
        "--explain",
        action="store_true",
        default=False,
        help="Also write prompt.ir.explain.json with per-field provenance.",
    )
    compile_parser.set_defaults(handler=_cmd_compile)

    # lint ----------------------------------------------------------------
    lint_parser = subparsers.add_parser(
        "lint",
        parents=[common],
        help="Report structural and quality problems in plan.md",
        description=(
            "Lint the plan. Exits 1 when any error is reported.\n\n"
            "Examples:\n"
            "  promptforge lint\n"
            "  promptforge lint --fail-on-warnings\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    lint_parser.add_argument(
        "--fail-on-warnings",
        action="store_true",
        default=None,
        help="Treat warnings as errors (overrides lint.fail_on_warnings).",
    )
    lint_parser.set_defaults(handler=_cmd_lint)

    # templates -----------------------------------------------------------
    templates_parser = subparsers.add_parser(
        "templates",
        parents=[common],
        help="List available plan templates",
    )
    templates_parser.set_defaults(handler=_cmd_templates)

    # migrate -------------------------------------------------------------
    migrate_parser = subparsers.add_parser(
        "migrate",
        parents=[common],
        help="Upgrade prompt.ir.json to the current IR version",
        description=(
            "Migrate the IR in place and refresh the schema artifact.\n\n"
            "Examples:\n"
            "  promptforge migrate\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    migrate_parser.set_defaults(handler=_cmd_migrate)

    # audit ---------------------------------------------------------------
    audit_parser = subparsers.add_parser(
        "audit",
        parents=[common],
        help="Check prompt.ir.json and its schema artifact",
        description=(
            "Validate the IR, its version and schema conformance without writing.\n"
            "Exits 1 when any error is reported.\n\n"
            "Examples:\n"
            "  promptforge audit\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    audit_parser.set_defaults(handler=_cmd_audit)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    except PromptForgeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    return int(result)


def main(argv: Sequence[str] | None = None) -> int:
    """Compatibility wrapper for main-module wiring."""

    return run_cli(argv)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_init(args: argparse.Namespace) -> int:
    layout, _ = _prepare(args)
    renderer = _get_renderer(args)
    description = " ".join(getattr(args, "description", None) or []).strip()
    template = _optional_str(getattr(args, "template", None))

    with command_context("init", template=template or DEFAULT_TEMPLATE):
        plan_path = initialize_project(layout, description, template)

    renderer.text(f"Initialized PromptForge project: created {_display(plan_path, layout)}")
    renderer.next_steps(["promptforge lint", "promptforge compile --explain"])
    return 0


def _cmd_compile(args: argparse.Namespace) -> int:
    layout, _ = _prepare(args)
    renderer = _get_renderer(args)
    explain = _flag(args, "explain")

    with command_context("compile", explain=explain):
        result = compile_project(layout, explain=explain)

    if result.explain_path is not None:
        renderer.text(f"Wrote explain report to {_display(result.explain_path, layout)}")
    renderer.text(
        f"Compiled {_display(layout.plan_path, layout)} to {_display(result.ir_path, layout)}"
    )
    return 0


def _cmd_lint(args: argparse.Namespace) -> int:
    overrides: dict[str, object] = {}
    if getattr(args, "fail_on_warnings", None):
        overrides["lint.fail_on_warnings"] = True
    layout, config = _prepare(args, overrides)
    renderer = _get_renderer(args)
    warnings_as_errors = bool(config["lint"]["fail_on_warnings"])

    with command_context("lint"):
        diagnostics = lint_project(layout)

    display_path = _display(layout.plan_path, layout)
    renderer.lines([format_diagnostic(display_path, item) for item in diagnostics])

    if has_errors(diagnostics, warnings_as_errors=warnings_as_errors):
        failing = [
            item
            for item in diagnostics
            if item.severity is Severity.ERROR or warnings_as_errors
        ]
        raise CLIError(f"lint failed with {len(failing)} error(s)", exit_code=1)
    return 0


def _cmd_templates(args: argparse.Namespace) -> int:
    renderer = _get_renderer(args)
    templates = list_templates()
    if not templates:
        renderer.text("No templates available")
        return 0
    renderer.lines([f"{template.name} - {template.description}" for template in templates])
    return 0


def _cmd_migrate(args: argparse.Namespace) -> int:
    layout, _ = _prepare(args)
    renderer = _get_renderer(args)

    with command_context("migrate"):
        result = migrate_project(layout)

    ir_display = _display(result.ir_path, layout)
    if result.migrated:
        renderer.text(f"Migrated {ir_display} to IR version {result.to_version}")
    else:
        renderer.text(f"{ir_display} is already at IR version {result.to_version}")
    renderer.text(f"Wrote schema to {_display(result.schema_path, layout)}")
    return 0


def _cmd_audit(args: argparse.Namespace) -> int:
    layout, _ = _prepare(args)
    renderer = _get_renderer(args)

    with command_context("audit"):
        issues = audit_project(layout)

    if not issues:
        renderer.text("Audit passed with no issues")
        return 0
    for issue in issues:
        renderer.audit_issue(issue)

    errors = sum(1 for issue in issues if issue.severity is Severity.ERROR)
    if errors:
        raise CLIError(f"audit failed with {errors} error(s)", exit_code=1)
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _prepare(
    args: argparse.Namespace,
    overrides: dict[str, object] | None = None,
) -> tuple[ProjectLayout, dict[str, Any]]:
    """Load config, configure logging and resolve the project layout."""

    project_dir = _project_dir(args)
    config = _load_effective_config(args, project_dir, overrides or {})
    configure_from_config(config, colors=_get_renderer(args).color)
    logger.debug("config_loaded", config=dump_effective_config(config))
    return ProjectLayout.from_config(project_dir, config), config


def _project_dir(args: argparse.Namespace) -> Path:
    raw = _optional_str(getattr(args, "project_dir", None)) or "."
    return Path(raw).expanduser().resolve()


def _load_effective_config(
    args: argparse.Namespace,
    project_dir: Path,
    overrides: dict[str, object],
) -> dict[str, Any]:
    cli_overrides: dict[str, object] = {
        "observability.log_level": getattr(args, "log_level", None),
        **overrides,
    }
    try:
        return load_config(
            project_dir,
            config_path=getattr(args, "config_path", None),
            cli_overrides=cli_overrides,
        )
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(f"config error: {exc}", exit_code=2) from exc


def _get_renderer(args: argparse.Namespace) -> CLIRenderer:
    return create_renderer(no_color=_flag(args, "no_color"))


def _display(path: Path, layout: ProjectLayout) -> str:
    try:
        return path.relative_to(layout.project_dir).as_posix()
    except ValueError:
        return str(path)


def _flag(args: argparse.Namespace, name: str) -> bool:
    return bool(getattr(args, name, False))


def _optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


__all__ = ["CLIError", "build_parser", "main", "run_cli"]
