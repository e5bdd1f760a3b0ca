"""
promptforge — CLI subprocess smoke contracts

File: tests/integration/test_cli_smoke.py
Last updated: 2026-10-19

Purpose
- Enforce end-to-end CLI behavior for `python -m promptforge` init/lint/compile/migrate/audit.
- Verify exit codes, command output signals and the artifacts left on disk.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"
FIXTURES = PROJECT_ROOT / "tests" / "fixtures"


def _run_cli(project_root: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("PROMPTFORGE_")}
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath if not existing_pythonpath else f"{src_pythonpath}:{existing_pythonpath}"
    )
    env["NO_COLOR"] = "1"
    return subprocess.run(
        [sys.executable, "-m", "promptforge", *args],
        cwd=project_root,
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )


def _write(path: Path, contents: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")


@pytest.mark.integration
def test_full_workflow_in_cwd(tmp_path: Path) -> None:
    init = _run_cli(tmp_path, "init", "Summarize support tickets into structured JSON")
    assert init.returncode == 0, init.stderr
    assert "created promptforge/plan.md" in init.stdout

    lint = _run_cli(tmp_path, "lint")
    assert lint.returncode == 0, lint.stderr
    assert "warn PF200" in lint.stdout

    compiled = _run_cli(tmp_path, "compile", "--explain")
    assert compiled.returncode == 0, compiled.stderr
    assert compiled.stdout.splitlines() == [
        "Wrote explain report to prompt.ir.explain.json",
        "Compiled promptforge/plan.md to prompt.ir.json",
    ]
    for name in ("prompt.ir.json", "prompt.ir.schema.json", "prompt.ir.explain.json"):
        assert (tmp_path / name).is_file()

    audit = _run_cli(tmp_path, "audit")
    assert audit.returncode == 0, audit.stderr
    assert audit.stdout == "Audit passed with no issues\n"


@pytest.mark.integration
def test_compile_matches_golden_ir(tmp_path: Path) -> None:
    _write(
        tmp_path / "promptforge" / "plan.md",
        (FIXTURES / "simple_plan.md").read_text(encoding="utf-8"),
    )
    completed = _run_cli(tmp_path, "compile", "--project-dir", str(tmp_path))
    assert completed.returncode == 0, completed.stderr
    assert (tmp_path / "prompt.ir.json").read_text(encoding="utf-8") == (
        FIXTURES / "simple_prompt.ir.json"
    ).read_text(encoding="utf-8")


@pytest.mark.integration
def test_exit_codes(tmp_path: Path) -> None:
    missing_plan = _run_cli(tmp_path, "compile")
    assert missing_plan.returncode == 3
    assert missing_plan.stderr.startswith("error: plan.md not found at ")

    _write(tmp_path / "promptforge" / "plan.md", "## Constraints\n- Keep it short\n")
    lint = _run_cli(tmp_path, "lint")
    assert lint.returncode == 1
    assert "error PF100 missing required section: Goal" in lint.stdout

    _write(tmp_path / "promptforge.toml", "[observability]\nlog_format = 'xml'\n")
    bad_config = _run_cli(tmp_path, "lint")
    assert bad_config.returncode == 2
    assert bad_config.stderr.startswith("error: config error:")

    usage = _run_cli(tmp_path, "no-such-command")
    assert usage.returncode == 2


@pytest.mark.integration
def test_migrate_then_audit(tmp_path: Path) -> None:
    payload = json.loads((FIXTURES / "simple_prompt.ir.json").read_text(encoding="utf-8"))
    payload["version"] = "0"
    _write(tmp_path / "prompt.ir.json", json.dumps(payload))

    before = _run_cli(tmp_path, "audit")
    assert before.returncode == 1
    assert "Run 'promptforge migrate'." in before.stdout

    migrated = _run_cli(tmp_path, "migrate")
    assert migrated.returncode == 0, migrated.stderr
    assert migrated.stdout.splitlines()[0] == "Migrated prompt.ir.json to IR version 1"

    after = _run_cli(tmp_path, "audit")
    assert after.returncode == 0, after.stderr


@pytest.mark.integration
def test_logs_stay_on_stderr(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, "init", "--log-level", "info")
    assert completed.returncode == 0
    assert "project_initialized" not in completed.stdout
    events = [line for line in completed.stderr.splitlines() if "project_initialized" in line]
    assert len(events) == 1
