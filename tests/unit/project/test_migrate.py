"""Unit tests for IR version classification and in-place migration."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from promptforge.compilation.schema import prompt_ir_schema_json
from promptforge.domain.errors import IRFormatError, IRVersionError
from promptforge.project import migrate_project
from promptforge.project.migrate import (
    IRVersionState,
    MigrationStep,
    classify_version,
    migrate_payload,
    payload_version,
)

GOLDEN = Path(__file__).resolve().parents[2] / "fixtures" / "simple_prompt.ir.json"


def _golden_payload() -> dict[str, object]:
    return json.loads(GOLDEN.read_text(encoding="utf-8"))


def _write_ir(project: Path, payload: object) -> Path:
    target = project / "prompt.ir.json"
    target.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return target


@pytest.mark.unit
@pytest.mark.parametrize(
    ("version", "state"),
    [
        ("1", IRVersionState.CURRENT),
        ("", IRVersionState.UNVERSIONED),
        ("0", IRVersionState.UNVERSIONED),
        ("2", IRVersionState.UNSUPPORTED),
        ("1.0", IRVersionState.UNSUPPORTED),
    ],
)
def test_classify_version(version: str, state: IRVersionState) -> None:
    assert classify_version(version) is state


@pytest.mark.unit
def test_payload_version() -> None:
    assert payload_version({}) == ""
    assert payload_version({"version": "0"}) == "0"
    with pytest.raises(IRFormatError, match="version: expected string, got int"):
        payload_version({"version": 1})


@pytest.mark.unit
def test_migrate_payload_stamps_unversioned() -> None:
    payload = _golden_payload()
    del payload["version"]
    migrated, changed = migrate_payload(payload)
    assert changed
    assert migrated["version"] == "1"
    assert "version" not in payload


@pytest.mark.unit
def test_migrate_payload_leaves_current_untouched() -> None:
    payload = _golden_payload()
    migrated, changed = migrate_payload(payload)
    assert not changed
    assert migrated == payload


@pytest.mark.unit
def test_migrate_payload_rejects_unsupported_version() -> None:
    with pytest.raises(IRVersionError) as excinfo:
        migrate_payload({"version": "7"})
    assert str(excinfo.value) == "unsupported IR version: 7 (current is 1)"
    assert excinfo.value.version == "7"


@pytest.mark.unit
def test_unsupported_version_is_rejected_before_any_step_runs() -> None:
    calls: list[str] = []

    def _record(payload: dict[str, object]) -> dict[str, object]:
        calls.append(str(payload.get("version")))
        return {**payload, "version": "1"}

    steps = (MigrationStep(frozenset({"9.9"}), "1", _record),)
    with pytest.raises(IRVersionError, match=r"unsupported IR version: 9\.9"):
        migrate_payload({"version": "9.9"}, steps)
    assert calls == []


@pytest.mark.unit
def test_current_version_skips_steps() -> None:
    steps = (MigrationStep(frozenset({"1"}), "1", lambda payload: {**payload, "touched": True}),)
    migrated, changed = migrate_payload({"version": "1"}, steps)
    assert not changed
    assert migrated == {"version": "1"}


@pytest.mark.unit
def test_migrate_payload_chains_steps() -> None:
    steps = (
        MigrationStep(frozenset({"0"}), "b", lambda payload: {**payload, "version": "b"}),
        MigrationStep(frozenset({"b"}), "1", lambda payload: {**payload, "version": "1"}),
    )
    migrated, changed = migrate_payload({"version": "0"}, steps)
    assert changed
    assert migrated == {"version": "1"}


@pytest.mark.unit
def test_migrate_payload_detects_broken_step() -> None:
    steps = (MigrationStep(frozenset({""}), "1", lambda payload: dict(payload)),)
    with pytest.raises(IRFormatError, match="did not produce 1"):
        migrate_payload({}, steps)


@pytest.mark.unit
def test_migrate_payload_stops_on_cycles() -> None:
    steps = (
        MigrationStep(frozenset({"0"}), "b", lambda payload: {**payload, "version": "b"}),
        MigrationStep(frozenset({"b"}), "0", lambda payload: {**payload, "version": "0"}),
    )
    with pytest.raises(IRVersionError):
        migrate_payload({"version": "0"}, steps)


@pytest.mark.unit
def test_migrate_project_upgrades_unversioned_ir(tmp_path: Path) -> None:
    payload = _golden_payload()
    payload["version"] = "0"
    ir_path = _write_ir(tmp_path, payload)

    result = migrate_project(tmp_path)

    assert result.migrated
    assert (result.from_version, result.to_version) == ("0", "1")
    assert ir_path.read_text(encoding="utf-8") == GOLDEN.read_text(encoding="utf-8")
    assert result.schema_path.read_text(encoding="utf-8") == prompt_ir_schema_json()


@pytest.mark.unit
def test_migrate_project_current_only_refreshes_schema(tmp_path: Path) -> None:
    ir_path = tmp_path / "prompt.ir.json"
    ir_path.write_text(GOLDEN.read_text(encoding="utf-8"), encoding="utf-8")
    before = ir_path.read_text(encoding="utf-8")

    result = migrate_project(tmp_path)

    assert not result.migrated
    assert ir_path.read_text(encoding="utf-8") == before
    assert (tmp_path / "prompt.ir.schema.json").is_file()


@pytest.mark.unit
@pytest.mark.parametrize("version", ["9.9", "2"])
def test_migrate_project_unsupported_version_writes_nothing(tmp_path: Path, version: str) -> None:
    payload = _golden_payload()
    payload["version"] = version
    ir_path = _write_ir(tmp_path, payload)
    before = ir_path.read_text(encoding="utf-8")

    with pytest.raises(IRVersionError):
        migrate_project(tmp_path)

    assert ir_path.read_text(encoding="utf-8") == before
    assert not (tmp_path / "prompt.ir.schema.json").exists()


@pytest.mark.unit
def test_migrate_project_requires_object_root(tmp_path: Path) -> None:
    _write_ir(tmp_path, ["not", "an", "object"])
    with pytest.raises(IRFormatError, match="IR root must be a JSON object"):
        migrate_project(tmp_path)
