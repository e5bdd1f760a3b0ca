"""Unit tests for atomic artifact writes."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from promptforge.utils.fs import atomic_write, ensure_parent


@pytest.mark.unit
def test_atomic_write_replaces_content_and_leaves_no_temp_files(tmp_path: Path) -> None:
    target = tmp_path / "prompt.ir.json"
    atomic_write(target, "first\n")
    atomic_write(target, b"second\n")

    assert target.read_text(encoding="utf-8") == "second\n"
    assert stat.S_IMODE(target.stat().st_mode) == 0o644
    assert sorted(entry.name for entry in tmp_path.iterdir()) == ["prompt.ir.json"]


@pytest.mark.unit
def test_atomic_write_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        atomic_write(tmp_path / "missing" / "x.json", "{}")
    assert not (tmp_path / "missing").exists()


@pytest.mark.unit
def test_failed_replace_cleans_up_temp_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _fail(src: object, dst: object) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", _fail)
    with pytest.raises(OSError, match="replace failed"):
        atomic_write(tmp_path / "x.json", "{}")
    assert list(tmp_path.iterdir()) == []


@pytest.mark.unit
def test_ensure_parent_creates_nested_directories(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "plan.md"
    assert ensure_parent(target) == tmp_path / "a" / "b"
    assert (tmp_path / "a" / "b").is_dir()
