"""
promptforge — filesystem utilities

File: src/promptforge/utils/fs.py
Last updated: 2026-10-19

Purpose
- Atomic artifact writes so an interrupted compile or migrate never leaves a torn IR file.

Functional requirements
- Atomic writes use temp files in the destination directory and replace in a single step.
- Written artifacts are world-readable (0644) like ordinary generated files.

Non-functional requirements
- Standard library only and cross-platform behavior where feasible.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

PathLike = str | os.PathLike[str]
DEFAULT_FILE_MODE = 0o644

__all__ = [
    "DEFAULT_FILE_MODE",
    "atomic_write",
    "ensure_parent",
]


def ensure_parent(path: PathLike) -> Path:
    """Create the parent directory of ``path`` if needed and return it."""

    parent = Path(path).parent
    parent.mkdir(parents=True, exist_ok=True)
    return parent


def atomic_write(
    path: PathLike,
    data: bytes | str,
    *,
    encoding: str = "utf-8",
    mode: int = DEFAULT_FILE_MODE,
) -> None:
    """
    Atomically write ``data`` to ``path``.

    The write strategy is:
    1. create temp file in the same directory,
    2. write + flush + fsync file data,
    3. replace target via ``os.replace``.
    """

    target = Path(path)
    target_parent = target.parent.resolve(strict=True)
    if not target_parent.is_dir():
        raise NotADirectoryError(f"{target_parent!s} is not a directory")

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{target.name}.",
        suffix=".tmp",
        dir=str(target_parent),
    )
    temp_path = Path(temp_name)

    try:
        payload = data if isinstance(data, bytes) else data.encode(encoding)
        with os.fdopen(fd, "wb") as file_handle:
            file_handle.write(payload)
            file_handle.flush()
            os.fsync(file_handle.fileno())

        os.chmod(temp_path, mode)
        os.replace(temp_path, target)
        _fsync_directory(target_parent)
    except Exception:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise


def _fsync_directory(path: Path) -> None:
    """Best-effort directory fsync; some filesystems refuse it."""

    if os.name == "nt":
        return

    flags = os.O_RDONLY
    if hasattr(os, "O_DIRECTORY"):
        flags |= os.O_DIRECTORY

    try:
        dir_fd = os.open(path, flags)
    except OSError:
        return

    try:
        os.fsync(dir_fd)
    except OSError:
        return
    finally:
        os.close(dir_fd)
