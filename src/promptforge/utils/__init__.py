"""Utility exports for filesystem helpers."""

from promptforge.utils.fs import atomic_write, ensure_parent

__all__ = ["atomic_write", "ensure_parent"]
