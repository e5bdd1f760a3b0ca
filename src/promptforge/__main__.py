"""Module entrypoint for ``python -m promptforge``."""

from __future__ import annotations

from promptforge.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
