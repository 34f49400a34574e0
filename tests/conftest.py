"""Pytest configuration for test isolation.

Puts the workspace ``packages/`` directory on ``sys.path`` so ``budget_import``
imports without an install, and keeps each test hermetic: the ``BUDGET_IMPORT_*``
environment variables are cleared, the working directory is a fresh temp dir
(so the CLI never picks up a stray ``.env``), and the CLI's one-shot logging
setup is disabled so handlers never bind to a runner's captured stream.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]

_ENV_VARS = (
    "BUDGET_IMPORT_LOG_LEVEL",
    "BUDGET_IMPORT_MAX_WORKERS",
    "BUDGET_IMPORT_TAXONOMY_FILE",
)

HEADER = "Date,Description,Amount,Category,Type"


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    import budget_import.cli as cli_mod

    monkeypatch.setattr(cli_mod, "configure_logging", lambda *a, **kw: None)


@pytest.fixture
def write_csv(tmp_path: Path):
    """Return a helper that writes ``HEADER`` plus ``rows`` to ``tmp_path/name``."""

    def _write(name: str, rows: list[str], *, header: str = HEADER) -> Path:
        path = tmp_path / name
        path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")
        return path

    return _write
