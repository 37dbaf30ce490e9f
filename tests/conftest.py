from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import WorkspaceBuilder, export_rows, write_export  # noqa: E402
from learning_hub.core import WORKSPACE_ENV, release_logger  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_workspace(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Keep every test away from the real ~/.learninghub-data and CWD."""

    home = tmp_path / "data-home"
    monkeypatch.setenv(WORKSPACE_ENV, str(home))
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    yield home
    release_logger(logging.getLogger("learning_hub.quiz"))


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def quiz_file(tmp_path: Path) -> Callable[..., Path]:
    """Write an export (default: the shared sample rows); return its path."""

    def _write(rows=None, *, name: str = "export.jsonl", fmt: str = "jsonl"):
        data = export_rows() if rows is None else rows
        return write_export(tmp_path / "exports" / name, data, fmt=fmt)

    return _write
