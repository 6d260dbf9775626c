# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from dailytask import theme
from dailytask.manager import TASKS_FILE_ENV, TaskManager


@pytest.fixture(autouse=True)
def plain_output(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLI output free of ANSI codes and the real data file out of reach."""
    monkeypatch.setattr(theme, "_ENABLE", False)
    monkeypatch.delenv(TASKS_FILE_ENV, raising=False)


@pytest.fixture()
def tasks_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "tasks.json"


@pytest.fixture()
def manager(tasks_file: Path) -> TaskManager:
    m = TaskManager(tasks_file=tasks_file)
    m.load()
    return m
