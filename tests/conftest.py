"""Shared test fixtures."""

from __future__ import annotations

import os
import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

_TESTS_DIR = Path(__file__).resolve().parent


def _write_launcher(path: Path, script: str) -> Path:
    implementation = path.parent / f"{path.name}_impl.py"
    implementation.write_text(script.strip() + "\n", "utf-8")
    path.write_text(
        f'#!/usr/bin/env sh\nexec "{sys.executable}" "{implementation}" "$@"\n',
        "utf-8",
    )
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


def write_fake_executable(path: Path, *, exit_code: int = 0) -> Path:
    """Write a launcher at ``path`` that echoes its arguments and exits with ``exit_code``."""

    script = f"""
import sys

for arg in sys.argv[1:]:
    print(arg)
print("done")
sys.stdout.flush()
raise SystemExit({exit_code})
"""
    return _write_launcher(path, script)


def write_task_executable(path: Path, class_name: str) -> Path:
    """Write a launcher at ``path`` that runs ``sample_tasks.<class_name>.main()``."""

    script = f"""
import sys

sys.path.insert(0, {str(_TESTS_DIR)!r})

from sample_tasks import {class_name}

raise SystemExit({class_name}.main())
"""
    return _write_launcher(path, script)


def write_hanging_executable(path: Path) -> Path:
    """Write a launcher at ``path`` that prints one line, then sleeps."""

    script = """
import sys
import time

print("started")
sys.stdout.flush()
time.sleep(60)
"""
    return _write_launcher(path, script)


@pytest.fixture()
def fake_executable(tmp_path: Path) -> Callable[..., Path]:
    def _factory(name: str = "pack", *, exit_code: int = 0) -> Path:
        return write_fake_executable(tmp_path / name, exit_code=exit_code)

    return _factory


@pytest.fixture()
def task_executable(tmp_path: Path) -> Callable[..., Path]:
    def _factory(name: str = "pack", *, class_name: str = "CountTask") -> Path:
        return write_task_executable(tmp_path / name, class_name)

    return _factory


@pytest.fixture()
def hanging_executable(tmp_path: Path) -> Callable[..., Path]:
    def _factory(name: str = "pack") -> Path:
        return write_hanging_executable(tmp_path / name)

    return _factory


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in list(os.environ):
        if name.startswith("BUILD_TASKER_"):
            monkeypatch.delenv(name)
