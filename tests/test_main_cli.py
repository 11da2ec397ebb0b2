from __future__ import annotations

import os
from pathlib import Path

import allure
import pytest
from click.testing import CliRunner

from build_tasker import __version__
from build_tasker.main import build_tasker
from sample_tasks import CountTask

pytestmark = [
    allure.epic("Task Execution"),
    allure.feature("build-tasker CLI"),
]

posix_only = pytest.mark.skipif(os.name == "nt", reason="shell launcher requires POSIX")


def test_version_option() -> None:
    result = CliRunner().invoke(build_tasker, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_run_applies_arguments_and_prints_task_output() -> None:
    result = CliRunner().invoke(
        build_tasker,
        ["run", "sample_tasks:CountTask", "Count=3", '"Label=cli"', "junk"],
    )

    assert result.exit_code == 0, result.output
    assert "Count=3 Label=cli" in result.output
    assert "Task sample_tasks:CountTask completed." in result.output


def test_run_reports_conversion_errors() -> None:
    result = CliRunner().invoke(build_tasker, ["run", "sample_tasks:CountTask", "Count=x"])

    assert result.exit_code == 1
    assert "Invalid value for property 'Count'" in result.output


def test_run_rejects_invalid_reference() -> None:
    result = CliRunner().invoke(build_tasker, ["run", "sample_tasks.CountTask"])

    assert result.exit_code == 2
    assert "Invalid task reference" in result.output


def test_run_rejects_non_task_class() -> None:
    result = CliRunner().invoke(build_tasker, ["run", "pathlib:Path"])

    assert result.exit_code == 2
    assert "is not a Tasker subclass" in result.output


def test_execute_runs_in_process_without_sibling(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(CountTask, "module_path", classmethod(lambda cls: tmp_path / "pack.py"))

    result = CliRunner().invoke(build_tasker, ["execute", "sample_tasks:CountTask", "Count=8"])

    assert result.exit_code == 0, result.output
    assert "Count=8 Label=" in result.output
    assert "Task sample_tasks:CountTask succeeded." in result.output


@posix_only
def test_execute_forwards_wrapped_executable_output(
    monkeypatch,
    tmp_path: Path,
    fake_executable,
) -> None:
    monkeypatch.setattr(CountTask, "module_path", classmethod(lambda cls: tmp_path / "pack.py"))
    fake_executable("pack", exit_code=1)

    result = CliRunner().invoke(build_tasker, ["execute", "sample_tasks:CountTask", "Count=8"])

    assert result.exit_code == 0, result.output
    assert "Count=8\nLabel=\nVerbose=False\ndone\n" in result.output


@posix_only
def test_execute_fails_when_exit_code_propagation_enabled(
    monkeypatch,
    tmp_path: Path,
    fake_executable,
) -> None:
    monkeypatch.setattr(CountTask, "module_path", classmethod(lambda cls: tmp_path / "pack.py"))
    monkeypatch.setenv("BUILD_TASKER_PROPAGATE_EXIT_CODE", "1")
    fake_executable("pack", exit_code=1)

    result = CliRunner().invoke(build_tasker, ["execute", "sample_tasks:CountTask"])

    assert result.exit_code == 1
    assert "Task sample_tasks:CountTask failed." in result.output
    assert "Task reported failure." in result.output


def test_execute_rejects_missing_configured_executable(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BUILD_TASKER_WRAPPED_EXECUTABLE", str(tmp_path / "missing"))

    result = CliRunner().invoke(build_tasker, ["execute", "sample_tasks:CountTask"])

    assert result.exit_code == 1
    assert "does not point to a file" in result.output


def test_describe_lists_properties_and_delegated_arguments(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(CountTask, "module_path", classmethod(lambda cls: tmp_path / "pack.py"))
    (tmp_path / "pack").write_text("", "utf-8")

    result = CliRunner().invoke(
        build_tasker,
        ["describe", "sample_tasks:CountTask", "Count=2", "Label=x y"],
    )

    assert result.exit_code == 0, result.output
    assert "Count (int, rw) = '2'" in result.output
    assert "Output (Path, ro) = ''" in result.output
    assert f"Sibling executable: {tmp_path / 'pack'}" in result.output
    assert "Execution: DelegatedExecution" in result.output
    assert 'Arguments: "Count=2" "Label=x y" "Verbose=False"' in result.output
