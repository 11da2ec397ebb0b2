"""In-process and delegated (wrapped executable) task execution."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from build_tasker.arguments import serialize_arguments, to_command_line
from build_tasker.config import Settings
from build_tasker.errors import TaskLaunchError
from build_tasker.task_log import TaskLog

if TYPE_CHECKING:
    from build_tasker.task import Tasker

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ExecutionResult:
    """Outcome of one task execution."""

    delegated: bool
    exit_code: int = 0
    lines: int = 0


class ExecutionStrategy(Protocol):
    """Protocol implemented by execution strategies."""

    def run(self, task: Tasker, log: TaskLog) -> ExecutionResult:
        """Run the task and return execution metadata."""


class InProcessExecution:
    """Call the task's ``run`` in the current process."""

    def run(self, task: Tasker, log: TaskLog) -> ExecutionResult:  # noqa: ARG002
        task.run()
        return ExecutionResult(delegated=False)


class DelegatedExecution:
    """Run a wrapped executable with the task's properties as arguments.

    Every line the child writes to stdout is forwarded to the task log. The
    call returns once the child has exited.
    """

    def __init__(self, executable: Path, *, encoding: str = "utf-8") -> None:
        self.executable = executable
        self.encoding = encoding

    def run(self, task: Tasker, log: TaskLog) -> ExecutionResult:
        tokens = serialize_arguments(task)
        run_args = build_run_args(self.executable, tokens)
        try:
            process = subprocess.Popen(  # noqa: S603
                run_args,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                text=True,
                encoding=self.encoding,
                errors="replace",
                creationflags=_no_window_flags(),
            )
        except FileNotFoundError as error:
            raise TaskLaunchError(
                f"Wrapped task executable not found: {self.executable}",
                executable=str(self.executable),
            ) from error
        except OSError as error:
            raise TaskLaunchError(
                f"Wrapped task executable failed to start: {error}",
                executable=str(self.executable),
            ) from error

        logger.info("Started wrapped task %s (pid=%d)", self.executable, process.pid)
        if process.stdin is not None:
            process.stdin.close()

        lines = 0
        try:
            if process.stdout is not None:
                with process.stdout:
                    for line in process.stdout:
                        log.write(line.rstrip("\r\n"))
                        lines += 1
            exit_code = process.wait()
        except BaseException:
            _terminate_process(process)
            raise

        logger.info("Wrapped task %s exited with code %d", self.executable, exit_code)
        return ExecutionResult(delegated=True, exit_code=exit_code, lines=lines)


def build_run_args(
    executable: Path,
    tokens: list[str],
    *,
    os_name: str | None = None,
) -> str | list[str]:
    """Build the child command: argv list on POSIX, quoted command line on Windows."""

    current_os_name = os_name or os.name
    if current_os_name == "nt":
        return subprocess.list2cmdline([str(executable)]) + to_command_line(tokens)
    return [str(executable), *tokens]


def resolve_sibling_executable(module_path: Path) -> Path | None:
    """Return the same-directory file named like ``module_path`` without extension."""

    candidate = module_path.with_suffix("")
    if candidate == module_path:
        return None
    if candidate.is_file():
        return candidate
    return None


def resolve_execution(module_path: Path | None, settings: Settings) -> ExecutionStrategy:
    """Choose delegated execution when a wrapped executable exists, else in-process."""

    if not settings.delegation_enabled:
        logger.debug("Delegation disabled; running in-process")
        return InProcessExecution()

    executable = settings.wrapped_executable
    if executable is None and module_path is not None:
        executable = resolve_sibling_executable(module_path)
    if executable is None:
        logger.debug("No wrapped executable next to %s; running in-process", module_path)
        return InProcessExecution()

    logger.debug("Delegating to wrapped executable %s", executable)
    return DelegatedExecution(executable, encoding=settings.child_encoding)


def _no_window_flags() -> int:
    if os.name == "nt":
        return getattr(subprocess, "CREATE_NO_WINDOW", 0)
    return 0


def _terminate_process(process: subprocess.Popen[str]) -> None:
    try:
        process.terminate()
    except OSError:
        return
    try:
        process.wait(timeout=2)
    except subprocess.TimeoutExpired:
        try:
            process.kill()
        except OSError:
            return
        process.wait(timeout=2)
