"""Base class for tasks runnable from a build host or from the command line."""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import ClassVar

from build_tasker.arguments import apply_arguments
from build_tasker.config import Settings
from build_tasker.execution import ExecutionStrategy, resolve_execution
from build_tasker.properties import TaskProperty, declared_properties
from build_tasker.task_log import ConsoleLog, HostLog, TaskLog

logger = logging.getLogger(__name__)


class Tasker(ABC):
    """A build task with one ``run`` shared by two entry points.

    ``execute`` is called by the build host. If an executable named like the
    task's module file (without extension) sits next to it, the task runs
    that executable with its properties as ``Name=Value`` arguments instead
    of running in-process; this allows debugging the task as a program.

    ``run_from_command_line`` (or ``main``) is the entry point of that
    program: it applies the arguments to the task and calls ``run``.
    """

    _instances: ClassVar[dict[type, Tasker]] = {}

    def __init__(self) -> None:
        self.log: TaskLog | None = None

    @abstractmethod
    def run(self) -> None:
        """Task logic. Signal failure by raising."""

    @classmethod
    def instance(cls) -> Tasker:
        """Shared lazily created instance of this task class."""

        existing = Tasker._instances.get(cls)
        if existing is None:
            existing = cls()
            Tasker._instances[cls] = existing
        return existing

    @classmethod
    def properties(cls) -> dict[str, TaskProperty]:
        return declared_properties(cls)

    @classmethod
    def module_path(cls) -> Path | None:
        """File the task class was loaded from, if any."""

        module = sys.modules.get(cls.__module__)
        filename = getattr(module, "__file__", None)
        if not filename:
            return None
        return Path(filename).resolve()

    def execute(
        self,
        *,
        strategy: ExecutionStrategy | None = None,
        log: TaskLog | Callable[[str], None] | None = None,
        settings: Settings | None = None,
    ) -> bool:
        """Build host entry point. Returns ``True`` for success.

        A non-zero exit code from a wrapped executable is reported as a
        warning and still counts as success unless
        ``Settings.propagate_exit_code`` is set.
        """

        if settings is None:
            settings = Settings.from_env()
            settings.validate()
        self.log = _host_log(log, self)
        if strategy is None:
            strategy = resolve_execution(self.module_path(), settings)

        result = strategy.run(self, self.log)
        if result.delegated and result.exit_code != 0:
            logger.warning(
                "Wrapped task %s exited with code %d",
                type(self).__name__,
                result.exit_code,
            )
            if settings.propagate_exit_code:
                return False
        return True

    def run_from_command_line(
        self,
        args: Sequence[str],
        *,
        log: TaskLog | None = None,
    ) -> None:
        """Command-line entry point: apply ``Name=Value`` arguments, then run."""

        self.log = log or ConsoleLog()
        apply_arguments(self, args)
        self.run()

    @classmethod
    def main(cls, argv: Sequence[str] | None = None) -> int:
        """Run a fresh instance with ``sys.argv`` arguments; use as ``sys.exit(Task.main())``."""

        args = sys.argv[1:] if argv is None else argv
        cls().run_from_command_line(args)
        return 0

    def write(self, line: str) -> None:
        """Write one line to the installed log, or the console when none is installed."""

        if self.log is None:
            self.log = ConsoleLog()
        self.log.write(line)


def _host_log(log: TaskLog | Callable[[str], None] | None, task: Tasker) -> TaskLog:
    if log is None:
        return HostLog(logger=logging.getLogger(type(task).__module__))
    if hasattr(log, "write"):
        return log
    return HostLog(log)
