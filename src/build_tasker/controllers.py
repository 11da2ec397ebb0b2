"""Controllers for build-tasker CLI commands."""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field

from build_tasker.arguments import apply_arguments, serialize_arguments, to_command_line
from build_tasker.config import Settings
from build_tasker.execution import resolve_execution, resolve_sibling_executable
from build_tasker.task import Tasker
from build_tasker.task_log import ConsoleLog


class TaskReferenceError(ValueError):
    """Task reference does not name an importable ``Tasker`` subclass."""


@dataclass(slots=True)
class RunTaskCommand:
    """CLI input for standalone (command-line entry) runs."""

    reference: str
    args: tuple[str, ...] = ()


@dataclass(slots=True)
class ExecuteTaskCommand:
    """CLI input for host-style runs with wrapped executable probing."""

    reference: str
    args: tuple[str, ...] = ()


@dataclass(slots=True)
class DescribeTaskCommand:
    """CLI input for property listing."""

    reference: str
    args: tuple[str, ...] = ()


@dataclass(slots=True)
class ExecuteTaskResult:
    """Host-style run outcome for CLI rendering."""

    success: bool
    lines: list[str] = field(default_factory=list)


class TaskCliController:
    """Resolve task references and drive the task entry points."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings

    def run(self, command: RunTaskCommand) -> list[str]:
        task = load_task_class(command.reference)()
        task.run_from_command_line(command.args, log=ConsoleLog())
        return [f"Task {command.reference} completed."]

    def execute(self, command: ExecuteTaskCommand) -> ExecuteTaskResult:
        settings = self._load_settings()
        task = load_task_class(command.reference)()
        apply_arguments(task, command.args)
        success = task.execute(log=ConsoleLog(), settings=settings)
        status = "succeeded" if success else "failed"
        return ExecuteTaskResult(
            success=success,
            lines=[f"Task {command.reference} {status}."],
        )

    def describe(self, command: DescribeTaskCommand) -> list[str]:
        settings = self._load_settings()
        task_cls = load_task_class(command.reference)
        task = task_cls()
        apply_arguments(task, command.args)

        lines = [f"Task: {task_cls.__module__}.{task_cls.__qualname__}"]
        for name, prop in task_cls.properties().items():
            access = "rw" if prop.writable else "ro"
            value = prop.format_value(getattr(task, name))
            lines.append(f"  {name} ({prop.type_name}, {access}) = {value!r}")

        module_path = task_cls.module_path()
        sibling = resolve_sibling_executable(module_path) if module_path else None
        strategy = resolve_execution(module_path, settings)
        lines.append(f"Module: {module_path or '-'}")
        lines.append(f"Sibling executable: {sibling or '-'}")
        lines.append(f"Execution: {type(strategy).__name__}")
        lines.append(f"Arguments:{to_command_line(serialize_arguments(task))}")
        return lines

    def _load_settings(self) -> Settings:
        settings = self._settings or Settings.from_env()
        settings.validate()
        return settings


def load_task_class(reference: str) -> type[Tasker]:
    """Import ``package.module:ClassName`` and check it is a ``Tasker`` subclass."""

    module_name, separator, class_name = reference.partition(":")
    if not separator or not module_name or not class_name:
        raise TaskReferenceError(
            f"Invalid task reference {reference!r}. Expected 'package.module:ClassName'.",
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as error:
        raise TaskReferenceError(f"Cannot import module {module_name!r}: {error}") from error

    task_cls = getattr(module, class_name, None)
    if not isinstance(task_cls, type) or not issubclass(task_cls, Tasker):
        raise TaskReferenceError(f"{reference!r} is not a Tasker subclass.")
    return task_cls
