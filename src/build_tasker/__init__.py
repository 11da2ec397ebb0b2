"""Build tasks runnable from a build host or as standalone programs."""

from build_tasker.arguments import (
    apply_arguments,
    parse_argument,
    serialize_arguments,
    to_command_line,
)
from build_tasker.config import Settings
from build_tasker.errors import PropertyValueError, TaskerError, TaskLaunchError
from build_tasker.execution import (
    DelegatedExecution,
    ExecutionResult,
    ExecutionStrategy,
    InProcessExecution,
)
from build_tasker.properties import TaskProperty
from build_tasker.task import Tasker
from build_tasker.task_log import ConsoleLog, HostLog, RecordingLog, TaskLog

__version__ = "0.1.0"

__all__ = [
    "ConsoleLog",
    "DelegatedExecution",
    "ExecutionResult",
    "ExecutionStrategy",
    "HostLog",
    "InProcessExecution",
    "PropertyValueError",
    "RecordingLog",
    "Settings",
    "TaskLaunchError",
    "TaskLog",
    "TaskProperty",
    "Tasker",
    "TaskerError",
    "__version__",
    "apply_arguments",
    "parse_argument",
    "serialize_arguments",
    "to_command_line",
]
