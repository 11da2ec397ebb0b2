"""Exceptions raised by build-tasker."""

from __future__ import annotations


class TaskerError(Exception):
    """Base class for build-tasker errors."""


class PropertyValueError(TaskerError, ValueError):
    """A command-line value could not be converted to the property's type."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"Invalid value for property {name!r}: {value!r} ({reason})")
        self.name = name
        self.value = value


class TaskLaunchError(TaskerError):
    """Wrapped task executable failed to start."""

    def __init__(self, message: str, *, executable: str) -> None:
        super().__init__(message)
        self.executable = executable
