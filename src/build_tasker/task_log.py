"""Line sinks used by tasks to report progress."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

import rich_click as click


class TaskLog(Protocol):
    """Protocol implemented by task log sinks."""

    def write(self, line: str) -> None:
        """Record or display one line of text."""


class HostLog:
    """Forward lines to the hosting build system.

    A host that has its own log stream passes ``sink``; otherwise lines go to
    a stdlib logger at INFO.
    """

    def __init__(
        self,
        sink: Callable[[str], None] | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._sink = sink
        self._logger = logger or logging.getLogger("build_tasker.host")

    def write(self, line: str) -> None:
        if self._sink is not None:
            self._sink(line)
            return
        self._logger.info("%s", line)


class ConsoleLog:
    """Print lines to the console."""

    def __init__(self, *, err: bool = False) -> None:
        self._err = err

    def write(self, line: str) -> None:
        click.echo(line, err=self._err)


class RecordingLog:
    """Keep lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write(self, line: str) -> None:
        self.lines.append(line)
