"""CLI entrypoint for build-tasker."""

from collections.abc import Iterator
from contextlib import contextmanager

import rich_click as click

from build_tasker import __version__
from build_tasker.controllers import (
    DescribeTaskCommand,
    ExecuteTaskCommand,
    RunTaskCommand,
    TaskCliController,
    TaskReferenceError,
)
from build_tasker.errors import TaskerError

click.rich_click.USE_MARKDOWN = True
TASK_CONTROLLER = TaskCliController()
_PASSTHROUGH = {"ignore_unknown_options": True}


@click.group()
@click.version_option(version=__version__, prog_name="build-tasker")
def build_tasker() -> None:
    """Build task runner CLI."""


@build_tasker.command("run", context_settings=_PASSTHROUGH)
@click.argument("reference")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def run_task(reference: str, args: tuple[str, ...]) -> None:
    """Run a task in-process, as its standalone program would.

    REFERENCE is `package.module:ClassName`; ARGS are `Name=Value` tokens.
    """

    with _cli_errors():
        lines = TASK_CONTROLLER.run(RunTaskCommand(reference=reference, args=args))
    _emit_lines(lines)


@build_tasker.command("execute", context_settings=_PASSTHROUGH)
@click.argument("reference")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def execute_task(reference: str, args: tuple[str, ...]) -> None:
    """Run a task the way a build host does, delegating to its wrapped executable if present."""

    with _cli_errors():
        result = TASK_CONTROLLER.execute(ExecuteTaskCommand(reference=reference, args=args))
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("Task reported failure.")


@build_tasker.command("describe", context_settings=_PASSTHROUGH)
@click.argument("reference")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def describe_task(reference: str, args: tuple[str, ...]) -> None:
    """Show task properties, the wrapped executable and the delegated arguments."""

    with _cli_errors():
        lines = TASK_CONTROLLER.describe(DescribeTaskCommand(reference=reference, args=args))
    _emit_lines(lines)


@contextmanager
def _cli_errors() -> Iterator[None]:
    try:
        yield
    except TaskReferenceError as error:
        raise click.BadParameter(str(error), param_hint="REFERENCE") from error
    except (TaskerError, ValueError) as error:
        raise click.ClickException(str(error)) from error


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    build_tasker()
