"""Shared helpers for CLI commands.

This module gives every command module the same way of reaching the
run context and temp registry set up by the main callback.
"""

import typer
from rich.markup import escape

from drushfs.core.context import RunContext
from drushfs.core.errors import FsError
from drushfs.temp.registry import TempRegistry, get_registry
from drushfs.utils.formatting import print_error


def get_run_context(ctx: typer.Context) -> RunContext:
    """Get the run context created by the main callback.

    Args:
        ctx: Typer context of the running command.

    Returns:
        The shared RunContext, or an empty one when the command is
        invoked without the main callback.
    """
    obj = ctx.find_root().obj
    if isinstance(obj, dict):
        run_context = obj.get("run_context")
        if isinstance(run_context, RunContext):
            return run_context
        obj["run_context"] = run_context = RunContext()
        return run_context
    return RunContext()


def get_temp_registry(ctx: typer.Context) -> TempRegistry:
    """Get the temp registry for this invocation.

    Args:
        ctx: Typer context of the running command.

    Returns:
        The invocation's TempRegistry, or the process-wide one.
    """
    obj = ctx.find_root().obj
    if isinstance(obj, dict):
        registry = obj.get("registry")
        if isinstance(registry, TempRegistry):
            return registry
    return get_registry()


def print_fs_error(error: FsError | None) -> None:
    """Print a reported error, escaping Rich markup in paths."""
    if error is None:
        print_error("Unknown error")
        return
    print_error(escape(str(error)))


def exit_on_errors(run_context: RunContext) -> None:
    """Print every reported error and exit with code 1 if there were any.

    Args:
        run_context: Run context whose error log to check.

    Raises:
        typer.Exit: If any error was reported.
    """
    if not run_context.has_errors:
        return
    for error in run_context.errors:
        print_fs_error(error)
    raise typer.Exit(code=1)
