"""Temporary resource commands.

Shows where temporary files go and allocates scratch files and
directories. Anything allocated here is removed when the command
finishes, so these commands mostly serve to check the temp setup.
"""

from typing import Annotated

import typer

from drushfs.cli.types import exit_on_errors, get_run_context, get_temp_registry
from drushfs.temp.allocator import TEMP_FILE_PREFIX, TempAllocator

app = typer.Typer(
    help="Temporary files and directories.",
    no_args_is_help=True,
)


def _allocator(ctx: typer.Context) -> TempAllocator:
    return TempAllocator(get_run_context(ctx), get_temp_registry(ctx))


@app.command("root")
def root(ctx: typer.Context) -> None:
    """Print the directory temporary resources are created in."""
    allocator = _allocator(ctx)
    temp_root = allocator.temp_root()
    exit_on_errors(get_run_context(ctx))
    typer.echo(str(temp_root))


@app.command("file")
def file(
    ctx: typer.Context,
    prefix: Annotated[
        str,
        typer.Option("--prefix", "-p", help="File name prefix."),
    ] = TEMP_FILE_PREFIX,
    data: Annotated[
        str | None,
        typer.Option("--data", help="Content to write into the file."),
    ] = None,
) -> None:
    """Allocate a temporary file and print its path."""
    handle = _allocator(ctx).allocate_file(prefix, data)
    exit_on_errors(get_run_context(ctx))
    if handle is not None:
        typer.echo(str(handle.path))


@app.command("dir")
def directory(ctx: typer.Context) -> None:
    """Allocate a temporary directory and print its path."""
    handle = _allocator(ctx).allocate_dir()
    exit_on_errors(get_run_context(ctx))
    if handle is not None:
        typer.echo(str(handle.path))
