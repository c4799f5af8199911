"""Backup directory commands.

Plans and prepares the timestamped backup directory, and copies a
tree into it.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from drushfs.backup.planner import BackupPlanner
from drushfs.cli.types import exit_on_errors, get_run_context, print_fs_error
from drushfs.filesystem.operator import TreeOperator
from drushfs.utils.formatting import print_success

app = typer.Typer(
    help="Backup directory planning.",
    no_args_is_help=True,
)

SubdirArgument = Annotated[
    str | None,
    typer.Argument(help="Subdirectory under the backup base (default: database name)."),
]


@app.command("plan")
def plan(ctx: typer.Context, subdir: SubdirArgument = None) -> None:
    """Print the backup directory this run would use, without creating it."""
    planner = BackupPlanner(get_run_context(ctx))
    typer.echo(str(planner.plan_backup_dir(subdir)))


@app.command("prepare")
def prepare(ctx: typer.Context, subdir: SubdirArgument = None) -> None:
    """Create the backup directory and print its path."""
    run_context = get_run_context(ctx)
    backup_dir = BackupPlanner(run_context).prepare_backup_dir(subdir)
    exit_on_errors(run_context)
    typer.echo(str(backup_dir))


@app.command("create")
def create(
    ctx: typer.Context,
    src: Annotated[Path, typer.Argument(help="File or directory to back up.")],
    subdir: SubdirArgument = None,
) -> None:
    """Copy a file or directory into a fresh backup directory."""
    run_context = get_run_context(ctx)
    backup_dir = BackupPlanner(run_context).prepare_backup_dir(subdir)
    exit_on_errors(run_context)
    if backup_dir is None:
        raise typer.Exit(code=1)

    dest = backup_dir / src.resolve().name
    result = TreeOperator(run_context).copy(src, dest)
    if not result.success:
        print_fs_error(result.error)
        raise typer.Exit(code=1)

    print_success(f"Backed up {escape(str(src))} to {escape(str(dest))}")
