"""Directory tree commands.

Provides cp, mv, rm and mkdir for whole directory trees, plus a quick
non-empty file check.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from drushfs.cli.types import get_run_context, print_fs_error
from drushfs.filesystem.operator import MoveStrategy, TreeActionResult, TreeOperator
from drushfs.filesystem.tree import file_nonempty
from drushfs.utils.formatting import console, print_info, print_success, print_warning

app = typer.Typer(
    help="Copy, move, delete and create directory trees.",
    no_args_is_help=True,
)


@app.command("cp")
def copy(
    ctx: typer.Context,
    src: Annotated[Path, typer.Argument(help="File or directory to copy.")],
    dest: Annotated[Path, typer.Argument(help="Destination path to create.")],
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Replace the destination if it exists."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be copied."),
    ] = False,
) -> None:
    """Recursively copy a file or directory, keeping permission bits."""
    operator = TreeOperator(get_run_context(ctx), dry_run=dry_run)
    result = operator.copy(src, dest, overwrite=overwrite)
    _report_transfer(result, verb="copy")


@app.command("mv")
def move(
    ctx: typer.Context,
    src: Annotated[Path, typer.Argument(help="File or directory to move.")],
    dest: Annotated[Path, typer.Argument(help="New location.")],
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Replace the destination if it exists."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be moved."),
    ] = False,
) -> None:
    """Move a file or directory, copying across filesystems if needed."""
    operator = TreeOperator(get_run_context(ctx), dry_run=dry_run)
    result = operator.move(src, dest, overwrite=overwrite)
    _report_transfer(result, verb="move")


@app.command("rm")
def remove(
    ctx: typer.Context,
    paths: Annotated[list[Path], typer.Argument(help="Paths to delete recursively.")],
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Recursively delete files and directories."""
    if not dry_run and not yes:
        confirmed = typer.confirm(
            f"Delete {len(paths)} path(s) and everything below them?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    operator = TreeOperator(get_run_context(ctx), dry_run=dry_run)
    results = [operator.delete(path) for path in paths]

    _print_results("Deletion Results", results, done_label="deleted")

    if any(not r.success for r in results):
        raise typer.Exit(code=1)


@app.command("mkdir")
def make_dirs(
    ctx: typer.Context,
    paths: Annotated[list[Path], typer.Argument(help="Directories to create.")],
) -> None:
    """Create directories along with any missing parents."""
    operator = TreeOperator(get_run_context(ctx))
    results = [operator.mkdir(path) for path in paths]

    failed = [r for r in results if not r.success]
    for r in failed:
        print_fs_error(r.error)
    if failed:
        raise typer.Exit(code=1)

    print_success(f"{len(results)} directory path(s) ready.")


@app.command("check")
def check(
    path: Annotated[Path, typer.Argument(help="File to check.")],
) -> None:
    """Check that a file exists and is not empty."""
    if file_nonempty(path):
        print_success(f"{escape(str(path))} is not empty.")
        return
    print_warning(f"{escape(str(path))} is missing or empty.")
    raise typer.Exit(code=1)


# === Private helper functions ===


def _report_transfer(result: TreeActionResult, *, verb: str) -> None:
    """Print the outcome of a copy or move and exit non-zero on failure."""
    src = escape(result.source or "")
    dest = escape(result.path)

    if not result.success:
        print_fs_error(result.error)
        raise typer.Exit(code=1)

    if result.dry_run:
        print_info(f"Dry-run: would {verb} {src} to {dest}")
        return

    detail = ""
    if result.strategy is MoveStrategy.COPY:
        detail = " (copied across filesystems)"
    past = "copied" if verb == "copy" else "moved"
    print_success(f"{src} {past} to {dest}{detail}")


def _print_results(title: str, results: list[TreeActionResult], *, done_label: str) -> None:
    """Display per-path results as a table with a summary line."""
    table = Table(title=title, show_lines=False)
    table.add_column("Path", style="bold")
    table.add_column("Status", width=10)
    table.add_column("Details", style="dim")

    for r in results:
        if r.dry_run:
            status = "[info]dry-run[/]"
            detail = "Would delete"
        elif r.success:
            status = f"[success]{done_label}[/]"
            detail = ""
        else:
            status = "[error]failed[/]"
            detail = escape(r.error.message) if r.error else "Unknown error"
        table.add_row(escape(r.path), status, detail)

    console.print(table)

    success_count = sum(1 for r in results if r.success and not r.dry_run)
    fail_count = sum(1 for r in results if not r.success)
    dry_count = sum(1 for r in results if r.dry_run)

    if dry_count:
        print_info(f"Dry-run: {dry_count} path(s) would be deleted.")
    elif fail_count:
        print_warning(f"{success_count} succeeded, {fail_count} failed")
    else:
        print_success(f"All {success_count} path(s) processed successfully.")
