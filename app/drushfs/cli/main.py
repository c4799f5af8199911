"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from drushfs import __version__
from drushfs.cli.commands import backup, config, fs, tmp
from drushfs.core.config import ConfigError, FsConfig, load_config, load_config_or_default
from drushfs.core.context import RunContext
from drushfs.temp.registry import TempRegistry
from drushfs.utils.formatting import err_console, print_error, print_warning

# Create main Typer app
app = typer.Typer(
    name="drushfs",
    help="Filesystem utilities: tree copy/move/delete, temp files and backup directories.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"drushfs version {__version__}")
        raise typer.Exit()


def _skip_exit_hook(drain: Callable[[], None]) -> None:
    """Exit hook installer that installs nothing."""


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    """Route log records to stderr through Rich."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def _load_config(ctx: typer.Context, config_path: Path | None) -> FsConfig:
    """Load the config file, tolerating a broken one for the config command."""
    try:
        if config_path is not None:
            return load_config(config_path)
        return load_config_or_default()
    except ConfigError as e:
        if ctx.invoked_subcommand == "config":
            print_warning(f"{e} (using defaults)")
            return FsConfig()
        print_error(str(e))
        raise typer.Exit(code=1) from e


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file to use instead of ~/.config/drushfs/config.toml.",
        ),
    ] = None,
    backup_location: Annotated[
        str | None,
        typer.Option("--backup-location", help="Exact directory to store backups in."),
    ] = None,
    backup_dir: Annotated[
        str | None,
        typer.Option("--backup-dir", help="Base directory for timestamped backups."),
    ] = None,
    root: Annotated[
        str | None,
        typer.Option("--root", "-r", help="Protected root directory backups must stay out of."),
    ] = None,
    database: Annotated[
        str | None,
        typer.Option("--database", "-d", help="Database name used to group backups."),
    ] = None,
    temp_dir: Annotated[
        str | None,
        typer.Option("--temp-dir", help="Preferred directory for temporary files."),
    ] = None,
) -> None:
    """drushfs - filesystem utilities for site tooling.

    Temporary files and directories created by a command are removed
    when the command finishes.
    """
    _configure_logging(verbose=verbose, quiet=quiet)

    fs_config = _load_config(ctx, config_path)
    run_context = RunContext.from_config(
        fs_config,
        overrides={
            "backup-location": backup_location,
            "backup-dir": backup_dir,
            "root": root,
            "database": database,
            "temp-dir": temp_dir,
        },
    )

    # Drained when the command context closes, on success and on error alike
    registry = TempRegistry(install_hook=_skip_exit_hook)
    ctx.call_on_close(registry.drain)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path
    ctx.obj["run_context"] = run_context
    ctx.obj["registry"] = registry


# Register commands
app.add_typer(fs.app, name="fs")
app.add_typer(tmp.app, name="tmp")
app.add_typer(backup.app, name="backup")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
