"""Configuration commands.

Shows the effective options and writes a config file from them.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from drushfs.cli.types import get_run_context
from drushfs.core.config import ConfigError, FsConfig, save_config
from drushfs.core.paths import get_config_path, get_default_backup_base
from drushfs.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and write drushfs configuration.",
    no_args_is_help=True,
)


def _config_path(ctx: typer.Context) -> Path:
    obj = ctx.find_root().obj
    if isinstance(obj, dict) and obj.get("config_path") is not None:
        return Path(obj["config_path"])
    return get_config_path()


@app.command("show")
def show(ctx: typer.Context) -> None:
    """Show effective options (config file merged with flags)."""
    options = get_run_context(ctx).options

    table = Table(title="Effective Options", show_lines=False)
    table.add_column("Option", style="bold")
    table.add_column("Value")

    defaults = {
        "backup-dir": f"{get_default_backup_base()} (default)",
        "database": "unknown (default)",
    }
    for name in FsConfig.model_fields:
        option = name.replace("_", "-")
        value = options.get(option, defaults.get(option, "-"))
        table.add_row(option, escape(str(value)))

    console.print(table)
    console.print(f"\n[dim]Config file: {escape(str(_config_path(ctx)))}[/dim]")


@app.command("init")
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write the effective options to the config file.

    Options given as flags (e.g. --backup-dir) are saved, so
    `drushfs --backup-dir /srv/backups config init` persists them.
    """
    path = _config_path(ctx)
    if path.exists() and not force:
        print_info(f"Config already exists: {escape(str(path))} (use --force to overwrite)")
        raise typer.Exit(code=1)

    options = get_run_context(ctx).options
    fs_config = FsConfig(
        **{
            name: options[name.replace("_", "-")]
            for name in FsConfig.model_fields
            if name.replace("_", "-") in options
        }
    )

    try:
        saved = save_config(fs_config, path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {escape(str(saved))}")
