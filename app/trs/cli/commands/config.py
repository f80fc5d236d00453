"""Config commands for inspecting and creating the settings file."""

from typing import Annotated

import typer
from rich.table import Table

from trs.cli.context import get_config, get_config_file
from trs.core.config import ConfigError, TrsConfig, save_config
from trs.utils.formatting import console, escape_path, print_error, print_success

app = typer.Typer(
    help="Show or create the trs configuration.",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    config = get_config(ctx)
    trash_dir = ctx.obj.get("trash_dir") if ctx.obj else None
    config_file = get_config_file(ctx)

    table = Table(title="Configuration", header_style="bold_header", border_style="border")
    table.add_column("Setting", style="bold")
    table.add_column("Value", overflow="fold")

    source = "" if config_file.exists() else " [muted](not found, using defaults)[/]"
    table.add_row("config file", escape_path(str(config_file)) + source)
    table.add_row("trash_dir", escape_path(str(config.effective_trash_dir(trash_dir))))
    table.add_row("lock_retries", str(config.lock_retries))
    table.add_row("lock_backoff_seconds", str(config.lock_backoff_seconds))
    table.add_row("confirm_empty", str(config.confirm_empty).lower())

    console.print(table)


@app.command()
def path(ctx: typer.Context) -> None:
    """Print the location of the configuration file."""
    typer.echo(str(get_config_file(ctx)))


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a configuration file with default settings."""
    config_file = get_config_file(ctx)

    if config_file.exists() and not force:
        print_error(f"Config file already exists: {escape_path(str(config_file))} (use --force)")
        raise typer.Exit(code=1)

    try:
        saved = save_config(TrsConfig(), config_file)
    except ConfigError as e:
        print_error(escape_path(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Wrote default configuration to {escape_path(str(saved))}")
