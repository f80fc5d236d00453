"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import sys
from pathlib import Path
from typing import Annotated

import typer

from trs import __version__
from trs.cli.commands import config, empty, move, restore, show
from trs.core.logs import configure_logging

# Create main Typer app
app = typer.Typer(
    name="trs",
    help="Move files to a recoverable trash instead of deleting them.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

# Global options that consume the following argument
_OPTIONS_WITH_VALUE = frozenset({"--trash-dir", "--config", "-c"})


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"trs version {__version__}")
        raise typer.Exit()


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
    trash_dir: Annotated[
        Path | None,
        typer.Option(
            "--trash-dir",
            help="Trash directory to use (overrides $TRS_TRASH_DIR and config).",
            show_default=False,
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the config file.",
            show_default=False,
        ),
    ] = None,
) -> None:
    """trs - a safe replacement for rm.

    Trashed items keep their original location so they can be restored
    later, until the trash is emptied.
    """
    configure_logging(verbose=verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["trash_dir"] = trash_dir
    ctx.obj["config_path"] = config_path


# Register commands
app.command()(move.move)
app.command()(show.show)
app.command("list", hidden=True)(show.show)
app.command()(restore.restore)
app.command()(empty.empty)
app.add_typer(config.app, name="config")


def _command_names() -> set[str]:
    names = {
        info.name or getattr(info.callback, "__name__", "").replace("_", "-")
        for info in app.registered_commands
    }
    names.update(info.name for info in app.registered_groups if info.name)
    return names


def with_default_command(args: list[str]) -> list[str]:
    """Insert `move` when the first positional argument is not a command.

    Lets `trs notes.txt` behave like `trs move notes.txt`. Global options
    before the first path are kept in front of the inserted command.

    Args:
        args: Command-line arguments without the program name.

    Returns:
        The arguments to hand to the Typer app.
    """
    commands = _command_names()
    skip_next = False
    for position, arg in enumerate(args):
        if skip_next:
            skip_next = False
            continue
        if arg == "--":
            if position + 1 < len(args):
                return [*args[:position], "move", *args[position:]]
            return args
        if arg in _OPTIONS_WITH_VALUE:
            skip_next = True
            continue
        if arg.startswith("-"):
            continue
        if arg in commands:
            return args
        return [*args[:position], "move", *args[position:]]
    return args


def run() -> None:
    """Console script entry point."""
    app(args=with_default_command(sys.argv[1:]), prog_name="trs")


if __name__ == "__main__":
    run()
