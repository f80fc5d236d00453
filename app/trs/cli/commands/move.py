"""Move command for trashing files and directories.

This module provides `trs move` (and the bare `trs PATH...` shorthand).
"""

from pathlib import Path
from typing import Annotated

import typer

from trs.cli.context import fatal_errors, get_trash_bin, is_quiet
from trs.cli.display import print_results, print_results_summary


def move(
    ctx: typer.Context,
    paths: Annotated[
        list[Path],
        typer.Argument(
            help="Path(s) to the file(s) or directory(ies) to move to trash.",
            show_default=False,
        ),
    ],
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Show what would be trashed."),
    ] = False,
) -> None:
    """Move files or directories to the trash.

    Each path is moved independently; a failure on one path does not stop
    the others. Exits with code 1 if any path failed.

    Examples:
        trs move notes.txt build/
        trs notes.txt              # same as trs move notes.txt
        trs move --dry-run *.log
    """
    trash_bin = get_trash_bin(ctx)

    with fatal_errors():
        results = trash_bin.trash(paths, dry_run=dry_run)

    print_results(results, "Trashed", quiet=is_quiet(ctx))
    if not is_quiet(ctx):
        print_results_summary(results, noun="path")

    if any(not r.success for r in results):
        raise typer.Exit(code=1)
