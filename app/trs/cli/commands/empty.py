"""Empty command for permanently purging the trash.

This module provides `trs empty`, the only command that deletes data.
"""

from typing import Annotated

import typer

from trs.cli.context import fatal_errors, get_config, get_trash_bin, is_quiet
from trs.cli.display import print_entries_table, print_results, print_results_summary
from trs.utils.formatting import print_info, print_success


def empty(
    ctx: typer.Context,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Show what would be deleted."),
    ] = False,
) -> None:
    """Permanently delete all items in the trash.

    Asks for confirmation unless --yes is given or confirm_empty is
    disabled in the configuration. Exits with code 1 if any item could
    not be deleted; those items stay in the trash.

    Examples:
        trs empty
        trs empty --dry-run
        trs empty -y
    """
    config = get_config(ctx)
    trash_bin = get_trash_bin(ctx)

    with fatal_errors():
        entries = trash_bin.list()

    if not entries:
        print_info("Trash is already empty.")
        return

    if dry_run:
        print_entries_table(entries, title="Would be deleted (dry-run)")
        print_info(f"Dry-run: {len(entries)} item(s) would be permanently deleted.")
        return

    if config.confirm_empty and not yes:
        confirmed = typer.confirm(
            f"Permanently delete {len(entries)} item(s) from the trash?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    with fatal_errors():
        results = trash_bin.empty()

    if any(not r.success for r in results):
        print_results(results, "Purged", quiet=True)
        print_results_summary(results)
        raise typer.Exit(code=1)

    if not is_quiet(ctx):
        print_success(f"Trash emptied: {len(results)} item(s) permanently deleted.")
