"""Show command for listing the trash.

This module provides `trs show` (alias `trs list`).
"""

import json
from typing import Annotated

import typer

from trs.cli.context import fatal_errors, get_trash_bin, is_quiet
from trs.cli.display import print_entries_table
from trs.utils.formatting import console, escape_path, print_info


def show(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Display all items in the trash with their original paths.

    Items are listed in the order they were trashed. The numbers in the
    first column are the ones `trs restore` asks for.

    Examples:
        trs show
        trs show --json    # JSON output for scripting
    """
    trash_bin = get_trash_bin(ctx)

    with fatal_errors():
        entries = trash_bin.list()

    if json_output:
        # Plain echo: Rich would wrap long paths and break the JSON
        typer.echo(json.dumps([entry.to_dict() for entry in entries], indent=2))
        return

    if not entries:
        print_info("Trash is empty.")
        return

    print_entries_table(entries)
    if not is_quiet(ctx):
        console.print(f"\n[dim]{len(entries)} item(s) in {escape_path(str(trash_bin.root))}[/dim]")
