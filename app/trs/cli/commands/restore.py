"""Restore command for bringing items back from the trash.

This module provides `trs restore`, either for explicit ids or through an
interactive numbered selection.
"""

import re
from typing import Annotated

import typer

from trs.cli.context import fatal_errors, get_trash_bin, is_quiet
from trs.cli.display import print_entries_table, print_results, print_results_summary
from trs.models.entry import TrashEntry
from trs.utils.formatting import print_error, print_info

_RANGE = re.compile(r"^(\d+)-(\d+)$")


def parse_selection(text: str, count: int) -> list[int]:
    """Parse a selection like "1 3", "1,3" or "2-4" into list indices.

    Args:
        text: User input with 1-based item numbers and ranges.
        count: Number of selectable items.

    Returns:
        Zero-based indices in the order given, without duplicates.

    Raises:
        ValueError: If a token is not a number or range within 1..count.
    """
    indices: list[int] = []
    tokens = [t for t in re.split(r"[\s,]+", text.strip()) if t]
    if not tokens:
        msg = "No items selected"
        raise ValueError(msg)

    for token in tokens:
        match = _RANGE.match(token)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
            if start > end:
                msg = f"Invalid range: {token}"
                raise ValueError(msg)
            numbers = range(start, end + 1)
        elif token.isdigit():
            numbers = range(int(token), int(token) + 1)
        else:
            msg = f"Not a number: {token}"
            raise ValueError(msg)

        for number in numbers:
            if not 1 <= number <= count:
                msg = f"No item number {number} (choose 1-{count})"
                raise ValueError(msg)
            if number - 1 not in indices:
                indices.append(number - 1)

    return indices


def restore(
    ctx: typer.Context,
    ids: Annotated[
        list[str] | None,
        typer.Option(
            "--id",
            "-i",
            help="Id of an item to restore (repeatable). See `trs show`.",
            show_default=False,
        ),
    ] = None,
    restore_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Restore every item in the trash."),
    ] = False,
) -> None:
    """Restore items from the trash to their original locations.

    Without --id or --all, lists the trash and asks which items to restore.
    Missing parent directories are recreated. An item whose original
    location is occupied again is left in the trash.

    Examples:
        trs restore                      # interactive selection
        trs restore --id notes.txt-3fa9c2e1b0d4
        trs restore --all
    """
    trash_bin = get_trash_bin(ctx)

    if ids:
        selected = list(ids)
    else:
        with fatal_errors():
            entries = trash_bin.list()
        if not entries:
            print_info("Trash is empty.")
            return
        if restore_all:
            selected = [entry.id for entry in entries]
        else:
            selected = [entry.id for entry in _prompt_selection(entries)]

    with fatal_errors():
        results = trash_bin.restore(selected)

    print_results(results, "Restored", quiet=is_quiet(ctx))
    if not is_quiet(ctx):
        print_results_summary(results)

    if any(not r.success for r in results):
        raise typer.Exit(code=1)


def _prompt_selection(entries: list[TrashEntry]) -> list[TrashEntry]:
    """Show the trash and ask which items to restore."""
    print_entries_table(entries, title="Select item(s) to restore")
    answer = typer.prompt("Enter the number(s) of the item(s) to restore")

    try:
        indices = parse_selection(answer, len(entries))
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    return [entries[i] for i in indices]
