"""Shared Rich display functions for trash entries and batch results."""

from trs.models.entry import TrashEntry
from trs.trash.bin import TrashActionResult
from trs.utils.formatting import (
    console,
    escape_path,
    create_entries_table,
    format_entry_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)


def print_entries_table(entries: list[TrashEntry], title: str = "Trash") -> None:
    """Print trash entries as a numbered table.

    Numbers start at 1 and follow trash order, matching the numbers the
    interactive restore prompt accepts.
    """
    table = create_entries_table(title)
    for number, entry in enumerate(entries, start=1):
        table.add_row(*format_entry_row(number, entry))
    console.print(table)


def print_results(results: list[TrashActionResult], verb: str, *, quiet: bool = False) -> None:
    """Print one line per result.

    Failures are always printed. Successes are skipped in quiet mode.

    Args:
        results: Batch results to display.
        verb: Past tense of the operation ("Trashed", "Restored", "Purged").
        quiet: Only print failures.
    """
    for result in results:
        if not result.success:
            print_error(escape_path(result.error or f"{result.path}: unknown error"))
        elif quiet:
            continue
        elif result.dry_run:
            print_info(f"Would be {verb.lower()}: {escape_path(result.path)}")
        elif result.entry_id is not None:
            console.print(
                f"{verb} [entry.location]{escape_path(result.path)}[/] "
                f"[muted](id {escape_path(result.entry_id)})[/]"
            )
        else:
            console.print(f"{verb} [entry.location]{escape_path(result.path)}[/]")


def print_results_summary(results: list[TrashActionResult], noun: str = "item") -> None:
    """Print a summary line for a batch with more than one result.

    Shows a success message when everything succeeded, or a count of
    succeeded/failed items otherwise.
    """
    if len(results) < 2:
        return

    success_count = sum(1 for r in results if r.success)
    fail_count = len(results) - success_count

    if fail_count == 0:
        print_success(f"All {success_count} {noun}(s) processed successfully.")
    else:
        print_warning(f"{success_count} succeeded, {fail_count} failed")
