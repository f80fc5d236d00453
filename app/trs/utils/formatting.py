"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from trs.core.theme import get_theme

if TYPE_CHECKING:
    from trs.models.entry import TrashEntry


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def printable(text: str) -> str:
    """Make filesystem text safe to write to a UTF-8 stream.

    Undecodable bytes in file names arrive as lone surrogates; they are
    shown as backslash escapes such as \\xe9 instead.
    """
    return os.fsencode(text).decode("utf-8", "backslashreplace")


def escape_path(text: str) -> str:
    """Escape filesystem text for Rich markup."""
    return escape(printable(text))


def format_timestamp(entry: TrashEntry) -> str:
    """Format an entry's trash time in local time (YYYY-MM-DD HH:MM:SS)."""
    return entry.trashed_at_dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def create_entries_table(title: str = "Trash") -> Table:
    """Create a pre-configured table for displaying trash entries.

    Args:
        title: Table title.

    Returns:
        Rich Table with No., ID, Type, Name, Original Location and Trashed At columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("No.", justify="right", style="muted")
    table.add_column("ID", style="muted", overflow="fold")
    table.add_column("Type", no_wrap=True)
    table.add_column("Name", overflow="fold")
    table.add_column("Original Location", style="entry.location", overflow="fold")
    table.add_column("Trashed At", style="entry.timestamp", no_wrap=True)
    return table


def format_entry_row(number: int, entry: TrashEntry) -> tuple[str, str, str, str, str, str]:
    """Format a trash entry as a table row.

    Directories get a trailing slash and their own style.

    Returns:
        Tuple of (number, id, type, name, original location, trashed at) with Rich markup.
    """
    if entry.is_directory:
        kind = "[entry.directory]dir[/]"
        name = f"[entry.directory]{escape_path(entry.name)}/[/]"
    else:
        kind = "[entry.file]file[/]"
        name = f"[entry.file]{escape_path(entry.name)}[/]"
    return (
        str(number),
        escape_path(entry.id),
        kind,
        name,
        escape_path(entry.original_path),
        format_timestamp(entry),
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
