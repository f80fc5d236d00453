"""Utility modules for trs.

This module exports commonly used utility functions.
"""

from trs.utils.formatting import (
    console,
    create_entries_table,
    err_console,
    format_entry_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_entries_table",
    "err_console",
    "format_entry_row",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
