"""CLI commands for trs.

This package contains all subcommand implementations.
"""

from trs.cli.commands import config, empty, move, restore, show

__all__ = ["config", "empty", "move", "restore", "show"]
