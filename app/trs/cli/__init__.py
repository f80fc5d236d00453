"""CLI package for trs.

This package contains the Typer application and all subcommands.
"""

from trs.cli.main import app, run

__all__ = ["app", "run"]
