"""Logging setup for the trs CLI.

Library modules only create loggers; the CLI attaches one Rich handler
to the root logger so log records render on stderr next to command output.
"""

import logging

from rich.logging import RichHandler

from trs.utils.formatting import err_console

# Handler installed by configure_logging(), replaced on reconfiguration
_handler: logging.Handler | None = None


def configure_logging(*, verbose: bool = False) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Show debug records. Otherwise only warnings and errors.
    """
    global _handler
    root = logging.getLogger()
    level = logging.DEBUG if verbose else logging.WARNING

    if _handler is not None:
        root.removeHandler(_handler)

    _handler = RichHandler(
        console=err_console,
        show_path=verbose,
        show_time=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    _handler.setLevel(level)
    root.addHandler(_handler)
    root.setLevel(level)
