"""Shared helpers for CLI commands.

Commands reach configuration and the trash bin through the Typer context
populated by the main callback, so every command honors --config and
--trash-dir the same way.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from trs.core.config import ConfigError, TrsConfig, load_config
from trs.core.paths import get_config_path
from trs.trash.bin import TrashBin
from trs.trash.errors import FatalTrashError
from trs.utils.formatting import escape_path, print_error


def _options(ctx: typer.Context) -> dict[str, object]:
    ctx.ensure_object(dict)
    return ctx.obj


def get_config_file(ctx: typer.Context) -> Path:
    """Config file selected with --config, or the default location."""
    path = _options(ctx).get("config_path")
    return path if isinstance(path, Path) else get_config_path()


def get_config(ctx: typer.Context) -> TrsConfig:
    """Load the configuration once per invocation.

    Exits with code 1 if the config file is invalid.
    """
    options = _options(ctx)
    cached = options.get("config")
    if isinstance(cached, TrsConfig):
        return cached

    try:
        config = load_config(get_config_file(ctx))
    except ConfigError as e:
        print_error(escape_path(str(e)))
        raise typer.Exit(code=1) from e

    options["config"] = config
    return config


def get_trash_bin(ctx: typer.Context) -> TrashBin:
    """Create the TrashBin for this invocation."""
    trash_dir = _options(ctx).get("trash_dir")
    return TrashBin.from_config(
        get_config(ctx),
        trash_dir if isinstance(trash_dir, Path) else None,
    )


def is_quiet(ctx: typer.Context) -> bool:
    """Whether --quiet was given."""
    return bool(_options(ctx).get("quiet", False))


@contextmanager
def fatal_errors() -> Iterator[None]:
    """Turn index-level failures into an error message and exit code 1."""
    try:
        yield
    except FatalTrashError as e:
        print_error(escape_path(str(e)))
        raise typer.Exit(code=1) from e
