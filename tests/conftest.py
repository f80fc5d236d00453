"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from rich.console import Console
from trs.core.theme import get_theme
from trs.trash.bin import TrashBin

# Wide enough that temporary paths are never wrapped
_CONSOLE_WIDTH = 500

_CONSOLE_USERS = (
    "trs.utils.formatting",
    "trs.cli.display",
    "trs.cli.commands.show",
    "trs.cli.commands.config",
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep config, data, and trash locations inside the test directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.delenv("TRS_TRASH_DIR", raising=False)


@pytest.fixture(autouse=True)
def plain_consoles(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace the shared consoles with wide, colorless ones.

    The replacements write to whatever sys.stdout/sys.stderr are at print
    time, so CliRunner still captures them.
    """
    console = Console(theme=get_theme(), color_system=None, width=_CONSOLE_WIDTH)
    err_console = Console(theme=get_theme(), color_system=None, width=_CONSOLE_WIDTH, stderr=True)

    for module in _CONSOLE_USERS:
        monkeypatch.setattr(f"{module}.console", console)
    monkeypatch.setattr("trs.utils.formatting.err_console", err_console)
    monkeypatch.setattr("trs.core.logs.err_console", err_console)


@pytest.fixture
def trash_root(tmp_path: Path) -> Path:
    """Trash root that does not exist yet."""
    return tmp_path / "trash"


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Directory holding files to be trashed."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def trash_bin(trash_root: Path) -> TrashBin:
    """TrashBin on the temporary trash root without lock retries."""
    return TrashBin(trash_root, lock_retries=0)


@pytest.fixture
def cli_args(trash_root: Path) -> list[str]:
    """Global options pointing the CLI at the temporary trash root."""
    return ["--trash-dir", str(trash_root)]
