"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path
from unittest.mock import patch

import pytest
import trs.core.theme as theme_module
from pydantic import ValidationError
from rich.style import Style
from rich.theme import Theme
from trs.core.theme import (
    ThemeColors,
    _load_toml_colors,
    get_rich_theme,
    get_theme,
    load_theme,
)


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.text == "#ffffff"
        assert colors.directory == "#0e8ac8"
        assert colors.error == "#f53263"

    def test_short_hex_accepted(self) -> None:
        assert ThemeColors(file="#abc").file == "#abc"

    def test_whitespace_stripped(self) -> None:
        assert ThemeColors(file="  #AABBCC ").file == "#AABBCC"

    def test_invalid_hex_no_hash(self) -> None:
        with pytest.raises(ValidationError, match="must start with '#'"):
            ThemeColors(text="ffffff")

    def test_invalid_hex_wrong_length(self) -> None:
        with pytest.raises(ValidationError, match="#RGB or #RRGGBB"):
            ThemeColors(text="#ffff")

    def test_invalid_hex_chars(self) -> None:
        with pytest.raises(ValidationError, match="invalid hex color"):
            ThemeColors(text="#gggggg")

    def test_extra_fields_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            ThemeColors(unknown="#ffffff")  # type: ignore[call-arg]


class TestLoadTomlColors:
    """Tests for _load_toml_colors."""

    def test_loads_valid_toml(self, tmp_path: Path) -> None:
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\nfile = "#123456"\nbroken = 5\n')

        assert _load_toml_colors(theme_file) == {"file": "#123456"}

    def test_returns_none_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_toml_colors(tmp_path / "missing.toml") is None

    def test_returns_none_for_invalid_toml(self, tmp_path: Path) -> None:
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("[colors\n")

        assert _load_toml_colors(theme_file) is None

    def test_returns_none_for_non_table_colors(self, tmp_path: Path) -> None:
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('colors = "red"\n')

        assert _load_toml_colors(theme_file) is None


class TestLoadTheme:
    """Tests for load_theme."""

    def test_defaults_without_user_file(self, tmp_path: Path) -> None:
        assert load_theme(tmp_path / "missing.toml") == ThemeColors()

    def test_user_overrides_applied(self, tmp_path: Path) -> None:
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ndirectory = "#ff0000"\n')

        colors = load_theme(theme_file)

        assert colors.directory == "#ff0000"
        assert colors.file == ThemeColors().file

    def test_graceful_fallback_on_invalid_user_theme(self, tmp_path: Path) -> None:
        """Invalid user colors are ignored in favor of the defaults."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ndirectory = "blue"\n')

        assert load_theme(theme_file) == ThemeColors()


class TestGetRichTheme:
    """Tests for get_rich_theme."""

    def test_returns_rich_theme(self) -> None:
        assert isinstance(get_rich_theme(ThemeColors()), Theme)

    def test_includes_entry_styles(self) -> None:
        theme = get_rich_theme(ThemeColors())
        for name in ("entry.file", "entry.directory", "entry.location", "entry.timestamp"):
            assert name in theme.styles

    def test_uses_provided_colors(self) -> None:
        theme = get_rich_theme(ThemeColors(location="#123456"))
        assert theme.styles["entry.location"] == Style.parse("#123456")


class TestGetTheme:
    """Tests for the cached get_theme."""

    def test_caches_theme(self) -> None:
        with patch.object(theme_module, "_cached_theme", None):
            first = get_theme()
            second = get_theme()

        assert first is second
