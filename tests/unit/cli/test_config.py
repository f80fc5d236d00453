"""Unit tests for config commands."""

import tomllib
from pathlib import Path

from trs.cli.main import app
from trs.core.paths import APP_NAME
from typer.testing import CliRunner

runner = CliRunner()


class TestConfigPath:
    """Tests for trs config path."""

    def test_default_path(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["config", "path"])

        assert result.exit_code == 0
        assert result.stdout.strip() == str(tmp_path / "xdg-config" / APP_NAME / "config.toml")

    def test_explicit_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        result = runner.invoke(app, ["--config", str(config_file), "config", "path"])

        assert result.stdout.strip() == str(config_file)


class TestConfigInit:
    """Tests for trs config init."""

    def test_writes_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "conf" / "config.toml"

        result = runner.invoke(app, ["-c", str(config_file), "config", "init"])

        assert result.exit_code == 0
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
        assert data == {"lock_retries": 10, "lock_backoff_seconds": 0.05, "confirm_empty": True}

    def test_refuses_overwrite(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text("confirm_empty = false\n")

        result = runner.invoke(app, ["-c", str(config_file), "config", "init"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert config_file.read_text() == "confirm_empty = false\n"

    def test_force(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text("confirm_empty = false\n")

        result = runner.invoke(app, ["-c", str(config_file), "config", "init", "--force"])

        assert result.exit_code == 0
        assert "confirm_empty = true" in config_file.read_text()


class TestConfigShow:
    """Tests for trs config show."""

    def test_shows_effective_values(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text("lock_retries = 7\n")

        result = runner.invoke(
            app,
            ["-c", str(config_file), "--trash-dir", str(tmp_path / "t"), "config", "show"],
        )

        assert result.exit_code == 0
        assert "lock_retries" in result.output
        assert "7" in result.output
        assert str(tmp_path / "t") in result.output

    def test_missing_file_noted(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["-c", str(tmp_path / "none.toml"), "config", "show"])

        assert result.exit_code == 0
        assert "using defaults" in result.output
