"""User configuration for trs.

Settings are stored in ~/.config/trs/config.toml and validated with
Pydantic. A missing file is not an error: every setting has a default.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from trs.core.paths import TRASH_DIR_ENV, ensure_dir, get_config_path, get_default_trash_dir

logger = logging.getLogger(__name__)

DEFAULT_LOCK_RETRIES = 10
DEFAULT_LOCK_BACKOFF = 0.05


class TrsConfig(BaseModel):
    """Configuration for trs.

    Attributes:
        trash_dir: Trash root override. If None, the XDG data default is used.
        lock_retries: How often to retry a contended index lock.
        lock_backoff_seconds: Initial delay between lock retries (doubles each time).
        confirm_empty: Ask before permanently emptying the trash.
    """

    model_config = ConfigDict(extra="forbid")

    trash_dir: Annotated[
        Path | None,
        Field(description="Trash root (None = ~/.local/share/trs/trash)"),
    ] = None
    lock_retries: Annotated[
        int,
        Field(ge=0, le=100, description="Index lock retries (0-100)"),
    ] = DEFAULT_LOCK_RETRIES
    lock_backoff_seconds: Annotated[
        float,
        Field(gt=0, le=5, description="Initial lock retry delay in seconds"),
    ] = DEFAULT_LOCK_BACKOFF
    confirm_empty: Annotated[
        bool,
        Field(description="Prompt before emptying the trash"),
    ] = True

    @field_validator("trash_dir", mode="after")
    @classmethod
    def expand_trash_dir(cls, v: Path | None) -> Path | None:
        """Expand a leading ~ in the configured trash root."""
        if v is None:
            return None
        return v.expanduser()

    def effective_trash_dir(self, override: Path | None = None) -> Path:
        """Resolve the trash root to use.

        Precedence: explicit override, then the TRS_TRASH_DIR environment
        variable, then the configured trash_dir, then the XDG default.

        Args:
            override: Trash root given on the command line.

        Returns:
            Absolute path of the trash root.
        """
        if override is not None:
            return override.expanduser().absolute()
        env_value = os.environ.get(TRASH_DIR_ENV)
        if env_value:
            return Path(env_value).expanduser().absolute()
        if self.trash_dir is not None:
            return self.trash_dir.absolute()
        return get_default_trash_dir()


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> TrsConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated TrsConfig. Defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return TrsConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return TrsConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: TrsConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        config: The TrsConfig to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    try:
        ensure_dir(config_path.parent, "config")
    except RuntimeError as e:
        raise ConfigError(str(e)) from e

    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config {config_path}: {e}") from e

    return config_path


def config_to_dict(config: TrsConfig) -> dict[str, object]:
    """Convert TrsConfig to a dictionary for TOML serialization.

    TOML has no null, so an unset trash_dir is left out.

    Args:
        config: The TrsConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    result: dict[str, object] = {}
    if config.trash_dir is not None:
        result["trash_dir"] = str(config.trash_dir)
    result["lock_retries"] = config.lock_retries
    result["lock_backoff_seconds"] = config.lock_backoff_seconds
    result["confirm_empty"] = config.confirm_empty
    return result
