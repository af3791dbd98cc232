"""Installer configuration.

Configuration is stored in ~/.config/arch-installer/config.toml and is
optional; a missing file yields the defaults.

Example:
    default_prefix = "/opt/arch"
    refresh_desktop_database = false
"""

import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from archinstaller.core.errors import ConfigError
from archinstaller.core.paths import get_config_path

DEFAULT_PREFIX = "/usr/local"


class InstallerConfig(BaseModel):
    """Settings applied to install, uninstall and reinstall.

    Attributes:
        default_prefix: Prefix used when --prefix is not given.
        refresh_desktop_database: Run update-desktop-database after
            touching the system-wide applications directory.
    """

    model_config = ConfigDict(extra="forbid")

    default_prefix: Annotated[
        str,
        Field(description="Prefix used when --prefix is not given"),
    ] = DEFAULT_PREFIX
    refresh_desktop_database: Annotated[
        bool,
        Field(description="Refresh the desktop database for /usr/local installs"),
    ] = True

    @field_validator("default_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """Require an absolute prefix without a trailing slash."""
        if not v.startswith("/"):
            msg = f"default_prefix must be an absolute path, got '{v}'"
            raise ValueError(msg)
        return v.rstrip("/") or "/"


def load_config(path: Path | None = None) -> InstallerConfig:
    """Load installer configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated InstallerConfig; defaults when the file does not exist.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return InstallerConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return InstallerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e
