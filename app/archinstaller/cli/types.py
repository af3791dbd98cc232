"""Shared options and helpers for CLI commands.

This module provides the option types and factory functions used
across the install, uninstall and reinstall commands to avoid code
duplication.
"""

from collections.abc import Callable
from typing import Annotated

import typer

from archinstaller.core.config import InstallerConfig
from archinstaller.core.deployer import Deployer
from archinstaller.core.environment import Environment
from archinstaller.core.manifest import ManifestStore
from archinstaller.core.reverser import Reverser
from archinstaller.utils.formatting import confirm

PrefixOption = Annotated[
    str | None,
    typer.Option(
        "--prefix",
        "-p",
        help="Installation prefix (default: /usr/local, or default_prefix in config.toml).",
        show_default=False,
    ),
]

YesOption = Annotated[
    bool,
    typer.Option(
        "--yes",
        "-y",
        help="Skip confirmation prompts.",
    ),
]


def _assume_yes(_message: str) -> bool:
    return True


def get_confirm(yes: bool) -> Callable[[str], bool]:
    """Return the confirmation callback for the --yes flag."""
    return _assume_yes if yes else confirm


def get_prefix(prefix: str | None, config: InstallerConfig) -> str:
    """Resolve the effective prefix from the option and the configuration."""
    return prefix if prefix else config.default_prefix


def build_deployer(env: Environment, config: InstallerConfig, yes: bool) -> Deployer:
    """Create a Deployer wired to the live environment."""
    return Deployer(
        env=env,
        store=ManifestStore(env=env),
        confirm=get_confirm(yes),
        refresh_desktop=config.refresh_desktop_database,
    )


def build_reverser(env: Environment, config: InstallerConfig, yes: bool) -> Reverser:
    """Create a Reverser wired to the live environment."""
    return Reverser(
        env=env,
        store=ManifestStore(env=env),
        confirm=get_confirm(yes),
        refresh_desktop=config.refresh_desktop_database,
    )


__all__ = [
    "PrefixOption",
    "YesOption",
    "build_deployer",
    "build_reverser",
    "get_confirm",
    "get_prefix",
]
