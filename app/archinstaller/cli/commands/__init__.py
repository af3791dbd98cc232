"""CLI commands for arch-installer.

This package contains all subcommand implementations.
"""

from archinstaller.cli.commands import info, install, listing, reinstall, uninstall

__all__ = ["info", "install", "listing", "reinstall", "uninstall"]
