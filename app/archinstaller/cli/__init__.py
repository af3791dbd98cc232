"""Command line interface: the Typer app and its install/uninstall commands."""

from archinstaller.cli.main import app

__all__ = ["app"]
