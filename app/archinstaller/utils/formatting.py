"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

import typer
from rich.console import Console
from rich.markup import escape

from archinstaller.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


_quiet = False

# Shared console instances (theme loaded once at import). Lines are never
# wrapped so that every message stays on a single line.
console = Console(
    theme=get_theme(),
    color_system=_detect_color_system(),
    highlight=False,
    soft_wrap=True,
)
err_console = Console(
    theme=get_theme(),
    stderr=True,
    color_system=_detect_color_system(),
    highlight=False,
    soft_wrap=True,
)


def print_info(message: str) -> None:
    """Print an info message."""
    if _quiet:
        return
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")


def print_path(label: str, path: object) -> None:
    """Print a labelled filesystem path, e.g. "Installed binary: /usr/local/bin/foo"."""
    if _quiet:
        return
    console.print(f"[muted]{escape(label)}:[/] [path]{escape(str(path))}[/]")


def confirm(message: str) -> bool:
    """Ask a yes/no question, defaulting to no.

    End of input counts as a refusal.
    """
    try:
        return typer.confirm(message, default=False)
    except typer.Abort:
        return False


def set_quiet(quiet: bool) -> None:
    """Suppress info and path messages; warnings and errors still print."""
    global _quiet
    _quiet = quiet
