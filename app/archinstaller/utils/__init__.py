"""Utility modules for arch-installer.

This module exports commonly used utility functions.
"""

from archinstaller.utils.formatting import (
    confirm,
    console,
    err_console,
    print_error,
    print_info,
    print_path,
    print_success,
    print_warning,
)
from archinstaller.utils.shell import CommandResult, command_exists, run_command, try_command

__all__ = [
    "confirm",
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_path",
    "print_success",
    "print_warning",
    "run_command",
    "try_command",
]
