"""Info command.

This module provides the `arch-installer info` command, which prints a
short summary of the host system and its installed packages.
"""

from archinstaller.core.environment import Environment
from archinstaller.core.sysinfo import collect_system_info
from archinstaller.utils.formatting import console


def info() -> None:
    """Show OS, kernel, shell, desktop and package counts."""
    system_info = collect_system_info(env=Environment())
    for line in system_info.lines():
        console.print(line, markup=False)
