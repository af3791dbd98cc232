"""Abstract base class for native package counters.

This module defines the PackageCounter interface used by the `info`
command to report how many packages each native package manager on the
host knows about.
"""

import logging
from abc import ABC, abstractmethod

from archinstaller.utils.shell import command_exists, try_command

logger = logging.getLogger(__name__)


class PackageCounter(ABC):
    """Abstract base class for native package manager counters.

    Example:
        >>> counter = PacmanCounter()
        >>> if counter.is_available():
        ...     print(f"{counter.name} {counter.count()}")
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name shown in the package summary (e.g., "pacman")."""

    @property
    @abstractmethod
    def command(self) -> list[str]:
        """Command listing installed packages."""

    @abstractmethod
    def count_lines(self, stdout: str) -> int:
        """Count installed packages in the listing output."""

    def is_available(self) -> bool:
        """Check if the package manager binary is on PATH."""
        return command_exists(self.command[0])

    def count(self) -> int:
        """Count installed packages.

        Returns:
            Number of installed packages, 0 if the listing fails.
        """
        result = try_command(self.command, timeout=30.0)
        if result is None:
            return 0
        if not result.success:
            logger.debug("%s listing exited with %d", self.name, result.returncode)
            return 0
        return self.count_lines(result.stdout)
