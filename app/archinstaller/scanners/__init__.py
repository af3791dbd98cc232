"""Native package manager counters.

This module exports counters for the package managers arch-installer
reports on in `info`.
"""

from archinstaller.scanners.base import PackageCounter
from archinstaller.scanners.dpkg import DpkgCounter
from archinstaller.scanners.pacman import PacmanCounter
from archinstaller.scanners.rpm import RpmCounter


def get_counters() -> list[PackageCounter]:
    """Get counter instances for every supported package manager."""
    return [PacmanCounter(), DpkgCounter(), RpmCounter()]


__all__ = ["DpkgCounter", "PackageCounter", "PacmanCounter", "RpmCounter", "get_counters"]
