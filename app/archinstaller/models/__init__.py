"""Data models for arch-installer.

This module exports the core data structures used throughout the application.
"""

from archinstaller.models.package import UNKNOWN_PACKAGE, PackageIdentity, package_name_from_archive
from archinstaller.models.report import CategoryReport, DeployReport, ReverseReport

__all__ = [
    "UNKNOWN_PACKAGE",
    "CategoryReport",
    "DeployReport",
    "PackageIdentity",
    "ReverseReport",
    "package_name_from_archive",
]
