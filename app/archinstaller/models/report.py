"""Result models for install and uninstall operations."""

from dataclasses import dataclass, field
from pathlib import Path

from archinstaller.core.policy import Category


@dataclass(slots=True)
class CategoryReport:
    """Outcome of deploying one category.

    Attributes:
        category: The deployment category.
        installed: Destination paths that were copied.
        existing: Destination paths that already existed and were left alone.
        rejected: Source paths that failed the content or extension check.
        source_missing: True when the package has no files for this category.
    """

    category: Category
    installed: list[Path] = field(default_factory=list)
    existing: list[Path] = field(default_factory=list)
    rejected: list[Path] = field(default_factory=list)
    source_missing: bool = False

    @property
    def recorded(self) -> list[Path]:
        """Paths this category added to the manifest."""
        return self.installed + self.existing


@dataclass(slots=True)
class DeployReport:
    """Outcome of a package install.

    Attributes:
        package_name: Name of the installed package.
        prefix: Installation prefix.
        manifest_path: Manifest written for the install.
        categories: Per-category outcomes in processing order.
        desktop_database_refreshed: Whether update-desktop-database succeeded.
    """

    package_name: str
    prefix: str
    manifest_path: Path
    categories: list[CategoryReport] = field(default_factory=list)
    desktop_database_refreshed: bool = False

    @property
    def installed(self) -> list[Path]:
        return [p for c in self.categories for p in c.installed]

    @property
    def existing(self) -> list[Path]:
        return [p for c in self.categories for p in c.existing]

    @property
    def rejected(self) -> list[Path]:
        return [p for c in self.categories for p in c.rejected]

    @property
    def missing_categories(self) -> list[Category]:
        return [c.category for c in self.categories if c.source_missing]


@dataclass(slots=True)
class ReverseReport:
    """Outcome of a package uninstall.

    Attributes:
        package_name: Name of the removed package.
        prefix: Installation prefix.
        removed: Recorded paths that were deleted.
        missing: Recorded paths that no longer existed.
        pruned_dirs: Empty directories removed afterwards.
        manifest_path: The deleted manifest, once removed.
        desktop_database_refreshed: Whether update-desktop-database succeeded.
    """

    package_name: str
    prefix: str
    removed: list[Path] = field(default_factory=list)
    missing: list[Path] = field(default_factory=list)
    pruned_dirs: list[Path] = field(default_factory=list)
    manifest_path: Path | None = None
    desktop_database_refreshed: bool = False
