"""Destination path policy and privilege gate.

Given an installation prefix, derives where binaries, desktop entries
and icons are deployed and whether touching that prefix requires root.

Only /usr/local is treated as a system-wide prefix for desktop
integration. Every other prefix deploys desktop entries and icons into
the invoking user's ~/.local/share so that desktop environments pick
them up without extra configuration.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from archinstaller.core.environment import Environment
from archinstaller.core.errors import PermissionPolicyError
from archinstaller.core.paths import get_user_data_dir

SYSTEM_PREFIX = "/usr/local"


class Category(str, Enum):
    """Deployment categories, in the order they are processed."""

    BINARIES = "binaries"
    DESKTOP = "desktop"
    ICONS = "icons"


# Source directories inside an extracted package, relative to its root
SOURCE_SUBDIRS: dict[Category, str] = {
    Category.BINARIES: "usr/bin",
    Category.DESKTOP: "usr/share/applications",
    Category.ICONS: "usr/share/icons",
}

# File name suffixes accepted per category; binaries are judged by content
DESKTOP_SUFFIXES = frozenset({".desktop"})
ICON_SUFFIXES = frozenset({".png", ".svg"})


@dataclass(frozen=True, slots=True)
class DeploymentTarget:
    """One deployment category resolved for a single operation.

    Attributes:
        category: Which kind of files this target deploys.
        source_dir: Directory inside the extracted package.
        dest_dir: Directory the files are copied into.
    """

    category: Category
    source_dir: Path
    dest_dir: Path


@dataclass(frozen=True, slots=True)
class PathPolicy:
    """Destination roots for a prefix.

    Attributes:
        prefix: The installation prefix the policy was resolved for.
        bin_dir: Destination for executables and shared libraries.
        desktop_dir: Destination for .desktop entries.
        icon_dir: Destination for icon themes.
        requires_root: Whether writing to the prefix needs root.
    """

    prefix: str
    bin_dir: Path
    desktop_dir: Path
    icon_dir: Path
    requires_root: bool

    @property
    def is_system_prefix(self) -> bool:
        """Check if desktop files go to the shared system locations."""
        return is_system_prefix(self.prefix)

    @property
    def roots(self) -> tuple[Path, Path, Path]:
        """Destination roots in processing order (bin, desktop, icons)."""
        return (self.bin_dir, self.desktop_dir, self.icon_dir)

    def dest_for(self, category: Category) -> Path:
        """Return the destination root for a category."""
        return {
            Category.BINARIES: self.bin_dir,
            Category.DESKTOP: self.desktop_dir,
            Category.ICONS: self.icon_dir,
        }[category]

    def targets(self, extracted_dir: Path) -> list[DeploymentTarget]:
        """Pair each category's source directory with its destination.

        Args:
            extracted_dir: Root of the extracted package archive.

        Returns:
            Deployment targets for binaries, desktop entries and icons.
        """
        return [
            DeploymentTarget(
                category=category,
                source_dir=extracted_dir / subdir,
                dest_dir=self.dest_for(category),
            )
            for category, subdir in SOURCE_SUBDIRS.items()
        ]


def normalize_prefix(prefix: str) -> str:
    """Strip trailing slashes, keeping "/" intact."""
    return prefix.rstrip("/") or "/"


def is_system_prefix(prefix: str) -> bool:
    """Check if the prefix is the shared system prefix /usr/local."""
    return normalize_prefix(prefix) == SYSTEM_PREFIX


def requires_root(prefix: str) -> bool:
    """Check if a prefix is owned by the system.

    Prefixes under /usr and /opt itself require root.
    """
    prefix = normalize_prefix(prefix)
    return prefix.startswith("/usr") or prefix == "/opt"


def resolve(prefix: str, env: Environment | None = None) -> PathPolicy:
    """Resolve the destination roots for a prefix.

    Relative prefixes are anchored at the environment's working
    directory, so every destination (and every manifest entry) is
    absolute.

    Args:
        prefix: Installation prefix (e.g., "/usr/local").
        env: Environment used to locate the invoking user's data and
            working directories.

    Returns:
        PathPolicy for the prefix.
    """
    env = env or Environment()
    root = Path(prefix)
    if not root.is_absolute():
        root = env.cwd() / root
    prefix = normalize_prefix(os.path.normpath(root))
    root = Path(prefix)

    if is_system_prefix(prefix):
        desktop_dir = root / "share" / "applications"
        icon_dir = root / "share" / "icons"
    else:
        data_dir = get_user_data_dir(env)
        desktop_dir = data_dir / "applications"
        icon_dir = data_dir / "icons"

    return PathPolicy(
        prefix=prefix,
        bin_dir=root / "bin",
        desktop_dir=desktop_dir,
        icon_dir=icon_dir,
        requires_root=requires_root(prefix),
    )


def ensure_privilege(
    policy: PathPolicy,
    env: Environment | None = None,
    action: str = "install to",
) -> None:
    """Refuse to continue when the prefix needs root and we lack it.

    Must be called before any filesystem mutation.

    Args:
        policy: Resolved path policy.
        env: Environment queried for elevated privileges.
        action: Verb phrase used in the error message.

    Raises:
        PermissionPolicyError: If root is required but not held.
    """
    env = env or Environment()
    if policy.requires_root and not env.is_root():
        msg = f"Please run the program with sudo or doas to {action} {policy.prefix}"
        raise PermissionPolicyError(msg)
