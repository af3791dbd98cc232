"""Package removal.

Reverses an install using only its manifest: every recorded path that
still exists is deleted, the manifest is removed, and directories left
empty by the removal are pruned upwards.

A failed deletion aborts immediately. The manifest is only removed once
every entry has been handled, so an aborted uninstall can simply be run
again after the cause is fixed; entries already gone are skipped.
"""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from archinstaller.core.desktop import refresh_desktop_database
from archinstaller.core.environment import Environment
from archinstaller.core.errors import InstallerIOError, UserCancelledError
from archinstaller.core.manifest import ManifestStore
from archinstaller.core.policy import DESKTOP_SUFFIXES, ICON_SUFFIXES, ensure_privilege, resolve
from archinstaller.models.package import PackageIdentity
from archinstaller.models.report import ReverseReport
from archinstaller.utils.formatting import confirm as ask_confirmation
from archinstaller.utils.formatting import print_info, print_path

logger = logging.getLogger(__name__)


def prune_empty_dirs(start: Path) -> list[Path]:
    """Remove an empty directory and each ancestor that becomes empty.

    Walks upward from ``start`` and stops at the first path that is
    missing, not a directory, not empty, cannot be removed, or is the
    filesystem root.

    Args:
        start: Directory to start from.

    Returns:
        Removed directories, deepest first.
    """
    removed: list[Path] = []
    current = start

    while current != current.parent:
        try:
            if current.is_symlink() or not current.is_dir():
                break
            if any(current.iterdir()):
                break
            current.rmdir()
        except OSError as e:
            logger.debug("Stopped pruning at %s: %s", current, e)
            break

        removed.append(current)
        print_path("Removed empty directory", current)
        current = current.parent

    return removed


def _prune_order(paths: Iterable[Path]) -> list[Path]:
    """Deduplicate directories and order them deepest first."""
    return sorted(set(paths), key=lambda p: (-len(p.parts), str(p)))


def _removed_label(path: Path) -> str:
    if path.suffix in DESKTOP_SUFFIXES:
        return "Removed .desktop file"
    if path.suffix in ICON_SUFFIXES:
        return "Removed icon"
    return "Removed file"


class Reverser:
    """Uninstalls a package recorded in the manifest store.

    Attributes:
        env: Environment used for path resolution and the privilege gate.
        store: Manifest store holding the install records.
    """

    def __init__(
        self,
        env: Environment | None = None,
        store: ManifestStore | None = None,
        confirm: Callable[[str], bool] | None = None,
        refresher: Callable[[Path], bool] = refresh_desktop_database,
        refresh_desktop: bool = True,
    ) -> None:
        """Initialize the Reverser.

        Args:
            env: Environment to use. Defaults to the live process environment.
            store: Manifest store. Defaults to the invoking user's store.
            confirm: Callback answering the uninstall confirmation prompt.
            refresher: Callback refreshing the desktop database.
            refresh_desktop: Whether to refresh the desktop database at all.
        """
        self.env = env or Environment()
        self.store = store or ManifestStore(env=self.env)
        self._confirm = confirm or ask_confirmation
        self._refresher = refresher
        self._refresh_desktop = refresh_desktop

    def reverse(self, package: PackageIdentity, prefix: str) -> ReverseReport:
        """Remove everything a previous install recorded for a package.

        Args:
            package: Identity of the package to remove.
            prefix: Prefix the package was installed to.

        Returns:
            ReverseReport describing what was removed.

        Raises:
            UserCancelledError: If the user does not confirm.
            PermissionPolicyError: If the prefix needs root and we lack it.
            ManifestNotFoundError: If the package has no manifest.
            InstallerIOError: If a recorded file or the manifest cannot be removed.
        """
        if not self._confirm(f"Are you sure you want to uninstall {package.name}?"):
            raise UserCancelledError("Uninstallation cancelled by user.")

        policy = resolve(prefix, self.env)
        ensure_privilege(policy, self.env, action="uninstall from")

        entries = self.store.read(package.name)
        report = ReverseReport(package_name=package.name, prefix=policy.prefix)

        for entry in entries:
            path = Path(entry)
            if not (path.exists() or path.is_symlink()):
                print_info(f"File {path} does not exist, skipping")
                report.missing.append(path)
                continue
            try:
                path.unlink()
            except OSError as e:
                raise InstallerIOError(f"Failed to remove file {path}: {e}", path) from e
            report.removed.append(path)
            print_path(_removed_label(path), path)

        report.manifest_path = self.store.delete(package.name)
        print_path("Removed log file", report.manifest_path)

        # Leaf directories first so their parents can become empty in turn
        parents = {p.parent for p in report.removed + report.missing}
        for directory in _prune_order(parents) + list(policy.roots):
            report.pruned_dirs.extend(prune_empty_dirs(directory))

        if policy.is_system_prefix and policy.desktop_dir.exists() and self._refresh_desktop:
            report.desktop_database_refreshed = self._refresher(policy.desktop_dir)

        logger.info(
            "Reversed %s: %d removed, %d missing, %d directories pruned",
            package.name,
            len(report.removed),
            len(report.missing),
            len(report.pruned_dirs),
        )
        return report
