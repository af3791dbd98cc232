"""Package deployment.

Copies the deployable parts of an extracted Arch Linux package under a
prefix:

- usr/bin -> <prefix>/bin (ELF executables and shared libraries, mode 0755)
- usr/share/applications -> desktop directory (*.desktop)
- usr/share/icons -> icon directory (*.png and *.svg with matching content)

Every destination path is recorded in the package manifest before the
file is copied. Destinations that already exist are recorded but never
overwritten.
"""

import logging
import shutil
from collections.abc import Callable, Iterator
from pathlib import Path

from rich.markup import escape

from archinstaller.core.classifier import Classifier
from archinstaller.core.desktop import refresh_desktop_database
from archinstaller.core.environment import Environment
from archinstaller.core.errors import InstallerIOError, UserCancelledError
from archinstaller.core.manifest import ManifestStore, ManifestWriter
from archinstaller.core.metadata import Dependencies, read_dependencies, read_pkginfo
from archinstaller.core.policy import (
    DESKTOP_SUFFIXES,
    ICON_SUFFIXES,
    Category,
    DeploymentTarget,
    ensure_privilege,
    resolve,
)
from archinstaller.models.package import PackageIdentity
from archinstaller.models.report import CategoryReport, DeployReport
from archinstaller.utils.formatting import confirm as ask_confirmation
from archinstaller.utils.formatting import console, print_info, print_path, print_warning

logger = logging.getLogger(__name__)

BINARY_MODE = 0o755

# Shown when a category is absent from the package
_MISSING_MESSAGES: dict[Category, str] = {
    Category.BINARIES: "No binaries found in /usr/bin, skipping",
    Category.DESKTOP: "No .desktop files found, skipping",
    Category.ICONS: "No icons found in /usr/share/icons, skipping",
}

_INSTALLED_LABELS: dict[Category, str] = {
    Category.BINARIES: "Installed binary",
    Category.DESKTOP: "Installed .desktop file",
    Category.ICONS: "Installed icon",
}


def iter_files(root: Path, boundary: Path | None = None) -> Iterator[Path]:
    """Yield regular files below a directory recursively, in sorted order.

    Symlinks are followed only when they resolve inside ``boundary``
    (default: ``root``).
    """
    resolved_boundary = (boundary or root).resolve()
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        if path.is_symlink() and not path.resolve().is_relative_to(resolved_boundary):
            logger.debug("Skipping symlink leaving the package: %s", path)
            continue
        yield path


class Deployer:
    """Installs an extracted package under a prefix.

    Attributes:
        env: Environment used for path resolution and the privilege gate.
        store: Manifest store recording written paths.
        classifier: Content classifier for binaries and icons.
    """

    def __init__(
        self,
        env: Environment | None = None,
        store: ManifestStore | None = None,
        classifier: Classifier | None = None,
        confirm: Callable[[str], bool] | None = None,
        refresher: Callable[[Path], bool] = refresh_desktop_database,
        refresh_desktop: bool = True,
    ) -> None:
        """Initialize the Deployer.

        Args:
            env: Environment to use. Defaults to the live process environment.
            store: Manifest store. Defaults to the invoking user's store.
            classifier: Content classifier. Defaults to the bundled sniffers.
            confirm: Callback answering the install confirmation prompt.
            refresher: Callback refreshing the desktop database.
            refresh_desktop: Whether to refresh the desktop database at all.
        """
        self.env = env or Environment()
        self.store = store or ManifestStore(env=self.env)
        self.classifier = classifier or Classifier()
        self._confirm = confirm or ask_confirmation
        self._refresher = refresher
        self._refresh_desktop = refresh_desktop

    def deploy(self, extracted_dir: Path, prefix: str, package: PackageIdentity) -> DeployReport:
        """Install the deployable contents of an extracted package.

        Args:
            extracted_dir: Root of the extracted archive (contains .PKGINFO).
            prefix: Installation prefix.
            package: Identity of the package being installed.

        Returns:
            DeployReport describing what was installed, kept or rejected.

        Raises:
            PermissionPolicyError: If the prefix needs root and we lack it.
            MetadataUnreadableError: If .PKGINFO cannot be read.
            UserCancelledError: If the user does not confirm.
            InstallerIOError: If the manifest or a destination cannot be written.
        """
        policy = resolve(prefix, self.env)
        ensure_privilege(policy, self.env, action="install to")

        dependencies = read_dependencies(extracted_dir)
        version = next(iter(read_pkginfo(extracted_dir).get("pkgver", [])), None)
        self._show_dependencies(package, dependencies, version)
        if not self._confirm("Are you sure you want to install this package?"):
            raise UserCancelledError("Installation cancelled by user.")

        report = DeployReport(
            package_name=package.name,
            prefix=policy.prefix,
            manifest_path=self.store.path_for(package.name),
        )

        with self.store.create(package.name) as manifest:
            for target in policy.targets(extracted_dir):
                category_report = self._deploy_target(target, extracted_dir, manifest)
                report.categories.append(category_report)

                if (
                    target.category is Category.DESKTOP
                    and not category_report.source_missing
                    and policy.is_system_prefix
                    and self._refresh_desktop
                ):
                    report.desktop_database_refreshed = self._refresher(target.dest_dir)

        logger.info(
            "Deployed %s: %d installed, %d existing, %d rejected",
            package.name,
            len(report.installed),
            len(report.existing),
            len(report.rejected),
        )
        return report

    def _show_dependencies(
        self, package: PackageIdentity, dependencies: Dependencies, version: str | None
    ) -> None:
        header = package.name if version is None else f"{package.name} {version}"
        console.print(f"[bold_header]Package:[/] {escape(header)}")
        if dependencies.required:
            console.print("Required dependencies:")
            for dep in dependencies.required:
                console.print(f"  - {dep}", markup=False)
        else:
            console.print("No required dependencies listed.")
        if dependencies.optional:
            console.print("Optional dependencies:")
            for dep in dependencies.optional:
                console.print(f"  - {dep}", markup=False)
        else:
            console.print("No optional dependencies listed.")

    def _deploy_target(
        self,
        target: DeploymentTarget,
        extracted_dir: Path,
        manifest: ManifestWriter,
    ) -> CategoryReport:
        report = CategoryReport(category=target.category)

        if not target.source_dir.is_dir():
            report.source_missing = True
            print_info(_MISSING_MESSAGES[target.category])
            return report

        self._ensure_dir(target.dest_dir)

        for src in iter_files(target.source_dir, boundary=extracted_dir):
            if not self._accepts(target.category, src):
                continue
            if target.category is not Category.DESKTOP and not self._content_matches(
                target.category, src
            ):
                report.rejected.append(src)
                continue

            dest = target.dest_dir / src.relative_to(target.source_dir)
            self._install_file(src, dest, target.category, manifest, report)

        return report

    def _accepts(self, category: Category, src: Path) -> bool:
        """Extension filter; binaries are judged by content alone."""
        if category is Category.DESKTOP:
            return src.suffix in DESKTOP_SUFFIXES
        if category is Category.ICONS:
            return src.suffix in ICON_SUFFIXES
        return True

    def _content_matches(self, category: Category, src: Path) -> bool:
        try:
            data = src.read_bytes()
        except OSError as e:
            raise InstallerIOError(f"Failed to read {src}: {e}", src) from e

        if category is Category.BINARIES:
            if self.classifier.is_binary(data):
                return True
            print_info(f"Skipping non-ELF file: {src}")
        else:
            if self.classifier.is_icon(data):
                return True
            print_info(f"Skipping invalid icon: {src}")

        logger.debug("Rejected %s (detected %s)", src, self.classifier.mime_type(data))
        return False

    def _install_file(
        self,
        src: Path,
        dest: Path,
        category: Category,
        manifest: ManifestWriter,
        report: CategoryReport,
    ) -> None:
        # Record first: the manifest must never miss a file that reached disk
        manifest.record(dest)

        if dest.exists() or dest.is_symlink():
            noun = "icon" if category is Category.ICONS else "file"
            print_warning(f"{noun} {dest} already exists, skipping")
            report.existing.append(dest)
            return

        self._ensure_dir(dest.parent)
        try:
            shutil.copyfile(src, dest)
            if category is Category.BINARIES:
                dest.chmod(BINARY_MODE)
        except OSError as e:
            raise InstallerIOError(f"Failed to copy {src} to {dest}: {e}", dest) from e

        report.installed.append(dest)
        print_path(_INSTALLED_LABELS[category], dest)

    def _ensure_dir(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallerIOError(f"Cannot create directory {path}: {e}", path) from e
