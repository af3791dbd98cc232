"""Installation manifest storage.

This module provides the ManifestStore class that records which files
an install wrote, one plain-text log per package.

Storage location: ~/.local/share/arch-installer/<package>.log

Each line holds one absolute destination path. A path is written and
fsynced before the file it names is copied, so an interrupted install
never leaves a file on disk that the manifest does not mention.
"""

import logging
import os
from pathlib import Path
from types import TracebackType
from typing import TextIO

from archinstaller.core.environment import Environment
from archinstaller.core.errors import InstallerIOError, ManifestNotFoundError
from archinstaller.core.paths import get_manifest_dir

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = ".log"


class ManifestWriter:
    """Append-only handle on a single package manifest.

    Use as a context manager; the underlying file is closed on exit.

    Attributes:
        path: Manifest file being written.
    """

    def __init__(self, path: Path, stream: TextIO) -> None:
        self.path = path
        self._stream = stream
        self._entries: list[str] = []

    @property
    def entries(self) -> list[str]:
        """Paths recorded through this handle, in order."""
        return list(self._entries)

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def record(self, path: Path | str) -> None:
        """Append a destination path and flush it to disk.

        Args:
            path: Absolute destination path about to be written.

        Raises:
            InstallerIOError: If the manifest cannot be written.
        """
        line = str(path)
        try:
            self._stream.write(line + "\n")
            self._stream.flush()
            os.fsync(self._stream.fileno())
        except OSError as e:
            raise InstallerIOError(f"Failed to write manifest {self.path}: {e}", self.path) from e
        self._entries.append(line)

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "ManifestWriter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class ManifestStore:
    """Manages per-package installation manifests.

    Attributes:
        log_dir: Directory containing the manifest files.
    """

    def __init__(self, log_dir: Path | None = None, env: Environment | None = None) -> None:
        """Initialize ManifestStore.

        Args:
            log_dir: Optional override for the manifest directory.
                     Default: ~/.local/share/arch-installer of the invoking user.
            env: Environment used to resolve the default directory.
        """
        self.log_dir = log_dir if log_dir is not None else get_manifest_dir(env)

    def path_for(self, package_name: str) -> Path:
        """Path of the manifest for a package."""
        return self.log_dir / f"{package_name}{MANIFEST_SUFFIX}"

    def exists(self, package_name: str) -> bool:
        return self.path_for(package_name).is_file()

    def create(self, package_name: str) -> ManifestWriter:
        """Open a package manifest for writing, truncating any previous one.

        Args:
            package_name: Package the manifest belongs to.

        Returns:
            ManifestWriter for appending destination paths.

        Raises:
            InstallerIOError: If the directory or file cannot be created.
        """
        path = self.path_for(package_name)
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Cannot create manifest directory {self.log_dir}: {e}"
            raise InstallerIOError(msg, self.log_dir) from e

        try:
            stream = path.open(mode="w", encoding="utf-8")
        except OSError as e:
            raise InstallerIOError(f"Failed to create log file {path}: {e}", path) from e

        logger.debug("Opened manifest %s", path)
        return ManifestWriter(path, stream)

    def read(self, package_name: str) -> list[str]:
        """Read the recorded paths of a package, in install order.

        Raises:
            ManifestNotFoundError: If the package has no manifest.
            InstallerIOError: If the manifest cannot be read.
        """
        path = self.path_for(package_name)
        if not path.is_file():
            msg = (
                f"No installation log found for package {package_name} at {path}. "
                "Run install first."
            )
            raise ManifestNotFoundError(msg)

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise InstallerIOError(f"Failed to read log file {path}: {e}", path) from e

        return [line for line in content.splitlines() if line.strip()]

    def delete(self, package_name: str) -> Path:
        """Remove the manifest of a package.

        Returns:
            Path of the removed manifest.

        Raises:
            InstallerIOError: If the file cannot be removed.
        """
        path = self.path_for(package_name)
        try:
            path.unlink()
        except OSError as e:
            raise InstallerIOError(f"Failed to remove log file {path}: {e}", path) from e
        return path

    def list_names(self) -> list[str]:
        """Names of all packages with a manifest, sorted."""
        if not self.log_dir.is_dir():
            return []
        return sorted(
            p.name.removesuffix(MANIFEST_SUFFIX)
            for p in self.log_dir.iterdir()
            if p.name.endswith(MANIFEST_SUFFIX) and p.is_file()
        )

    def count(self) -> int:
        """Number of manifests present."""
        return len(self.list_names())
