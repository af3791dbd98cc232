"""Package identity model.

A package is identified by a name derived from its archive file name:
the part before the first hyphen, so ``foo-1.0-1-x86_64.pkg.tar.zst``
becomes ``foo``. The name keys the installation manifest.
"""

from dataclasses import dataclass
from pathlib import Path

UNKNOWN_PACKAGE = "unknown"


def package_name_from_archive(archive: Path | str) -> str:
    """Derive a package name from an archive path.

    Args:
        archive: Path or file name of the package archive.

    Returns:
        The file name up to the first "-", or "unknown" if that is empty.
    """
    file_name = Path(archive).name
    name = file_name.split("-", 1)[0]
    return name or UNKNOWN_PACKAGE


@dataclass(frozen=True, slots=True)
class PackageIdentity:
    """A package being installed or uninstalled.

    Attributes:
        name: Package name used as manifest key.
        archive: Archive the package came from, if known.
    """

    name: str
    archive: Path | None = None

    def __post_init__(self) -> None:
        """Validate identity data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if "/" in self.name:
            msg = f"Package name cannot contain '/': {self.name}"
            raise ValueError(msg)

    @classmethod
    def from_archive(cls, archive: Path | str) -> "PackageIdentity":
        """Create an identity for a package archive."""
        return cls(name=package_name_from_archive(archive), archive=Path(archive))

    @classmethod
    def from_argument(cls, value: str) -> "PackageIdentity":
        """Create an identity from a CLI argument.

        Accepts either a bare package name or an archive path; both are
        reduced to the part of the file name before the first hyphen.
        """
        return cls(name=package_name_from_archive(value))
