"""Error taxonomy for install and uninstall operations.

Every error that aborts an operation derives from InstallerError so the
CLI can report it and exit non-zero at a single boundary. Files that
fail a content or extension check are not errors; they are skipped and
reported by the deployer.
"""

from pathlib import Path


class InstallerError(Exception):
    """Base exception for fatal installer errors."""


class PermissionPolicyError(InstallerError):
    """Raised when a prefix requires root privileges the process lacks."""


class UserCancelledError(InstallerError):
    """Raised when the user declines a confirmation prompt."""


class MetadataUnreadableError(InstallerError):
    """Raised when a package's .PKGINFO is missing or unreadable."""


class ManifestNotFoundError(InstallerError):
    """Raised when no installation manifest exists for a package."""


class ConfigError(InstallerError):
    """Raised when the configuration file cannot be loaded."""


class InstallerIOError(InstallerError):
    """Raised when a filesystem step fails.

    The underlying OSError is chained as ``__cause__``.

    Attributes:
        path: Path involved in the failed operation.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
