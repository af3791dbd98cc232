"""Process environment capability.

Wraps the process-wide state the installer depends on (environment
variables, the home directory, the working directory and the
effective user id) so that path resolution and the privilege gate can
be exercised against a fake environment in tests.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path


class Environment:
    """Live view of the current process environment."""

    def get(self, name: str) -> str | None:
        """Return an environment variable, or None when unset or empty."""
        value = os.environ.get(name)
        return value or None

    def home(self) -> Path | None:
        """Return the process home directory, or None if it cannot be determined."""
        try:
            return Path.home()
        except RuntimeError:
            return None

    def cwd(self) -> Path:
        """Return the current working directory."""
        return Path.cwd()

    def is_root(self) -> bool:
        """Check if the process runs with elevated privileges."""
        return os.geteuid() == 0


@dataclass
class StaticEnvironment(Environment):
    """Environment backed by fixed values.

    Attributes:
        variables: Environment variables visible to the installer.
        home_dir: Home directory returned by home().
        cwd_dir: Working directory returned by cwd().
        root: Whether the process should be treated as privileged.
    """

    variables: Mapping[str, str] = field(default_factory=dict)
    home_dir: Path | None = None
    cwd_dir: Path = Path("/")
    root: bool = False

    def get(self, name: str) -> str | None:
        return self.variables.get(name) or None

    def home(self) -> Path | None:
        return self.home_dir

    def cwd(self) -> Path:
        return self.cwd_dir

    def is_root(self) -> bool:
        return self.root
