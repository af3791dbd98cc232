"""Host system summary for the `info` command."""

from dataclasses import dataclass
from pathlib import Path

from archinstaller.core.environment import Environment
from archinstaller.core.manifest import ManifestStore
from archinstaller.scanners import PackageCounter, get_counters
from archinstaller.utils.shell import try_command

UNKNOWN = "Unknown"

OS_RELEASE_PATH = Path("/etc/os-release")

# Name used for this tool in the package summary
TOOL_NAME = "arch-installer"


@dataclass(frozen=True, slots=True)
class SystemInfo:
    """Host details printed by `info`.

    Attributes:
        os: PRETTY_NAME from /etc/os-release.
        kernel: Kernel release (uname -r).
        shell: Shell name and first line of its --version output.
        desktop: XDG_CURRENT_DESKTOP.
        packages: (manager, count) pairs with a non-zero count.
    """

    os: str
    kernel: str
    shell: str
    desktop: str
    packages: tuple[tuple[str, int], ...]

    @property
    def packages_summary(self) -> str:
        if not self.packages:
            return "None"
        return ", ".join(f"{name} {count}" for name, count in self.packages)

    def lines(self) -> list[str]:
        """Render the summary as "Key: value" lines."""
        return [
            f"OS: {self.os}",
            f"Kernel: {self.kernel}",
            f"Shell: {self.shell}",
            f"DE: {self.desktop}",
            f"Packages: {self.packages_summary}",
        ]


def read_os_name(path: Path = OS_RELEASE_PATH) -> str:
    """Read PRETTY_NAME from an os-release file."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return UNKNOWN

    for line in content.splitlines():
        if line.startswith("PRETTY_NAME="):
            return line.removeprefix("PRETTY_NAME=").strip().strip('"') or UNKNOWN
    return UNKNOWN


def _first_line_of(args: list[str]) -> str | None:
    result = try_command(args, timeout=10.0)
    return result.first_line if result is not None else None


def read_kernel_release() -> str:
    """Return the kernel release reported by uname -r."""
    return _first_line_of(["uname", "-r"]) or UNKNOWN


def read_shell(env: Environment) -> str:
    """Return the login shell name followed by its version banner."""
    shell = env.get("SHELL")
    if not shell:
        return UNKNOWN

    shell_name = Path(shell).name
    version = _first_line_of([shell, "--version"])
    if version is None:
        return shell_name
    return f"{shell_name} {version}".rstrip()


def count_packages(
    store: ManifestStore,
    counters: list[PackageCounter] | None = None,
) -> tuple[tuple[str, int], ...]:
    """Count packages installed by this tool and by native package managers.

    Managers that are unavailable or report zero packages are omitted.
    """
    counts: list[tuple[str, int]] = []

    own = store.count()
    if own > 0:
        counts.append((TOOL_NAME, own))

    for counter in counters if counters is not None else get_counters():
        if not counter.is_available():
            continue
        count = counter.count()
        if count > 0:
            counts.append((counter.name, count))

    return tuple(counts)


def collect_system_info(
    env: Environment | None = None,
    store: ManifestStore | None = None,
    counters: list[PackageCounter] | None = None,
) -> SystemInfo:
    """Collect the host summary shown by `info`."""
    env = env or Environment()
    store = store or ManifestStore(env=env)
    return SystemInfo(
        os=read_os_name(),
        kernel=read_kernel_release(),
        shell=read_shell(env),
        desktop=env.get("XDG_CURRENT_DESKTOP") or UNKNOWN,
        packages=count_packages(store, counters),
    )
