"""Dpkg package counter."""

from archinstaller.scanners.base import PackageCounter


class DpkgCounter(PackageCounter):
    """Counts installed packages reported by ``dpkg -l``.

    Only rows in the "ii" state (desired install, currently installed)
    are counted; the header and removed-but-configured rows are skipped.
    """

    @property
    def name(self) -> str:
        return "dpkg"

    @property
    def command(self) -> list[str]:
        return ["dpkg", "-l"]

    def count_lines(self, stdout: str) -> int:
        return sum(1 for line in stdout.splitlines() if line.startswith("ii "))
