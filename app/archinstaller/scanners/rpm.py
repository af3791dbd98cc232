"""RPM package counter."""

from archinstaller.scanners.base import PackageCounter


class RpmCounter(PackageCounter):
    """Counts packages reported by ``rpm -qa``."""

    @property
    def name(self) -> str:
        return "rpm"

    @property
    def command(self) -> list[str]:
        return ["rpm", "-qa"]

    def count_lines(self, stdout: str) -> int:
        return sum(1 for line in stdout.splitlines() if line.strip())
