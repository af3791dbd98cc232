"""Pacman package counter."""

from archinstaller.scanners.base import PackageCounter


class PacmanCounter(PackageCounter):
    """Counts packages reported by ``pacman -Q``."""

    @property
    def name(self) -> str:
        return "pacman"

    @property
    def command(self) -> list[str]:
        return ["pacman", "-Q"]

    def count_lines(self, stdout: str) -> int:
        return sum(1 for line in stdout.splitlines() if line.strip())
