"""Helpers for invoking external tools.

The installer only shells out for best-effort work: refreshing the
desktop database and gathering host details for `info`. Output is
always captured and decoded leniently because package managers may
print descriptions that are not valid UTF-8.
"""

import logging
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of an external tool.

    Attributes:
        stdout: Decoded standard output.
        stderr: Decoded standard error.
        returncode: Exit status of the tool.
        args: Command line that was run.
    """

    stdout: str
    stderr: str
    returncode: int
    args: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def first_line(self) -> str:
        """First non-blank line of stdout, stripped."""
        for line in self.stdout.splitlines():
            if line.strip():
                return line.strip()
        return ""

    @property
    def error_text(self) -> str:
        """Stripped stderr, or the exit status when the tool printed nothing."""
        return self.stderr.strip() or f"exit status {self.returncode}"


def run_command(args: Sequence[str], *, timeout: float | None = DEFAULT_TIMEOUT) -> CommandResult:
    """Run a tool to completion and capture its output.

    A non-zero exit status is reported through the result, not raised.

    Args:
        args: Executable followed by its arguments.
        timeout: Seconds to wait before giving up; None waits forever.

    Returns:
        CommandResult with the decoded output and exit status.

    Raises:
        OSError: If the executable cannot be started.
        subprocess.TimeoutExpired: If the tool runs longer than ``timeout``.
    """
    argv = tuple(str(arg) for arg in args)
    logger.debug("Running %s", " ".join(argv))
    completed = subprocess.run(
        argv,
        capture_output=True,
        text=True,
        errors="replace",
        check=False,
        timeout=timeout,
    )
    return CommandResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
        args=argv,
    )


def try_command(
    args: Sequence[str], *, timeout: float | None = DEFAULT_TIMEOUT
) -> CommandResult | None:
    """Like run_command, but return None when the tool cannot be run at all."""
    try:
        return run_command(args, timeout=timeout)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Could not run %s: %s", args[0] if args else "<empty>", e)
        return None


def command_exists(name: str) -> bool:
    """Check if an executable is on PATH."""
    return shutil.which(name) is not None
