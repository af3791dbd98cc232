"""Desktop database refresh.

After .desktop entries are added to or removed from the system-wide
applications directory, update-desktop-database rebuilds the MIME cache.
The refresh is best-effort: failures are reported but never abort an
install or uninstall.
"""

import logging
import subprocess
from pathlib import Path

from archinstaller.utils.formatting import print_info, print_warning
from archinstaller.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

UPDATE_DESKTOP_DATABASE = "update-desktop-database"


def refresh_desktop_database(directory: Path) -> bool:
    """Run update-desktop-database on a directory.

    Args:
        directory: Applications directory to refresh.

    Returns:
        True if the database was refreshed, False otherwise.
    """
    if not command_exists(UPDATE_DESKTOP_DATABASE):
        logger.debug("%s not found on PATH", UPDATE_DESKTOP_DATABASE)
        print_warning(f"{UPDATE_DESKTOP_DATABASE} not found, desktop database not updated")
        return False

    try:
        result = run_command([UPDATE_DESKTOP_DATABASE, str(directory)], timeout=60.0)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Desktop database refresh failed: %s", e)
        print_warning(f"failed to update desktop database: {e}")
        return False

    if not result.success:
        logger.debug("Desktop database refresh failed: %s", result.error_text)
        print_warning(f"failed to update desktop database: {result.error_text}")
        return False

    print_info("Desktop database updated")
    return True
