"""Path management for arch-installer.

Installation manifests live in the invoking user's data directory, even
when the installer runs under sudo, so that a later unprivileged
`list` sees the same packages:

- Manifests: ~/.local/share/arch-installer/<package>.log
- Config: ~/.config/arch-installer/ (or XDG_CONFIG_HOME/arch-installer/)
"""

from pathlib import Path

from archinstaller.core.environment import Environment

# Application identifier for directory naming
APP_NAME = "arch-installer"

# Used when neither SUDO_USER nor a home directory is available
FALLBACK_HOME = Path("/tmp")


def get_user_home(env: Environment | None = None) -> Path:
    """Resolve the home directory of the user who invoked the installer.

    Resolution order:
    1. /home/$SUDO_USER when running through sudo
    2. The process home directory
    3. /tmp

    Args:
        env: Environment to query. Defaults to the live process environment.

    Returns:
        Home directory of the invoking user.
    """
    env = env or Environment()
    sudo_user = env.get("SUDO_USER")
    if sudo_user:
        return Path("/home") / sudo_user
    home = env.home()
    if home is not None:
        return home
    return FALLBACK_HOME


def get_user_data_dir(env: Environment | None = None) -> Path:
    """Get the invoking user's data directory.

    Returns:
        Path to ~/.local/share for the invoking user.
    """
    return get_user_home(env) / ".local" / "share"


def get_manifest_dir(env: Environment | None = None) -> Path:
    """Get the directory holding installation manifests.

    Returns:
        Path to ~/.local/share/arch-installer/.
    """
    return get_user_data_dir(env) / APP_NAME


def get_config_dir(env: Environment | None = None) -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/arch-installer/ (or XDG_CONFIG_HOME/arch-installer/).
    """
    env = env or Environment()
    base = env.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return get_user_home(env) / ".config" / APP_NAME


def get_config_path(env: Environment | None = None) -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/arch-installer/config.toml.
    """
    return get_config_dir(env) / "config.toml"


def get_user_theme_path(env: Environment | None = None) -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/arch-installer/theme.toml.
    """
    return get_config_dir(env) / "theme.toml"
