"""Console colour palette.

The palette ships in ``archinstaller/data/theme.toml``. Users may
override any subset of its ``[colors]`` table in
~/.config/arch-installer/theme.toml; a broken override is reported and
ignored so that output is never blocked by cosmetics.
"""

import logging
import re
import tomllib
from functools import lru_cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator
from rich.theme import Theme

from archinstaller.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


class Palette(BaseModel):
    """Named colours used by the console helpers.

    Every value is a hex colour, ``#RGB`` or ``#RRGGBB``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#1793d1"
    path: str = "#0ec1c8"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#dfe6e9"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, value: object) -> str:
        if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value.strip()):
            msg = f"expected a #RGB or #RRGGBB colour, got {value!r}"
            raise ValueError(msg)
        return value.strip()


def bundled_palette_path() -> Path:
    """Path of the palette shipped with the package."""
    return Path(str(resources.files("archinstaller.data").joinpath("theme.toml")))


def read_colors(path: Path) -> dict[str, str]:
    """Read the ``[colors]`` table of a palette file.

    Missing files yield an empty table. Non-string values are dropped.

    Raises:
        ValueError: If the file is not valid TOML or ``colors`` is not a table.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ValueError(f"cannot read {path}: {e}") from e

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        raise ValueError(f"'colors' in {path} must be a table")
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_palette(user_path: Path | None = None) -> Palette:
    """Merge the user override over the bundled palette.

    Args:
        user_path: Override file. Defaults to ~/.config/arch-installer/theme.toml.

    Returns:
        The merged palette, or the built-in defaults if the merge is invalid.
    """
    try:
        colors = read_colors(bundled_palette_path())
    except ValueError as e:
        logger.error("Bundled palette unreadable: %s", e)
        colors = {}

    override_path = user_path or get_user_theme_path()
    try:
        colors.update(read_colors(override_path))
        return Palette(**colors)
    except ValueError as e:
        logger.warning("Ignoring invalid theme %s: %s", override_path, e)
        return Palette()


def build_theme(palette: Palette) -> Theme:
    """Map palette colours onto the style names used in console markup."""
    return Theme(
        {
            "text": palette.text,
            "muted": palette.muted,
            "header": palette.header,
            "bold_header": f"bold {palette.header}",
            "path": palette.path,
            "success": palette.success,
            "warning": palette.warning,
            "error": f"bold {palette.error}",
            "info": palette.info,
        }
    )


@lru_cache(maxsize=1)
def get_theme() -> Theme:
    """Rich theme for the shared consoles, built once per process."""
    return build_theme(load_palette())
