"""Package metadata reader.

Parses the .PKGINFO file at the root of an extracted Arch Linux
package. Dependencies are only displayed to the user before they
confirm an install; nothing is resolved or installed.
"""

from dataclasses import dataclass
from pathlib import Path

from archinstaller.core.errors import MetadataUnreadableError

PKGINFO_FILENAME = ".PKGINFO"

_DEPEND_PREFIX = "depend = "
_OPTDEPEND_PREFIX = "optdepend = "


@dataclass(frozen=True, slots=True)
class Dependencies:
    """Dependencies declared by a package.

    Attributes:
        required: One entry per ``depend`` line, e.g. "glibc>=2.38".
        optional: One entry per ``optdepend`` line, e.g. "git: vcs support".
    """

    required: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()


def _read_pkginfo_text(extracted_dir: Path) -> str:
    pkginfo_path = extracted_dir / PKGINFO_FILENAME
    try:
        return pkginfo_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read {PKGINFO_FILENAME} from {pkginfo_path}: {e}"
        raise MetadataUnreadableError(msg) from e


def parse_dependencies(content: str) -> Dependencies:
    """Parse dependency declarations from .PKGINFO content."""
    required: list[str] = []
    optional: list[str] = []

    for line in content.splitlines():
        if line.startswith(_DEPEND_PREFIX):
            required.append(line[len(_DEPEND_PREFIX) :].strip())
        elif line.startswith(_OPTDEPEND_PREFIX):
            optional.append(line[len(_OPTDEPEND_PREFIX) :].strip())

    return Dependencies(required=tuple(required), optional=tuple(optional))


def read_dependencies(extracted_dir: Path) -> Dependencies:
    """Read required and optional dependencies of an extracted package.

    Args:
        extracted_dir: Root of the extracted package archive.

    Returns:
        Declared dependencies.

    Raises:
        MetadataUnreadableError: If .PKGINFO is missing or unreadable.
    """
    return parse_dependencies(_read_pkginfo_text(extracted_dir))


def read_pkginfo(extracted_dir: Path) -> dict[str, list[str]]:
    """Read every ``key = value`` field of .PKGINFO.

    Repeated keys (depend, license, ...) accumulate in order. Comment
    lines are ignored.

    Raises:
        MetadataUnreadableError: If .PKGINFO is missing or unreadable.
    """
    fields: dict[str, list[str]] = {}
    for line in _read_pkginfo_text(extracted_dir).splitlines():
        if line.startswith("#") or " = " not in line:
            continue
        key, value = line.split(" = ", 1)
        fields.setdefault(key.strip(), []).append(value.strip())
    return fields
