"""Package archive extraction.

Arch Linux packages are zstd-compressed tarballs (``*.pkg.tar.zst``).
They are streamed through zstandard into tarfile's stream mode, so the
decompressed tarball never touches the disk. Older gzip/xz packages are
left to tarfile's own compression detection.
"""

import logging
import tarfile
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import zstandard

from archinstaller.core.errors import InstallerIOError
from archinstaller.utils.formatting import print_info

logger = logging.getLogger(__name__)

ZSTD_SUFFIXES = (".zst", ".zstd")


def _is_zstd(archive: Path) -> bool:
    return archive.name.endswith(ZSTD_SUFFIXES)


def _extract_members(tar: tarfile.TarFile, dest: Path) -> None:
    # The "tar" filter refuses members outside dest but keeps absolute symlinks
    tar.extractall(dest, filter="tar")


def extract_package(archive: Path, dest: Path) -> Path:
    """Extract a package archive into a directory.

    Args:
        archive: Path to the package archive.
        dest: Directory to extract into; created if missing.

    Returns:
        The destination directory.

    Raises:
        InstallerIOError: If the archive cannot be opened or extracted.
    """
    try:
        dest.mkdir(parents=True, exist_ok=True)
        if _is_zstd(archive):
            with archive.open("rb") as fh:
                dctx = zstandard.ZstdDecompressor()
                with (
                    dctx.stream_reader(fh) as reader,
                    tarfile.open(fileobj=reader, mode="r|") as tar,
                ):
                    _extract_members(tar, dest)
        else:
            with tarfile.open(archive, mode="r:*") as tar:
                _extract_members(tar, dest)
    except FileNotFoundError as e:
        raise InstallerIOError(f"Failed to open package {archive}", archive) from e
    except (OSError, tarfile.TarError, zstandard.ZstdError) as e:
        raise InstallerIOError(f"Error while extracting package {archive}: {e}", archive) from e

    logger.debug("Extracted %s to %s", archive, dest)
    print_info(f"Extracted package {archive} to {dest}")
    return dest


@contextmanager
def extracted_package(archive: Path) -> Iterator[Path]:
    """Extract a package into a temporary directory for the duration of a block.

    Yields:
        Root of the extracted package. Removed when the block exits.

    Raises:
        InstallerIOError: If the archive cannot be extracted.
    """
    with tempfile.TemporaryDirectory(prefix="arch-installer-") as tmp:
        yield extract_package(archive, Path(tmp))
