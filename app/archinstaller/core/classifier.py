"""Content classification for extracted package files.

Files are classified by what their bytes contain, never by their name.
A ContentSniffer turns a byte buffer into a MIME type; the Classifier
maps the MIME types the installer cares about onto ContentKind values
and rejects everything else, including buffers the sniffer cannot
identify at all.
"""

import io
import logging
import struct
from enum import Enum
from typing import Protocol

import filetype
from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile

logger = logging.getLogger(__name__)

ELF_MAGIC = b"\x7fELF"

# Bytes inspected when looking for an SVG root element
_SVG_PROBE_SIZE = 4096


class ContentKind(Enum):
    """Kinds of content the installer deploys."""

    EXECUTABLE = "executable"
    SHARED_LIBRARY = "shared_library"
    PNG = "png"
    SVG = "svg"


MIME_KINDS: dict[str, ContentKind] = {
    "application/x-executable": ContentKind.EXECUTABLE,
    "application/x-pie-executable": ContentKind.EXECUTABLE,
    "application/x-sharedlib": ContentKind.SHARED_LIBRARY,
    "image/png": ContentKind.PNG,
    "image/svg+xml": ContentKind.SVG,
}

BINARY_KINDS = frozenset({ContentKind.EXECUTABLE, ContentKind.SHARED_LIBRARY})
ICON_KINDS = frozenset({ContentKind.PNG, ContentKind.SVG})


class ContentSniffer(Protocol):
    """Detects the MIME type of a byte buffer."""

    def sniff(self, data: bytes) -> str | None:
        """Return the detected MIME type, or None if unknown."""
        ...


class DefaultSniffer:
    """Sniffer backed by pyelftools and filetype.

    ELF objects are told apart by their header: ET_EXEC and ET_DYN with
    a program interpreter are executables, other ET_DYN objects are
    shared libraries. Raster formats come from filetype's signature
    table. SVG is recognised by an ``<svg`` element near the start of a
    text document.
    """

    def sniff(self, data: bytes) -> str | None:
        if not data:
            return None
        if data.startswith(ELF_MAGIC):
            return self._sniff_elf(data)
        mime = filetype.guess_mime(data)
        if mime:
            return mime
        if self._looks_like_svg(data):
            return "image/svg+xml"
        return None

    def _sniff_elf(self, data: bytes) -> str | None:
        try:
            elf = ELFFile(io.BytesIO(data))
            e_type = elf.header["e_type"]
            if e_type == "ET_EXEC":
                return "application/x-executable"
            if e_type == "ET_DYN":
                has_interp = any(seg["p_type"] == "PT_INTERP" for seg in elf.iter_segments())
                return "application/x-pie-executable" if has_interp else "application/x-sharedlib"
        except (ELFError, OverflowError, ValueError, EOFError, struct.error) as e:
            # Header offsets come straight from the file and may point anywhere
            logger.debug("Malformed ELF header: %s", e)
            return None
        # Relocatable objects and core dumps are not deployable
        return None

    def _looks_like_svg(self, data: bytes) -> bool:
        head = data[:_SVG_PROBE_SIZE].decode("utf-8", errors="ignore").lstrip("\ufeff \t\r\n")
        return head.startswith("<") and "<svg" in head


class Classifier:
    """Maps sniffed MIME types onto ContentKind values.

    Attributes:
        sniffer: The content sniffer consulted for every buffer.
    """

    def __init__(self, sniffer: ContentSniffer | None = None) -> None:
        self.sniffer: ContentSniffer = sniffer if sniffer is not None else DefaultSniffer()

    def mime_type(self, data: bytes) -> str | None:
        """Return the raw MIME type reported by the sniffer."""
        return self.sniffer.sniff(data)

    def classify(self, data: bytes) -> ContentKind | None:
        """Classify a byte buffer.

        Returns:
            The matching ContentKind, or None when the sniffer reports
            nothing or a type the installer does not deploy.
        """
        mime = self.mime_type(data)
        if mime is None:
            return None
        return MIME_KINDS.get(mime)

    def is_binary(self, data: bytes) -> bool:
        """Check if the buffer is an executable or shared library."""
        return self.classify(data) in BINARY_KINDS

    def is_icon(self, data: bytes) -> bool:
        """Check if the buffer is a PNG or SVG image."""
        return self.classify(data) in ICON_KINDS
