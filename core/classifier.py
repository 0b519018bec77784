"""
Format Classifier
─────────────────
Assigns a ``FileTypeInfo`` to any byte buffer:
  • magic-number dispatch over the ordered signature table
  • PE / ELF header peeking for subtype and architecture
  • ZIP container refinement by raw marker search
  • text-ratio sampling for non-binary content

``classify`` is total: empty, truncated or malformed buffers fall through to
a generic classification instead of raising.
"""

from __future__ import annotations

import logging
from typing import Callable

from . import signatures
from .models import FileType, FileTypeInfo
from .utils import contains_pattern, locate_pe_header, read_u8, read_u16_le

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TEXT_SAMPLE_SIZE = 1024
TEXT_RATIO_THRESHOLD = 0.9  # strictly greater means text

_PE_MACHINES = {
    0x014C: "x86 (32-bit)",
    0x0200: "IA64 (Itanium)",
    0x8664: "x64 (64-bit)",
    0x01C4: "ARM",
    0xAA64: "ARM64",
}

# Checked in order, first set bit wins.
_PE_SUBTYPE_FLAGS: list[tuple[int, str]] = [
    (0x2000, "DLL"),
    (0x0002, "EXE"),
    (0x1000, "SYS"),
]

_ELF_CLASSES = {1: "32-bit", 2: "64-bit"}

_ELF_TYPES = {1: "REL", 2: "EXEC", 3: "DYN", 4: "CORE"}

_ZIP_MARKERS: list[tuple[str, FileTypeInfo]] = [
    ("word/document.xml",    FileTypeInfo(FileType.DOCX, "Microsoft Word Document")),
    ("xl/workbook.xml",      FileTypeInfo(FileType.XLSX, "Microsoft Excel Spreadsheet")),
    ("ppt/presentation.xml", FileTypeInfo(FileType.PPTX, "Microsoft PowerPoint Presentation")),
    ("META-INF/MANIFEST.MF", FileTypeInfo(FileType.JAR, "Java Archive")),
    ("AndroidManifest.xml",  FileTypeInfo(FileType.APK, "Android Package")),
]

_TEXT_MARKERS: list[tuple[tuple[str, ...], FileTypeInfo]] = [
    (("<?xml",),                  FileTypeInfo(FileType.XML, "XML Document")),
    (("<!DOCTYPE html", "<html"), FileTypeInfo(FileType.HTML, "HTML Document")),
    (("#!/",),                    FileTypeInfo(FileType.SCRIPT, "Shell Script")),
]

_FIXED: dict[str, FileTypeInfo] = {
    signatures.MACHO32: FileTypeInfo(
        FileType.MACHO, "macOS/iOS executable (32-bit)", architecture="32-bit"),
    signatures.MACHO64: FileTypeInfo(
        FileType.MACHO, "macOS/iOS executable (64-bit)", architecture="64-bit"),
    signatures.PDF: FileTypeInfo(FileType.PDF, "Portable Document Format"),
    signatures.JPEG: FileTypeInfo(FileType.JPEG, "JPEG Image"),
    signatures.PNG: FileTypeInfo(FileType.PNG, "PNG Image"),
    signatures.GIF: FileTypeInfo(FileType.GIF, "GIF Image"),
    signatures.CLASS: FileTypeInfo(FileType.CLASS, "Java Class File"),
}

DOS_EXECUTABLE = FileTypeInfo(FileType.DOS_EXECUTABLE, "MS-DOS executable file")
ZIP_ARCHIVE = FileTypeInfo(FileType.ZIP, "ZIP Archive")
TEXT_FILE = FileTypeInfo(FileType.TEXT, "Text File")
BINARY_DATA = FileTypeInfo(FileType.BINARY, "Binary Data")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def classify(data: bytes) -> FileTypeInfo:
    """Detect the file type of *data* from its content."""
    name = signatures.match_signature(data)
    if name is not None:
        info = _SIGNATURE_HANDLERS[name](data)
        LOGGER.debug("Signature %s matched -> %s", name, info.description)
        return info
    if is_probably_text(data):
        return _classify_text(data)
    return BINARY_DATA


def is_probably_text(data: bytes) -> bool:
    """True when more than 90% of the leading sample is printable or whitespace."""
    sample = data[:TEXT_SAMPLE_SIZE]
    if not sample:
        return False
    text_chars = sum(1 for b in sample if 32 <= b <= 126 or b in (9, 10, 13))
    return text_chars / len(sample) > TEXT_RATIO_THRESHOLD


def pe_machine_name(machine: int | None) -> str:
    if machine is None:
        return "Unknown"
    return _PE_MACHINES.get(machine, "Unknown")


def pe_subtype(characteristics: int | None) -> str:
    if characteristics is not None:
        for flag, subtype in _PE_SUBTYPE_FLAGS:
            if characteristics & flag:
                return subtype
    return "Unknown"


def elf_class_name(data: bytes) -> str | None:
    """Architecture width from the ELF class byte, ``None`` if unrecognised."""
    return _ELF_CLASSES.get(read_u8(data, 4))


def elf_type_name(data: bytes) -> str:
    return _ELF_TYPES.get(read_u16_le(data, 16), "Unknown")


# ---------------------------------------------------------------------------
# Per-signature handlers (private)
# ---------------------------------------------------------------------------


def _classify_mz(data: bytes) -> FileTypeInfo:
    pe_offset = locate_pe_header(data)
    if pe_offset is None:
        return DOS_EXECUTABLE

    architecture = pe_machine_name(read_u16_le(data, pe_offset + 4))
    subtype = pe_subtype(read_u16_le(data, pe_offset + 22))
    return FileTypeInfo(
        type=FileType.WINDOWS_EXECUTABLE,
        subtype=subtype,
        architecture=architecture,
        description=f"Windows {subtype} ({architecture})",
    )


def _classify_elf(data: bytes) -> FileTypeInfo:
    architecture = elf_class_name(data)
    subtype = elf_type_name(data)
    description = f"Linux/Unix {subtype}"
    if architecture:
        description += f" ({architecture})"
    return FileTypeInfo(
        type=FileType.ELF,
        subtype=subtype,
        architecture=architecture,
        description=description,
    )


def _classify_zip(data: bytes) -> FileTypeInfo:
    # Marker search over the raw bytes, not a central-directory parse.
    for marker, info in _ZIP_MARKERS:
        if contains_pattern(data, marker):
            return info
    return ZIP_ARCHIVE


def _classify_text(data: bytes) -> FileTypeInfo:
    for markers, info in _TEXT_MARKERS:
        if any(contains_pattern(data, m) for m in markers):
            return info
    return TEXT_FILE


def _fixed(name: str) -> Callable[[bytes], FileTypeInfo]:
    info = _FIXED[name]
    return lambda data: info


_SIGNATURE_HANDLERS: dict[str, Callable[[bytes], FileTypeInfo]] = {
    signatures.MZ: _classify_mz,
    signatures.ELF: _classify_elf,
    signatures.ZIP: _classify_zip,
    **{name: _fixed(name) for name in _FIXED},
}
