"""Structure extraction for classified buffers.

PE images get their section table, bitness and entry point read directly
from the headers; ELF images get three scalar header fields. Import lists are
read with *pefile* and *pyelftools* on a best-effort basis. Any other format
yields an empty ``FileStructureInfo``.
"""

from __future__ import annotations

import logging
from io import BytesIO

from . import signatures
from .classifier import elf_class_name, elf_type_name
from .models import FileStructureInfo, FileType, FileTypeInfo, HeaderField, Section
from .utils import locate_pe_header, read_u16_le, read_u32_le

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PE_SECTION_ENTRY_SIZE = 40
PE_SECTION_NAME_SIZE = 8
MAX_PE_SECTIONS = 20
PE32_PLUS_MAGIC = 0x20B

# Checked in order, first set bit wins.
_SECTION_KINDS: list[tuple[int, str]] = [
    (0x20,  "Code"),
    (0x40,  "Initialized Data"),
    (0x80,  "Uninitialized Data"),
    (0x200, "Comments/Info"),
]

_ELF_MACHINES = {
    3:   "x86",
    62:  "x86-64",
    40:  "ARM",
    183: "ARM64",
}

EMPTY_STRUCTURE = FileStructureInfo()

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_structure(data: bytes, file_type: FileType | FileTypeInfo | str) -> FileStructureInfo:
    """Parse the format-specific headers of *data* for its classified type."""
    if isinstance(file_type, FileTypeInfo):
        file_type = file_type.type

    if file_type == FileType.WINDOWS_EXECUTABLE and signatures.matches_named(data, signatures.MZ):
        pe_offset = locate_pe_header(data)
        if pe_offset is not None:
            return _extract_pe(data, pe_offset)
    elif file_type == FileType.ELF and signatures.matches_named(data, signatures.ELF):
        return _extract_elf(data)
    return EMPTY_STRUCTURE


def section_description(characteristics: int) -> str:
    for flag, kind in _SECTION_KINDS:
        if characteristics & flag:
            return kind
    return ""


def elf_machine_name(machine: int | None) -> str:
    if machine is None:
        return "Unknown"
    return _ELF_MACHINES.get(machine, f"Unknown ({machine})")


# ---------------------------------------------------------------------------
# Format-specific parsers (private)
# ---------------------------------------------------------------------------


def _extract_pe(data: bytes, pe_offset: int) -> FileStructureInfo:
    number_of_sections = read_u16_le(data, pe_offset + 6) or 0
    size_of_optional_header = read_u16_le(data, pe_offset + 20) or 0
    magic = read_u16_le(data, pe_offset + 24)
    entry = read_u32_le(data, pe_offset + 40)

    table = pe_offset + 24 + size_of_optional_header
    sections = []
    for i in range(min(number_of_sections, MAX_PE_SECTIONS)):
        offset = table + i * PE_SECTION_ENTRY_SIZE
        if offset + PE_SECTION_ENTRY_SIZE > len(data):
            break
        sections.append(_read_section(data, offset))

    return FileStructureInfo(
        sections=tuple(sections),
        architecture="64-bit" if magic == PE32_PLUS_MAGIC else "32-bit",
        entry_point=f"0x{entry:X}" if entry is not None else None,
        imports=_pe_imports(data),
    )


def _read_section(data: bytes, offset: int) -> Section:
    raw_name = data[offset:offset + PE_SECTION_NAME_SIZE]
    name = raw_name.split(b"\x00", 1)[0].decode("latin-1")
    # The caller guarantees the whole 40-byte entry is in range.
    size = read_u32_le(data, offset + 16)
    characteristics = read_u32_le(data, offset + 36)
    return Section(
        name=name,
        size=size,
        description=section_description(characteristics),
    )


def _extract_elf(data: bytes) -> FileStructureInfo:
    version = read_u32_le(data, 20)
    headers = (
        HeaderField("Type", elf_type_name(data)),
        HeaderField("Machine", elf_machine_name(read_u16_le(data, 18))),
        HeaderField("Version", str(version) if version is not None else "Unknown"),
    )
    return FileStructureInfo(
        headers=headers,
        architecture=elf_class_name(data),
        imports=_elf_imports(data),
    )


def _pe_imports(data: bytes) -> tuple[str, ...] | None:
    """Imported functions as ``dll!function`` strings, via pefile."""
    try:
        import pefile

        pe = pefile.PE(data=data, fast_load=True)
        try:
            pe.parse_data_directories(
                directories=[pefile.DIRECTORY_ENTRY["IMAGE_DIRECTORY_ENTRY_IMPORT"]]
            )
            names = []
            for entry in getattr(pe, "DIRECTORY_ENTRY_IMPORT", []):
                lib = entry.dll.decode(errors="replace")
                for imp in entry.imports:
                    func = imp.name.decode(errors="replace") if imp.name else f"ord_{imp.ordinal}"
                    names.append(f"{lib}!{func}")
        finally:
            pe.close()
    except Exception as exc:
        LOGGER.debug("pefile could not read imports: %s", exc)
        return None
    return tuple(names) or None


def _elf_imports(data: bytes) -> tuple[str, ...] | None:
    """Undefined dynamic symbols, via pyelftools."""
    try:
        from elftools.elf.elffile import ELFFile
        from elftools.elf.sections import SymbolTableSection

        elf = ELFFile(BytesIO(data))
        names = []
        for sec in elf.iter_sections():
            if isinstance(sec, SymbolTableSection) and sec.name == ".dynsym":
                for sym in sec.iter_symbols():
                    if sym["st_shndx"] == "SHN_UNDEF" and sym.name:
                        names.append(sym.name)
    except Exception as exc:
        LOGGER.debug("pyelftools could not read imports: %s", exc)
        return None
    return tuple(names) or None
