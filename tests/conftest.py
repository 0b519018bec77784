"""Synthetic PE / ELF image builders shared by the test suite."""

from __future__ import annotations

import struct
from typing import Callable, Sequence

import pytest

# Characteristics flags used by the builders
IMAGE_FILE_EXECUTABLE_IMAGE = 0x0002
IMAGE_FILE_SYSTEM = 0x1000
IMAGE_FILE_DLL = 0x2000

SCN_CODE = 0x20
SCN_INITIALIZED_DATA = 0x40
SCN_UNINITIALIZED_DATA = 0x80
SCN_INFO = 0x200


def build_pe(
    machine: int = 0x8664,
    characteristics: int = IMAGE_FILE_EXECUTABLE_IMAGE,
    magic: int = 0x20B,
    entry_point: int = 0x1400,
    sections: Sequence[tuple[bytes, int, int]] = (),
    number_of_sections: int | None = None,
    size_of_optional_header: int = 0xF0,
    pe_offset: int = 0x80,
    padding: int = 0x40,
) -> bytes:
    """Return a minimal MZ/PE image with the given header fields.

    *sections* holds ``(name, size_of_raw_data, characteristics)`` triples.
    """
    table = pe_offset + 24 + size_of_optional_header
    buf = bytearray(table + 40 * len(sections) + padding)
    buf[0:2] = b"MZ"
    struct.pack_into("<I", buf, 0x3C, pe_offset)
    buf[pe_offset:pe_offset + 4] = b"PE\x00\x00"
    struct.pack_into("<H", buf, pe_offset + 4, machine)
    struct.pack_into(
        "<H", buf, pe_offset + 6,
        len(sections) if number_of_sections is None else number_of_sections,
    )
    struct.pack_into("<H", buf, pe_offset + 20, size_of_optional_header)
    struct.pack_into("<H", buf, pe_offset + 22, characteristics)
    struct.pack_into("<H", buf, pe_offset + 24, magic)
    struct.pack_into("<I", buf, pe_offset + 40, entry_point)
    for i, (name, raw_size, flags) in enumerate(sections):
        offset = table + i * 40
        buf[offset:offset + 8] = name.ljust(8, b"\x00")[:8]
        struct.pack_into("<I", buf, offset + 16, raw_size)
        struct.pack_into("<I", buf, offset + 36, flags)
    return bytes(buf)


def build_elf(
    elf_class: int = 2,
    e_type: int = 2,
    machine: int = 62,
    version: int = 1,
) -> bytes:
    """Return a 64-byte little-endian ELF header."""
    buf = bytearray(64)
    buf[0:4] = b"\x7fELF"
    buf[4] = elf_class
    buf[5] = 1  # little endian
    buf[6] = 1
    struct.pack_into("<H", buf, 16, e_type)
    struct.pack_into("<H", buf, 18, machine)
    struct.pack_into("<I", buf, 20, version)
    return bytes(buf)


@pytest.fixture
def pe_builder() -> Callable[..., bytes]:
    return build_pe


@pytest.fixture
def elf_builder() -> Callable[..., bytes]:
    return build_elf


def build_pe_with_imports(
    dll: bytes = b"KERNEL32.dll",
    functions: Sequence[bytes] = (b"ExitProcess", b"GetTickCount"),
    ordinals: Sequence[int] = (),
) -> bytes:
    """Return a PE32+ image with one ``.idata`` section holding an import table.

    Headers occupy the first 0x200 bytes; the section maps RVA 0x1000 to file
    offset 0x200.
    """
    pe_offset = 0x80
    opt = pe_offset + 24
    rva_base, raw_base = 0x1000, 0x200
    buf = bytearray(0x400)

    buf[0:2] = b"MZ"
    struct.pack_into("<I", buf, 0x3C, pe_offset)
    buf[pe_offset:pe_offset + 4] = b"PE\x00\x00"
    # FILE_HEADER: machine, sections, timestamp, symtab, symbols, opt size, flags
    struct.pack_into("<HHIIIHH", buf, pe_offset + 4, 0x8664, 1, 0, 0, 0, 0xF0, 0x0022)

    # OPTIONAL_HEADER (PE32+)
    struct.pack_into("<H", buf, opt, 0x20B)
    struct.pack_into("<I", buf, opt + 16, rva_base)            # AddressOfEntryPoint
    struct.pack_into("<Q", buf, opt + 24, 0x140000000)         # ImageBase
    struct.pack_into("<II", buf, opt + 32, 0x1000, 0x200)      # Section/FileAlignment
    struct.pack_into("<H", buf, opt + 40, 6)                   # MajorOperatingSystemVersion
    struct.pack_into("<H", buf, opt + 48, 6)                   # MajorSubsystemVersion
    struct.pack_into("<II", buf, opt + 56, 0x2000, 0x200)      # SizeOfImage/Headers
    struct.pack_into("<H", buf, opt + 68, 3)                   # console subsystem
    struct.pack_into("<I", buf, opt + 108, 16)                 # NumberOfRvaAndSizes
    struct.pack_into("<II", buf, opt + 112 + 8, rva_base, 40)  # import directory

    # Section table
    table = opt + 0xF0
    buf[table:table + 8] = b".idata\x00\x00"
    struct.pack_into("<IIII", buf, table + 8, 0x200, rva_base, 0x200, raw_base)
    struct.pack_into("<I", buf, table + 36, 0xC0000040)

    def put(rva: int, data: bytes) -> None:
        off = raw_base + rva - rva_base
        buf[off:off + len(data)] = data

    ilt, iat, name_rva, hints = 0x1040, 0x1080, 0x10C0, 0x1100
    thunks = []
    rva = hints
    for func in functions:
        put(rva, struct.pack("<H", 0) + func + b"\x00")
        thunks.append(rva)
        rva += (2 + len(func) + 1 + 1) & ~1
    thunks.extend((1 << 63) | n for n in ordinals)
    thunk_table = b"".join(struct.pack("<Q", t) for t in thunks) + bytes(8)

    # One descriptor followed by the null terminator
    put(rva_base, struct.pack("<IIIII", ilt, 0, 0, name_rva, iat) + bytes(20))
    put(ilt, thunk_table)
    put(iat, thunk_table)
    put(name_rva, dll + b"\x00")
    return bytes(buf)


@pytest.fixture
def pe_with_imports_builder() -> Callable[..., bytes]:
    return build_pe_with_imports
