"""Utility helpers: bounds-checked reads, file validation and loading, size formatting."""

from __future__ import annotations

import os
import struct
from pathlib import Path

from .models import FileData

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_FILE_SIZE = int(os.getenv("BINCOMPARE_MAX_FILE_SIZE", 100 * 1024 * 1024))  # 100 MB

PE_HEADER_POINTER = 0x3C
PE_SIGNATURE = b"PE\x00\x00"

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")

# ---------------------------------------------------------------------------
# Bounds-checked little-endian reads
# ---------------------------------------------------------------------------

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")


def _read(fmt: struct.Struct, data: bytes, offset: int) -> int | None:
    if offset < 0 or offset + fmt.size > len(data):
        return None
    return fmt.unpack_from(data, offset)[0]


def read_u8(data: bytes, offset: int) -> int | None:
    """Return the byte at *offset*, or ``None`` when out of range."""
    if 0 <= offset < len(data):
        return data[offset]
    return None


def read_u16_le(data: bytes, offset: int) -> int | None:
    """Return the little-endian 16-bit value at *offset*, or ``None``."""
    return _read(_U16, data, offset)


def read_u32_le(data: bytes, offset: int) -> int | None:
    """Return the little-endian 32-bit value at *offset*, or ``None``."""
    return _read(_U32, data, offset)


def locate_pe_header(data: bytes) -> int | None:
    """Return the offset of the ``PE\\0\\0`` signature of an MZ image.

    The offset comes from the DOS header field at 0x3C. ``None`` when that
    field is missing or does not point at a PE signature.
    """
    offset = read_u32_le(data, PE_HEADER_POINTER)
    if offset is None:
        return None
    if data[offset:offset + len(PE_SIGNATURE)] != PE_SIGNATURE:
        return None
    return offset


def contains_pattern(data: bytes, pattern: str | bytes) -> bool:
    """Raw substring search of *pattern* anywhere in *data*."""
    if isinstance(pattern, str):
        pattern = pattern.encode()
    return pattern in data


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def validate_file(path: str | os.PathLike[str]) -> Path:
    """Ensure *path* exists, is a file, and is within the size limit.

    Returns the resolved ``Path`` on success. Empty files are valid input.
    """
    p = Path(path).resolve()
    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")
    if not p.is_file():
        raise ValueError(f"Not a regular file: {p}")
    size = p.stat().st_size
    if size > MAX_FILE_SIZE:
        raise ValueError(
            f"File too large ({size / 1024 / 1024:.1f} MB). "
            f"Limit is {MAX_FILE_SIZE / 1024 / 1024:.0f} MB."
        )
    return p


def load_file(path: str | os.PathLike[str]) -> FileData:
    """Read a file from disk into a named buffer."""
    p = validate_file(path)
    return FileData(name=p.name, content=p.read_bytes())


def format_file_size(size: int) -> str:
    """Render *size* bytes as e.g. ``"0 Bytes"``, ``"1.5 KB"``, ``"2 MB"``."""
    if size == 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[unit]}"
