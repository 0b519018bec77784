"""Byte-level comparison: checksum, positional differences and similarity."""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from .models import ByteDifference

_MASK32 = 0xFFFFFFFF
_SIGN32 = 0x80000000
_TWO_PLACES = Decimal("0.01")


def calculate_hash(data: bytes) -> str:
    """Non-cryptographic 32-bit rolling checksum of *data* as hex.

    ``acc = (acc << 5) - acc + b`` with two's-complement wrap-around; the
    absolute value is rendered as lowercase hex padded to 8 digits.
    """
    acc = 0
    for b in data:
        acc = (acc * 31 + b) & _MASK32
    if acc & _SIGN32:
        acc -= 1 << 32
    return format(abs(acc), "08x")


def compare_sizes(data1: bytes, data2: bytes) -> bool:
    return len(data1) == len(data2)


def find_byte_differences(data1: bytes, data2: bytes) -> list[int]:
    """Ascending offsets at which the buffers differ.

    Every offset past the end of the shorter buffer counts as a difference.
    """
    differences = [i for i, (a, b) in enumerate(zip(data1, data2)) if a != b]
    differences.extend(range(min(len(data1), len(data2)), max(len(data1), len(data2))))
    return differences


def similarity_from_count(total_bytes: int, diff_count: int) -> float:
    """Percentage of agreeing positions, rounded half-up to 2 decimals."""
    if total_bytes == 0:
        return 100.0
    ratio = Decimal(total_bytes - diff_count) * 100 / Decimal(total_bytes)
    return float(ratio.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def calculate_similarity(data1: bytes, data2: bytes) -> float:
    total = max(len(data1), len(data2))
    return similarity_from_count(total, len(find_byte_differences(data1, data2)))


def byte_to_char(byte: int) -> str:
    """Printable ASCII character for *byte*, ``"."`` otherwise."""
    if 32 <= byte <= 126:
        return chr(byte)
    return "."


def _char(byte: int | None) -> str | None:
    # A zero byte renders like a missing one.
    if not byte:
        return None
    return byte_to_char(byte)


def get_bytes_at_positions(
    data1: bytes, data2: bytes, positions: Iterable[int]
) -> list[ByteDifference]:
    """Byte values of both buffers at each of *positions*."""
    result = []
    for position in positions:
        if position < 0:
            raise ValueError(f"Negative position: {position}")
        byte1 = data1[position] if position < len(data1) else None
        byte2 = data2[position] if position < len(data2) else None
        result.append(ByteDifference(
            position=position,
            byte1=byte1,
            byte2=byte2,
            char1=_char(byte1),
            char2=_char(byte2),
        ))
    return result
