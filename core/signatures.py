"""Magic-number table and prefix matching."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Signature table, in priority order (first match wins)
# ---------------------------------------------------------------------------

MZ = "MZ"
ELF = "ELF"
MACHO32 = "MACHO32"
MACHO64 = "MACHO64"
ZIP = "ZIP"
PDF = "PDF"
JPEG = "JPEG"
PNG = "PNG"
GIF = "GIF"
CLASS = "CLASS"

SIGNATURES: list[tuple[str, bytes]] = [
    (MZ,      b"\x4D\x5A"),           # DOS / PE executable
    (ELF,     b"\x7F\x45\x4C\x46"),
    (MACHO32, b"\xFE\xED\xFA\xCE"),
    (MACHO64, b"\xFE\xED\xFA\xCF"),
    (ZIP,     b"\x50\x4B\x03\x04"),   # also DOCX, XLSX, PPTX, JAR, APK
    (PDF,     b"\x25\x50\x44\x46"),
    (JPEG,    b"\xFF\xD8\xFF"),
    (PNG,     b"\x89\x50\x4E\x47"),
    (GIF,     b"\x47\x49\x46\x38"),
    (CLASS,   b"\xCA\xFE\xBA\xBE"),   # Java class file
]

_BY_NAME = dict(SIGNATURES)


def matches(data: bytes, signature: bytes) -> bool:
    """True iff *data* starts with *signature*."""
    if len(data) < len(signature):
        return False
    return data[:len(signature)] == signature


def matches_named(data: bytes, name: str) -> bool:
    return matches(data, _BY_NAME[name])


def match_signature(data: bytes) -> str | None:
    """Return the name of the first table entry *data* starts with."""
    for name, signature in SIGNATURES:
        if matches(data, signature):
            return name
    return None
