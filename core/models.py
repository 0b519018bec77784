"""Shared data models used by the classifier, the diff engine and the MCP tools."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class FileType(str, Enum):
    WINDOWS_EXECUTABLE = "Windows Executable"
    DOS_EXECUTABLE = "DOS Executable"
    ELF = "ELF"
    MACHO = "Mach-O"
    DOCX = "DOCX"
    XLSX = "XLSX"
    PPTX = "PPTX"
    JAR = "JAR"
    APK = "APK"
    ZIP = "ZIP"
    PDF = "PDF"
    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"
    CLASS = "CLASS"
    XML = "XML"
    HTML = "HTML"
    SCRIPT = "Script"
    TEXT = "Text"
    BINARY = "Binary"


def _without_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FileData:
    """A named byte buffer, the input to a comparison."""

    name: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


# ---------------------------------------------------------------------------
# Classification / structure
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FileTypeInfo:
    """Detected format of a buffer.

    ``subtype`` and ``architecture`` are only set when the detector found
    enough structure to be confident about them.
    """

    type: FileType
    description: str
    subtype: str | None = None
    architecture: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = _without_none(asdict(self))
        d["type"] = self.type.value
        return d


@dataclass(frozen=True)
class Section:
    """A single entry of a PE section table."""

    name: str
    size: int
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HeaderField:
    name: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FileStructureInfo:
    """Format-specific structure of a buffer.

    Every field is optional: ``None`` means the field does not apply to the
    format, not that it could not be determined.
    """

    sections: tuple[Section, ...] | None = None
    headers: tuple[HeaderField, ...] | None = None
    architecture: str | None = None
    entry_point: str | None = None
    imports: tuple[str, ...] | None = None

    @property
    def is_empty(self) -> bool:
        return all(v is None for v in (
            self.sections, self.headers, self.architecture,
            self.entry_point, self.imports,
        ))

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.sections is not None:
            d["sections"] = [s.to_dict() for s in self.sections]
        if self.headers is not None:
            d["headers"] = [h.to_dict() for h in self.headers]
        if self.architecture is not None:
            d["architecture"] = self.architecture
        if self.entry_point is not None:
            d["entry_point"] = self.entry_point
        if self.imports is not None:
            d["imports"] = list(self.imports)
        return d


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ByteDifference:
    """Byte values of both buffers at one differing position.

    ``byte1``/``byte2`` are ``None`` past the end of the respective buffer.
    ``char1``/``char2`` are ``None`` when the byte is absent *or* zero.
    """

    position: int
    byte1: int | None = None
    byte2: int | None = None
    char1: str | None = None
    char2: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ComparisonResult:
    """Everything known about a pair of buffers after one comparison."""

    file1_name: str
    file2_name: str
    file1_size: int
    file2_size: int
    hash1: str
    hash2: str
    size_match: bool
    similarity: float
    file1_type: FileTypeInfo
    file2_type: FileTypeInfo
    differences: tuple[int, ...] = ()
    byte_values: tuple[ByteDifference, ...] = ()
    file1_structure: FileStructureInfo = field(default_factory=FileStructureInfo)
    file2_structure: FileStructureInfo = field(default_factory=FileStructureInfo)

    # convenience ----------------------------------------------------------

    @property
    def difference_count(self) -> int:
        return len(self.differences)

    @property
    def identical(self) -> bool:
        return not self.differences

    @property
    def summary(self) -> str:
        if self.identical:
            return (
                f"'{self.file1_name}' and '{self.file2_name}' are identical "
                f"({self.file1_size} bytes)."
            )
        n = self.difference_count
        return (
            f"'{self.file1_name}' and '{self.file2_name}' differ at "
            f"{n} position{'' if n == 1 else 's'}; "
            f"similarity {self.similarity:.2f}%"
            + ("." if self.size_match else ", sizes differ.")
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "file1_name": self.file1_name,
            "file2_name": self.file2_name,
            "file1_size": self.file1_size,
            "file2_size": self.file2_size,
            "hash1": self.hash1,
            "hash2": self.hash2,
            "size_match": self.size_match,
            "similarity": self.similarity,
            "differences": list(self.differences),
            "byte_values": [b.to_dict() for b in self.byte_values],
            "file1_type": self.file1_type.to_dict(),
            "file2_type": self.file2_type.to_dict(),
            "file1_structure": self.file1_structure.to_dict(),
            "file2_structure": self.file2_structure.to_dict(),
        }
