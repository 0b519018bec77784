"""Core data models and algorithms for binary comparison."""

from .models import (
    ByteDifference,
    ComparisonResult,
    FileData,
    FileStructureInfo,
    FileType,
    FileTypeInfo,
    HeaderField,
    Section,
)
from .classifier import classify
from .structure import extract_structure
from .diff import (
    calculate_hash,
    calculate_similarity,
    compare_sizes,
    find_byte_differences,
    get_bytes_at_positions,
)
from .comparison import compare, compare_files, inspect
from .utils import format_file_size, load_file, validate_file

__all__ = [
    "ByteDifference",
    "ComparisonResult",
    "FileData",
    "FileStructureInfo",
    "FileType",
    "FileTypeInfo",
    "HeaderField",
    "Section",
    "classify",
    "extract_structure",
    "calculate_hash",
    "calculate_similarity",
    "compare_sizes",
    "find_byte_differences",
    "get_bytes_at_positions",
    "compare",
    "compare_files",
    "inspect",
    "format_file_size",
    "load_file",
    "validate_file",
]
