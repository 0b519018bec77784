"""Assemble a ``ComparisonResult`` from two named buffers."""

from __future__ import annotations

import logging
import os

from .classifier import classify
from .diff import (
    calculate_hash,
    compare_sizes,
    find_byte_differences,
    get_bytes_at_positions,
    similarity_from_count,
)
from .models import ComparisonResult, FileData, FileStructureInfo, FileTypeInfo
from .structure import extract_structure
from .utils import load_file

LOGGER = logging.getLogger(__name__)


def inspect(file: FileData) -> tuple[FileTypeInfo, FileStructureInfo]:
    """Classify a buffer and extract its structure."""
    file_type = classify(file.content)
    return file_type, extract_structure(file.content, file_type)


def compare(file1: FileData, file2: FileData) -> ComparisonResult:
    """Compare two named buffers byte by byte and structurally."""
    LOGGER.info(
        "Comparing %s (%d bytes) with %s (%d bytes)",
        file1.name, file1.size, file2.name, file2.size,
    )
    data1, data2 = file1.content, file2.content

    differences = find_byte_differences(data1, data2)
    type1, structure1 = inspect(file1)
    type2, structure2 = inspect(file2)

    result = ComparisonResult(
        file1_name=file1.name,
        file2_name=file2.name,
        file1_size=file1.size,
        file2_size=file2.size,
        hash1=calculate_hash(data1),
        hash2=calculate_hash(data2),
        size_match=compare_sizes(data1, data2),
        similarity=similarity_from_count(max(file1.size, file2.size), len(differences)),
        differences=tuple(differences),
        byte_values=tuple(get_bytes_at_positions(data1, data2, differences)),
        file1_type=type1,
        file2_type=type2,
        file1_structure=structure1,
        file2_structure=structure2,
    )
    LOGGER.info("%s", result.summary)
    return result


def compare_files(path1: str | os.PathLike[str], path2: str | os.PathLike[str]) -> ComparisonResult:
    """Load two files from disk and compare them."""
    return compare(load_file(path1), load_file(path2))
