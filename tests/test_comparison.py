"""Tests for comparison assembly."""

import dataclasses
import json
from pathlib import Path

import pytest

from core.comparison import compare, compare_files, inspect
from core.models import ComparisonResult, FileData, FileType


def test_compare_two_empty_buffers() -> None:
    result = compare(FileData("a", b""), FileData("b", b""))

    assert result.size_match
    assert result.differences == ()
    assert result.byte_values == ()
    assert result.similarity == 100
    assert result.hash1 == result.hash2 == "00000000"
    assert result.identical
    assert result.file1_type.type == FileType.BINARY
    assert result.file1_structure.is_empty


def test_compare_prefix_buffers() -> None:
    a = FileData("short.bin", bytes(range(10)))
    b = FileData("long.bin", bytes(range(10)) + b"XYZ\x00\x01")
    result = compare(a, b)

    assert not result.size_match
    assert result.differences == (10, 11, 12, 13, 14)
    assert result.difference_count == 5
    assert result.similarity == 66.67
    assert [d.char2 for d in result.byte_values] == ["X", "Y", "Z", None, "."]
    assert all(d.byte1 is None for d in result.byte_values)
    assert result.file1_size == 10
    assert result.file2_size == 15


def test_compare_pe_against_elf(pe_builder, elf_builder) -> None:
    result = compare(FileData("app.exe", pe_builder()), FileData("app", elf_builder()))

    assert result.file1_type.type == FileType.WINDOWS_EXECUTABLE
    assert result.file2_type.type == FileType.ELF
    assert result.file1_structure.sections == ()
    assert result.file2_structure.headers[0].value == "EXEC"
    assert not result.identical


def test_result_is_immutable() -> None:
    result = compare(FileData("a", b"x"), FileData("b", b"y"))

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.similarity = 1.0  # type: ignore[misc]


def test_summary_mentions_both_names() -> None:
    same = compare(FileData("a", b"abc"), FileData("b", b"abc"))
    differ = compare(FileData("a", b"abc"), FileData("b", b"abd!"))

    assert same.summary == "'a' and 'b' are identical (3 bytes)."
    assert differ.summary == "'a' and 'b' differ at 2 positions; similarity 50.00%, sizes differ."


def test_to_dict_is_json_serialisable(pe_builder) -> None:
    result = compare(FileData("a.exe", pe_builder()), FileData("b.txt", b"hello\n"))
    d = json.loads(json.dumps(result.to_dict()))

    assert d["file1_type"]["type"] == "Windows Executable"
    assert d["file2_type"] == {"type": "Text", "description": "Text File"}
    assert d["file2_structure"] == {}
    assert d["differences"] == list(result.differences)
    assert len(d["byte_values"]) == result.difference_count


def test_inspect_returns_type_and_structure(elf_builder) -> None:
    file_type, structure = inspect(FileData("x", elf_builder(elf_class=1)))

    assert file_type.architecture == "32-bit"
    assert structure.architecture == "32-bit"


def test_compare_files_reads_from_disk(tmp_path: Path) -> None:
    first = tmp_path / "one.bin"
    second = tmp_path / "two.bin"
    first.write_bytes(b"\x00\x01\x02")
    second.write_bytes(b"\x00\x01\x03")

    result = compare_files(first, second)

    assert result.file1_name == "one.bin"
    assert result.file2_name == "two.bin"
    assert result.differences == (2,)
    assert result.similarity == 66.67


def test_compare_files_missing(tmp_path: Path) -> None:
    present = tmp_path / "present.bin"
    present.write_bytes(b"x")

    with pytest.raises(FileNotFoundError):
        compare_files(present, tmp_path / "missing.bin")


def test_file_types_are_required() -> None:
    with pytest.raises(TypeError):
        ComparisonResult(  # type: ignore[call-arg]
            file1_name="a", file2_name="b", file1_size=0, file2_size=0,
            hash1="00000000", hash2="00000000", size_match=True, similarity=100.0,
        )
