"""
Binary Comparator MCP Server
────────────────────────────
Compares two files on disk and surfaces:
  • File type, subtype and architecture of each side
  • PE section tables / ELF header fields, entry point, imports
  • Checksums, size match and similarity percentage
  • Differing offsets with the byte values on both sides

Exposed as a FastMCP server so an agent or client can call it via the
Model-Context-Protocol.
"""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP

from core.comparison import compare_files as _compare_files, inspect
from core.diff import calculate_hash
from core.utils import format_file_size, load_file

# ---------------------------------------------------------------------------
# MCP server instance
# ---------------------------------------------------------------------------

mcp = FastMCP("binary-comparator")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_MAX_DIFFERENCES = 100  # offsets listed per compare_files call

# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


def compare_files_impl(
    file1_path: str,
    file2_path: str,
    max_differences: int = DEFAULT_MAX_DIFFERENCES,
) -> dict[str, Any]:
    """Compare two files byte by byte and structurally (plain callable)."""
    if max_differences < 0:
        raise ValueError("max_differences must not be negative")

    result = _compare_files(file1_path, file2_path)
    report = result.to_dict()

    # ── truncate the per-offset listings ──────────────────────────────
    report["differences"] = report["differences"][:max_differences]
    report["byte_values"] = report["byte_values"][:max_differences]

    report["difference_count"] = result.difference_count
    report["truncated"] = result.difference_count > max_differences
    report["file1_size_human"] = format_file_size(result.file1_size)
    report["file2_size_human"] = format_file_size(result.file2_size)
    report["summary"] = result.summary
    return report


def inspect_file_impl(file_path: str) -> dict[str, Any]:
    """Classify a single file and extract its structure (plain callable)."""
    file = load_file(file_path)
    file_type, structure = inspect(file)
    return {
        "name": file.name,
        "size": file.size,
        "size_human": format_file_size(file.size),
        "hash": calculate_hash(file.content),
        "type": file_type.to_dict(),
        "structure": structure.to_dict(),
    }


@mcp.tool()
def compare_files(
    file1_path: str,
    file2_path: str,
    max_differences: int = DEFAULT_MAX_DIFFERENCES,
) -> dict[str, Any]:
    """Compare two binary files.

    Returns JSON with both file types and structures, checksums, size match,
    similarity percentage and the first ``max_differences`` differing
    offsets with their byte values.
    """
    return compare_files_impl(file1_path, file2_path, max_differences)


@mcp.tool()
def inspect_file(file_path: str) -> dict[str, Any]:
    """Detect the format of a file and extract its sections / headers."""
    return inspect_file_impl(file_path)


# ---------------------------------------------------------------------------
# Standalone entry-point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    mcp.run()
