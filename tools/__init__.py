"""MCP tool servers for binary comparison."""

from .comparison_server import mcp as comparison_mcp

__all__ = [
    "comparison_mcp",
]
