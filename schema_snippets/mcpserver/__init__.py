"""MCP server exposing snippet search."""

from .server import create_server, mcp

__all__ = ["create_server", "mcp"]
