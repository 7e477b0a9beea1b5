"""Tools exposed by the MCP server."""

from .search_tools import SEARCH_TOOL_NAME, build_search_tool

__all__ = ["SEARCH_TOOL_NAME", "build_search_tool"]
