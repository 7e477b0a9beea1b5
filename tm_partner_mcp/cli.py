"""Command-line interface for the Partner API MCP server."""

import argparse
import asyncio
import inspect
import json
import sys

from mcp.shared.exceptions import McpError

from .core.services.search_router import SearchRouter
from .mcp_server import build_tools, call_tool, load_settings_or_exit, run_server
from .tools.search_tools import SEARCH_TOOL_NAME


def serve(_args: argparse.Namespace) -> int:
    """Serve the MCP tools over stdio."""
    run_server()
    return 0


async def search(_args: argparse.Namespace) -> int:
    """Read tool arguments as JSON from STDIN and print the tool output."""
    try:
        arguments = json.load(sys.stdin)
    except json.JSONDecodeError as exc:
        sys.stderr.write(f"Invalid JSON arguments: {exc}\n")
        return 2

    settings = load_settings_or_exit()
    tools = build_tools(SearchRouter(settings))
    try:
        content = await call_tool(tools, SEARCH_TOOL_NAME, arguments)
    except McpError as exc:
        sys.stderr.write(f"{exc.error.message}\n")
        return 1
    sys.stdout.write(content[0].text + "\n")
    sys.stdout.flush()
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ticketmaster Partner API MCP server")
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("serve", help="Run the MCP server on stdio (default)")
    p.set_defaults(func=serve)

    p = sub.add_parser("search", help="Run one search with JSON arguments from stdin")
    p.set_defaults(func=search)

    parser.set_defaults(func=serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if inspect.iscoroutinefunction(args.func):
        return asyncio.run(args.func(args))
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
