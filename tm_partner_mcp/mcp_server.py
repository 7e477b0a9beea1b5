from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional
import logging
import sys

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp import types
from pydantic import ValidationError
import anyio
import sentry_sdk

from .config import Settings, load_settings
from .core.services.search_router import SearchRouter
from .shared.exceptions import MethodNotFoundError, PartnerError

logger = logging.getLogger(__name__)


@dataclass
class Tool:
    """Simple representation of a callable tool."""

    name: str
    description: str
    inputSchema: Dict[str, Any]
    _implementation: Callable[..., Awaitable[Any]]

    category: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        # Serialize public fields while omitting the implementation callable
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.inputSchema,
            "category": self.category,
        }


def build_tools(router: SearchRouter) -> List[Tool]:
    """Return the tools served for ``router``."""

    from .tools.search_tools import build_search_tool

    return [build_search_tool(router)]


def find_tool(tools: List[Tool], name: str) -> Tool:
    tool = next((t for t in tools if t.name == name), None)
    if tool is None:
        raise MethodNotFoundError(f"Unknown tool: {name}")
    return tool


async def call_tool(
    tools: List[Tool], name: str, arguments: Dict[str, Any] | None
) -> List[types.TextContent]:
    """Run tool ``name`` and wrap its text output as MCP content.

    Errors raised by the tool are converted to :class:`McpError` so the
    caller always receives a structured failure.
    """
    try:
        tool = find_tool(tools, name)
        text = await tool._implementation(**(arguments or {}))
    except PartnerError as exc:
        logger.error("Tool %s failed with %s: %s", name, exc.error_code, exc.message)
        raise McpError(exc.to_error_data()) from exc
    return [types.TextContent(type="text", text=text)]


def create_server(
    settings: Settings, router: Optional[SearchRouter] = None
) -> Server:
    """Instantiate a Server and register tools."""
    router = router or SearchRouter(settings)
    tools = build_tools(router)
    server = Server(settings.SERVER_NAME, version=settings.SERVER_VERSION)

    @server.list_tools()
    async def _list_tools() -> List[types.Tool]:
        return [
            types.Tool(
                name=t.name,
                description=t.description,
                inputSchema=t.inputSchema,
            )
            for t in tools
        ]

    # SearchRequest and the router report argument errors, not the SDK
    @server.call_tool(validate_input=False)
    async def _call_tool(name: str, arguments: dict | None) -> list:
        return await call_tool(tools, name, arguments)

    logger.info("MCP server %s loaded with %d tools", settings.SERVER_NAME, len(tools))
    return server


def configure_logging(settings: Settings) -> None:
    """Log to stderr; stdout carries the MCP stdio transport."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format=settings.LOG_FORMAT,
        stream=sys.stderr,
    )
    if settings.ERROR_TRACKING_DSN:
        sentry_sdk.init(dsn=settings.ERROR_TRACKING_DSN)
        logger.info("Sentry error tracking enabled")


def load_settings_or_exit() -> Settings:
    try:
        return load_settings()
    except ValidationError as exc:
        logging.error(
            "Missing or invalid configuration (TM_PARTNER_API_KEY and "
            "TM_PARTNER_API_SECRET are required): %s",
            exc,
        )
        raise SystemExit(1) from exc


def run_server(settings: Optional[Settings] = None) -> None:
    """Run the MCP server with stdio transport."""
    settings = settings or load_settings_or_exit()
    configure_logging(settings)

    async def _main() -> None:
        server = create_server(settings)
        async with stdio_server() as (read, write):
            logger.info("Ticketmaster Partner API MCP server running on stdio")
            await server.run(read, write, server.create_initialization_options())

    anyio.run(_main)


__all__ = [
    "Tool",
    "build_tools",
    "call_tool",
    "configure_logging",
    "create_server",
    "find_tool",
    "load_settings_or_exit",
    "run_server",
]
