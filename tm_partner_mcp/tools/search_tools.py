"""The ``search_tm_partner`` tool."""

from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import ValidationError

from ..core.services.search_router import SearchRouter
from ..core.services.text_formatter import format_results
from ..mcp_server import Tool
from ..shared.exceptions import (
    InvalidArgumentError,
    PartnerError,
    UnknownFailureError,
)
from ..shared.schemas.search_params import SearchRequest

logger = logging.getLogger(__name__)

SEARCH_TOOL_NAME = "search_tm_partner"
SEARCH_TOOL_DESCRIPTION = (
    "Search for events, venues, or attractions using Ticketmaster Partner API"
)

SEARCH_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "kind": {
            "type": "string",
            "enum": ["event", "venue", "attraction"],
            "description": "Type of search to perform",
        },
        "keyword": {"type": "string", "description": "Search keyword or term"},
        "eventId": {"type": "string", "description": "Specific event ID to retrieve"},
        "venueId": {
            "type": "string",
            "description": "Specific venue ID to search or retrieve",
        },
        "attractionId": {
            "type": "string",
            "description": "Specific attraction ID to search or retrieve",
        },
        "startDateTime": {
            "type": "string",
            "description": "Start date/time in ISO 8601 format (YYYY-MM-DDTHH:mm:ssZ)",
        },
        "endDateTime": {
            "type": "string",
            "description": "End date/time in ISO 8601 format (YYYY-MM-DDTHH:mm:ssZ)",
        },
        "onsaleStartDateTime": {
            "type": "string",
            "description": "Events going on sale after this ISO 8601 date/time",
        },
        "onsaleEndDateTime": {
            "type": "string",
            "description": "Events going on sale before this ISO 8601 date/time",
        },
        "city": {"type": "string", "description": "City name"},
        "stateCode": {"type": "string", "description": "State code (e.g., NY, CA)"},
        "countryCode": {"type": "string", "description": "Country code (e.g., US, CA)"},
        "postalCode": {"type": "string", "description": "Postal/ZIP code"},
        "latlong": {
            "type": "string",
            "description": "Latitude,longitude for geographic search",
        },
        "radius": {"type": "string", "description": "Search radius"},
        "unit": {
            "type": "string",
            "enum": ["miles", "km"],
            "description": "Unit for radius (miles or km)",
        },
        "marketId": {"type": "string", "description": "Market ID to filter events by"},
        "classificationName": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Event classification/category names",
        },
        "size": {
            "type": "integer",
            "minimum": 1,
            "maximum": 200,
            "default": 20,
            "description": "Number of results per page (max 200)",
        },
        "page": {
            "type": "integer",
            "minimum": 0,
            "default": 0,
            "description": "Page number (0-indexed)",
        },
        "sort": {"type": "string", "description": "Sort order for results"},
        "format": {
            "type": "string",
            "enum": ["json", "text"],
            "default": "json",
            "description": "Output format (defaults to json)",
        },
    },
    "required": ["kind"],
    "examples": [
        {"kind": "event", "keyword": "jazz", "city": "Chicago", "format": "text"},
        {"kind": "venue", "venueId": "KovZpZAEdFtJ"},
    ],
}


def parse_search_request(arguments: Dict[str, Any]) -> SearchRequest:
    try:
        return SearchRequest.model_validate(arguments)
    except ValidationError as exc:
        logger.error("Validation failed for %s: %s", SEARCH_TOOL_NAME, exc)
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidArgumentError(f"Invalid arguments: {problems}", details=str(exc)) from exc


def build_search_tool(router: SearchRouter) -> Tool:
    """Bind the search tool to ``router``."""

    async def search_tm_partner(**arguments: Any) -> str:
        try:
            request = parse_search_request(arguments)
            call, body = await router.fetch(request)
            return format_results(body, request.format, call.kind)
        except PartnerError:
            raise
        except Exception as exc:
            logger.exception("Error in %s", SEARCH_TOOL_NAME)
            raise UnknownFailureError(f"Error: {exc}") from exc

    return Tool(
        name=SEARCH_TOOL_NAME,
        description=SEARCH_TOOL_DESCRIPTION,
        inputSchema=SEARCH_INPUT_SCHEMA,
        _implementation=search_tm_partner,
        category="search",
    )


__all__ = [
    "SEARCH_TOOL_NAME",
    "SEARCH_TOOL_DESCRIPTION",
    "SEARCH_INPUT_SCHEMA",
    "build_search_tool",
    "parse_search_request",
]
