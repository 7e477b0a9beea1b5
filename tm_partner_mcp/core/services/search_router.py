"""Maps a search request onto a single Partner API call."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

from tm_partner_mcp.config import Settings
from tm_partner_mcp.core.services.partner_client import PartnerAPIClient
from tm_partner_mcp.shared.exceptions import InvalidArgumentError
from tm_partner_mcp.shared.schemas.partner import EntityKind
from tm_partner_mcp.shared.schemas.search_params import SearchRequest

logger = logging.getLogger(__name__)

# Request fields forwarded to each search endpoint, in query-string order.
EVENT_SEARCH_FIELDS: Tuple[str, ...] = (
    "keyword",
    "attractionId",
    "venueId",
    "postalCode",
    "latlong",
    "radius",
    "unit",
    "startDateTime",
    "endDateTime",
    "size",
    "page",
    "sort",
    "city",
    "countryCode",
    "stateCode",
    "classificationName",
    "marketId",
    "onsaleStartDateTime",
    "onsaleEndDateTime",
)

VENUE_SEARCH_FIELDS: Tuple[str, ...] = (
    "keyword",
    "size",
    "page",
    "sort",
    "city",
    "countryCode",
    "stateCode",
    "postalCode",
    "latlong",
    "radius",
    "unit",
)

ATTRACTION_SEARCH_FIELDS: Tuple[str, ...] = (
    "keyword",
    "size",
    "page",
    "sort",
    "classificationName",
)


@dataclass(frozen=True)
class UpstreamCall:
    """One planned GET against the Partner API."""

    kind: EntityKind
    path: str
    params: Dict[str, Any] = field(default_factory=dict)
    is_lookup: bool = False


def resolve_kind(value: str) -> EntityKind:
    try:
        return EntityKind(value)
    except ValueError:
        raise InvalidArgumentError(
            f"Invalid search type: {value}. Must be 'event', 'venue', or 'attraction'."
        ) from None


def _lookup(kind: EntityKind, resource: str, entity_id: str) -> UpstreamCall:
    return UpstreamCall(
        kind=kind,
        path=f"/{resource}/{quote(entity_id, safe='')}",
        is_lookup=True,
    )


def _search(kind: EntityKind, resource: str, request: SearchRequest, fields) -> UpstreamCall:
    params = {
        name: getattr(request, name)
        for name in fields
        if getattr(request, name) is not None
    }
    return UpstreamCall(kind=kind, path=f"/{resource}", params=params)


def plan(request: SearchRequest) -> UpstreamCall:
    """Decide which endpoint ``request`` maps to and which filters it carries.

    An event id always wins over the other filters. For venues and
    attractions the id is only used when no keyword is given; with a keyword
    the request becomes a search and the id is not forwarded.
    """
    kind = resolve_kind(request.kind)

    if kind is EntityKind.EVENT:
        if request.eventId:
            return _lookup(kind, "events", request.eventId)
        return _search(kind, "events", request, EVENT_SEARCH_FIELDS)

    if kind is EntityKind.VENUE:
        if request.venueId and not request.keyword:
            return _lookup(kind, "venues", request.venueId)
        return _search(kind, "venues", request, VENUE_SEARCH_FIELDS)

    if request.attractionId and not request.keyword:
        return _lookup(kind, "attractions", request.attractionId)
    return _search(kind, "attractions", request, ATTRACTION_SEARCH_FIELDS)


class SearchRouter:
    """Plans and executes the upstream call for a search request."""

    def __init__(
        self, settings: Settings, client: Optional[PartnerAPIClient] = None
    ) -> None:
        self.settings = settings
        self.client = client or PartnerAPIClient(settings)

    async def fetch(self, request: SearchRequest) -> Tuple[UpstreamCall, Any]:
        call = plan(request)
        logger.info(
            "Routing %s %s to %s",
            call.kind.value,
            "lookup" if call.is_lookup else "search",
            call.path,
        )
        logger.debug("Forwarded filters: %s", call.params)
        body = await self.client.get(call.path, call.params)
        return call, body


__all__ = [
    "SearchRouter",
    "UpstreamCall",
    "plan",
    "resolve_kind",
    "EVENT_SEARCH_FIELDS",
    "VENUE_SEARCH_FIELDS",
    "ATTRACTION_SEARCH_FIELDS",
]
