"""Render Partner API payloads as pretty JSON or flat text summaries."""

from __future__ import annotations

import json
from typing import Any, List, Optional

from tm_partner_mcp.shared.schemas.partner import (
    EMBEDDED_KEYS,
    Attraction,
    EntityKind,
    Event,
    PartnerEntity,
    Venue,
    parse_entity,
)

NO_RESULTS = "No results found."
RESULT_SEPARATOR = "\n\n---\n\n"


def _format_amount(value: Optional[float]) -> str:
    # Match how the API writes numbers: 25 rather than 25.0
    if value is None:
        return "N/A"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_event_as_text(event: Event) -> str:
    lines = [f"Event: {event.name} (ID: {event.id})"]

    start = event.dates.start if event.dates else None
    if start is not None:
        date = start.localDate or "TBD"
        time = start.localTime or "TBD"
        lines.append(f"Date/Time: {date} at {time}")

    if event.embedded and event.embedded.venues:
        venue = event.embedded.venues[0]
        lines.append(f"Venue: {venue.name}")
        if venue.city and venue.city.name:
            location = venue.city.name
            if venue.state and venue.state.stateCode:
                location += f", {venue.state.stateCode}"
            lines.append(f"Location: {location}")

    if event.priceRanges:
        price = event.priceRanges[0]
        lines.append(
            f"Price Range: ${_format_amount(price.min)} - "
            f"${_format_amount(price.max)} {price.currency or ''}".rstrip()
        )

    if event.url:
        lines.append(f"URL: {event.url}")

    return "\n".join(lines)


def format_venue_as_text(venue: Venue) -> str:
    lines = [f"Venue: {venue.name} (ID: {venue.id})"]

    if venue.address and venue.address.line1:
        lines.append(f"Address: {venue.address.line1}")

    if venue.city and venue.city.name:
        location = [venue.city.name]
        if venue.state and venue.state.stateCode:
            location.append(venue.state.stateCode)
        if venue.country and venue.country.countryCode:
            location.append(venue.country.countryCode)
        lines.append(f"Location: {', '.join(location)}")

    if venue.url:
        lines.append(f"URL: {venue.url}")

    return "\n".join(lines)


def format_attraction_as_text(attraction: Attraction) -> str:
    lines = [f"Attraction: {attraction.name} (ID: {attraction.id})"]

    if attraction.classifications:
        primary = next(
            (c for c in attraction.classifications if c.primary),
            attraction.classifications[0],
        )
        names = [
            ref.name for ref in (primary.segment, primary.genre) if ref and ref.name
        ]
        if names:
            lines.append(f"Classification: {' - '.join(names)}")

    if attraction.url:
        lines.append(f"URL: {attraction.url}")

    return "\n".join(lines)


def format_entity_as_text(entity: PartnerEntity) -> str:
    if isinstance(entity, Event):
        return format_event_as_text(entity)
    if isinstance(entity, Venue):
        return format_venue_as_text(entity)
    if isinstance(entity, Attraction):
        return format_attraction_as_text(entity)
    raise TypeError(f"Unsupported entity type: {type(entity).__name__}")


def format_as_text(body: Any, kind: EntityKind) -> str:
    """Project a search or lookup response onto text.

    Search responses carry one list under ``_embedded``; events, venues and
    attractions are checked in that order and the first list found is used.
    A response without ``_embedded`` is a single record of ``kind``.
    """
    text = ""
    if isinstance(body, dict) and body.get("_embedded") is not None:
        embedded = body["_embedded"]
        for key, embedded_kind in EMBEDDED_KEYS:
            records = embedded.get(key)
            if records is None:
                continue
            projections: List[str] = [
                format_entity_as_text(parse_entity(embedded_kind, record))
                for record in records
            ]
            text = RESULT_SEPARATOR.join(projections)
            break
    elif isinstance(body, dict) and body:
        text = format_entity_as_text(parse_entity(kind, body))
    return text or NO_RESULTS


def format_as_json(body: Any) -> str:
    return json.dumps(body, indent=2, ensure_ascii=False)


def format_results(body: Any, output_format: str, kind: EntityKind) -> str:
    if output_format == "text":
        return format_as_text(body, kind)
    return format_as_json(body)


__all__ = [
    "NO_RESULTS",
    "RESULT_SEPARATOR",
    "format_as_json",
    "format_as_text",
    "format_attraction_as_text",
    "format_entity_as_text",
    "format_event_as_text",
    "format_results",
    "format_venue_as_text",
]
