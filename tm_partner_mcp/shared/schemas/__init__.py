from .partner import (
    Attraction,
    EntityKind,
    Event,
    PartnerEntity,
    Venue,
    parse_entity,
)
from .search_params import SearchRequest

__all__ = [
    "Attraction",
    "EntityKind",
    "Event",
    "PartnerEntity",
    "SearchRequest",
    "Venue",
    "parse_entity",
]
