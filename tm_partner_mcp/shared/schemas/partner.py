"""Read-only records returned by the Ticketmaster Partner API."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EntityKind(str, Enum):
    EVENT = "event"
    VENUE = "venue"
    ATTRACTION = "attraction"


class _PartnerModel(BaseModel):
    model_config = ConfigDict(
        extra="allow", populate_by_name=True, coerce_numbers_to_str=True
    )


class Image(_PartnerModel):
    url: Optional[str] = None
    width: Any = None
    height: Any = None
    fallback: Any = None


class NamedRef(_PartnerModel):
    id: Optional[str] = None
    name: Optional[str] = None


class City(_PartnerModel):
    name: Optional[str] = None


class State(_PartnerModel):
    name: Optional[str] = None
    stateCode: Optional[str] = None


class Country(_PartnerModel):
    name: Optional[str] = None
    countryCode: Optional[str] = None


class Address(_PartnerModel):
    line1: Optional[str] = None
    line2: Optional[str] = None


class Location(_PartnerModel):
    latitude: Optional[str] = None
    longitude: Optional[str] = None


class StartDate(_PartnerModel):
    localDate: Optional[str] = None
    localTime: Optional[str] = None
    dateTime: Optional[str] = None


class EventStatus(_PartnerModel):
    code: Optional[str] = None


class EventDates(_PartnerModel):
    start: Optional[StartDate] = None
    timezone: Optional[str] = None
    status: Optional[EventStatus] = None


class SaleWindow(_PartnerModel):
    startDateTime: Optional[str] = None
    endDateTime: Optional[str] = None


class EventSales(_PartnerModel):
    public: Optional[SaleWindow] = None


class PriceRange(_PartnerModel):
    type: Optional[str] = None
    currency: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None


class Classification(_PartnerModel):
    primary: Optional[bool] = None
    segment: Optional[NamedRef] = None
    genre: Optional[NamedRef] = None
    subGenre: Optional[NamedRef] = None


class Venue(_PartnerModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: str = EntityKind.VENUE.value
    url: Optional[str] = None
    locale: Optional[str] = None
    timezone: Optional[str] = None
    city: Optional[City] = None
    state: Optional[State] = None
    country: Optional[Country] = None
    address: Optional[Address] = None
    location: Optional[Location] = None


class Attraction(_PartnerModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: str = EntityKind.ATTRACTION.value
    url: Optional[str] = None
    locale: Optional[str] = None
    images: List[Image] = Field(default_factory=list)
    classifications: List[Classification] = Field(default_factory=list)


class EventEmbedded(_PartnerModel):
    venues: List[Venue] = Field(default_factory=list)
    attractions: List[Attraction] = Field(default_factory=list)


class Event(_PartnerModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: str = EntityKind.EVENT.value
    url: Optional[str] = None
    locale: Optional[str] = None
    images: List[Image] = Field(default_factory=list)
    dates: Optional[EventDates] = None
    sales: Optional[EventSales] = None
    priceRanges: List[PriceRange] = Field(default_factory=list)
    embedded: Optional[EventEmbedded] = Field(default=None, alias="_embedded")


PartnerEntity = Union[Event, Venue, Attraction]

ENTITY_MODELS = {
    EntityKind.EVENT: Event,
    EntityKind.VENUE: Venue,
    EntityKind.ATTRACTION: Attraction,
}

# Key each kind is listed under inside a search response's ``_embedded`` block,
# in the order they are checked.
EMBEDDED_KEYS = (
    ("events", EntityKind.EVENT),
    ("venues", EntityKind.VENUE),
    ("attractions", EntityKind.ATTRACTION),
)


def parse_entity(kind: EntityKind, data: dict) -> PartnerEntity:
    """Validate a raw upstream record as the model for ``kind``."""
    return ENTITY_MODELS[kind].model_validate(data)
