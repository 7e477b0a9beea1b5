from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SearchRequest(BaseModel):
    """Arguments accepted by the ``search_tm_partner`` tool.

    ``kind`` is kept as a plain string so an unrecognised value reaches the
    router, which rejects it with a message naming the value.
    """

    kind: str

    keyword: Optional[str] = None
    eventId: Optional[str] = None
    venueId: Optional[str] = None
    attractionId: Optional[str] = None

    startDateTime: Optional[str] = None
    endDateTime: Optional[str] = None
    onsaleStartDateTime: Optional[str] = None
    onsaleEndDateTime: Optional[str] = None

    city: Optional[str] = None
    stateCode: Optional[str] = None
    countryCode: Optional[str] = None
    postalCode: Optional[str] = None
    latlong: Optional[str] = None
    radius: Optional[str] = None
    unit: Optional[Literal["miles", "km"]] = None
    marketId: Optional[str] = None

    classificationName: Optional[List[str]] = None

    size: int = Field(default=20, ge=1, le=200, description="Results per page")
    page: int = Field(default=0, ge=0, description="Page number (0-indexed)")
    sort: Optional[str] = None

    format: Literal["json", "text"] = "json"

    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    @field_validator("classificationName", mode="before")
    @classmethod
    def split_single_classification(cls, value):
        if isinstance(value, str):
            return [value]
        return value
