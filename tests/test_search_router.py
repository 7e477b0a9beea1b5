import pytest

from tm_partner_mcp.core.services.search_router import plan
from tm_partner_mcp.shared.exceptions import InvalidArgumentError
from tm_partner_mcp.shared.schemas.partner import EntityKind
from tm_partner_mcp.shared.schemas.search_params import SearchRequest


def test_event_id_fetches_single_event_without_filters():
    request = SearchRequest(
        kind="event",
        eventId="G5vYZ9",
        keyword="jazz",
        city="Chicago",
        classificationName=["Music"],
        size=50,
    )
    call = plan(request)
    assert call.kind is EntityKind.EVENT
    assert call.is_lookup
    assert call.path == "/events/G5vYZ9"
    assert call.params == {}


def test_event_search_forwards_event_filters():
    request = SearchRequest(
        kind="event",
        keyword="jazz",
        attractionId="K8vZ91",
        venueId="KovZpZ",
        postalCode="60601",
        latlong="41.88,-87.63",
        radius="25",
        unit="miles",
        startDateTime="2026-11-01T00:00:00Z",
        endDateTime="2026-11-30T23:59:59Z",
        sort="date,asc",
        city="Chicago",
        countryCode="US",
        stateCode="IL",
        classificationName=["Music", "Jazz"],
    )
    call = plan(request)
    assert not call.is_lookup
    assert call.path == "/events"
    assert call.params == {
        "keyword": "jazz",
        "attractionId": "K8vZ91",
        "venueId": "KovZpZ",
        "postalCode": "60601",
        "latlong": "41.88,-87.63",
        "radius": "25",
        "unit": "miles",
        "startDateTime": "2026-11-01T00:00:00Z",
        "endDateTime": "2026-11-30T23:59:59Z",
        "size": 20,
        "page": 0,
        "sort": "date,asc",
        "city": "Chicago",
        "countryCode": "US",
        "stateCode": "IL",
        "classificationName": ["Music", "Jazz"],
    }


def test_event_search_forwards_market_and_onsale_window_when_given():
    request = SearchRequest(
        kind="event",
        marketId="7",
        onsaleStartDateTime="2026-10-01T00:00:00Z",
        onsaleEndDateTime="2026-10-31T00:00:00Z",
    )
    call = plan(request)
    assert call.params["marketId"] == "7"
    assert call.params["onsaleStartDateTime"] == "2026-10-01T00:00:00Z"
    assert call.params["onsaleEndDateTime"] == "2026-10-31T00:00:00Z"


def test_venue_id_alone_fetches_single_venue():
    call = plan(SearchRequest(kind="venue", venueId="KovZpZAEdFtJ", city="Boston"))
    assert call.is_lookup
    assert call.path == "/venues/KovZpZAEdFtJ"
    assert call.params == {}


def test_venue_id_with_keyword_searches_and_drops_id():
    call = plan(SearchRequest(kind="venue", venueId="KovZpZAEdFtJ", keyword="garden"))
    assert not call.is_lookup
    assert call.path == "/venues"
    assert call.params["keyword"] == "garden"
    assert "venueId" not in call.params


def test_venue_search_ignores_event_only_filters():
    request = SearchRequest(
        kind="venue",
        keyword="arena",
        stateCode="NY",
        startDateTime="2026-11-01T00:00:00Z",
        classificationName=["Sports"],
        attractionId="K8vZ91",
    )
    call = plan(request)
    assert call.params == {
        "keyword": "arena",
        "size": 20,
        "page": 0,
        "stateCode": "NY",
    }


def test_attraction_id_alone_fetches_single_attraction():
    call = plan(SearchRequest(kind="attraction", attractionId="K8vZ917Gku7"))
    assert call.is_lookup
    assert call.path == "/attractions/K8vZ917Gku7"


def test_attraction_id_with_keyword_searches_and_drops_id():
    request = SearchRequest(
        kind="attraction",
        attractionId="K8vZ917Gku7",
        keyword="phish",
        classificationName=["Rock"],
        city="Denver",
        page=2,
        size=5,
    )
    call = plan(request)
    assert call.path == "/attractions"
    assert call.params == {
        "keyword": "phish",
        "size": 5,
        "page": 2,
        "classificationName": ["Rock"],
    }


def test_lookup_id_is_path_escaped():
    call = plan(SearchRequest(kind="event", eventId="a/b c"))
    assert call.path == "/events/a%2Fb%20c"


@pytest.mark.parametrize("kind", ["bogus", "Event", "", "events"])
def test_unknown_kind_is_invalid_argument(kind):
    with pytest.raises(InvalidArgumentError) as excinfo:
        plan(SearchRequest(kind=kind))
    assert f"Invalid search type: {kind}." in excinfo.value.message


@pytest.mark.asyncio
async def test_unknown_kind_makes_no_network_call(router, partner_api):
    with pytest.raises(InvalidArgumentError, match="bogus"):
        await router.fetch(SearchRequest(kind="bogus", keyword="x"))
    assert partner_api.requests == []


@pytest.mark.asyncio
async def test_fetch_issues_exactly_one_request(router, partner_api):
    partner_api.add("/venues", json={"_embedded": {"venues": []}})
    call, body = await router.fetch(
        SearchRequest(kind="venue", keyword="garden", venueId="KovZpZ")
    )
    assert len(partner_api.requests) == 1
    assert partner_api.last.url.params.get("keyword") == "garden"
    assert "venueId" not in partner_api.last.url.params
    assert body == {"_embedded": {"venues": []}}
    assert call.path == "/venues"
