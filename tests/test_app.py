import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport

from main import create_app


@pytest.fixture
def app(settings, router):
    return create_app(settings=settings, router=router)


@pytest_asyncio.fixture
async def api(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with LifespanManager(app):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest.mark.asyncio
async def test_tools_route_lists_search_tool(api):
    resp = await api.get("/tools")
    assert resp.status_code == 200
    tools = resp.json()["tools"]
    assert [t["name"] for t in tools] == ["search_tm_partner"]
    assert tools[0]["category"] == "search"


@pytest.mark.asyncio
async def test_search_route_returns_text_content(api, partner_api):
    partner_api.add(
        "/venues",
        json={"_embedded": {"venues": [{"id": "V1", "name": "One"}, {"id": "V2", "name": "Two"}]}},
    )
    resp = await api.post(
        "/search_tm_partner", json={"kind": "venue", "keyword": "hall", "format": "text"}
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "content": [
            {"type": "text", "text": "Venue: One (ID: V1)\n\n---\n\nVenue: Two (ID: V2)"}
        ]
    }
    assert resp.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_search_route_echoes_correlation_id(api, partner_api):
    partner_api.add("/events/E1", json={"id": "E1", "name": "Show"})
    resp = await api.post(
        "/search_tm_partner",
        json={"kind": "event", "eventId": "E1"},
        headers={"X-Request-ID": "abc123"},
    )
    assert resp.status_code == 200
    assert resp.headers["X-Request-ID"] == "abc123"
    assert resp.headers["X-Correlation-ID"] == "abc123"


@pytest.mark.asyncio
async def test_search_route_schema_errors(api):
    resp = await api.post("/search_tm_partner", json={"kind": "event", "size": "many"})
    assert resp.status_code == 422
    assert "Schema validation error" in resp.json()["detail"]

    resp = await api.post("/search_tm_partner", json={"kind": "event", "extra": 1})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Unexpected parameters: extra"

    resp = await api.post("/search_tm_partner", json={})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_upstream_rejection_maps_to_error_response(api, partner_api):
    partner_api.add("/events/missing", 404, json={"message": "not found"})
    resp = await api.post("/search_tm_partner", json={"kind": "event", "eventId": "missing"})
    assert resp.status_code == 502
    data = resp.json()
    assert data["error_code"] == "UPSTREAM_REJECTED"
    assert data["message"] == "Ticketmaster Partner API error: 404 - not found"
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_unreachable_upstream_maps_to_gateway_timeout(settings):
    from tm_partner_mcp.core.services.partner_client import PartnerAPIClient
    from tm_partner_mcp.core.services.search_router import SearchRouter

    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    router = SearchRouter(settings, PartnerAPIClient(settings, transport=httpx.MockTransport(handler)))
    app = create_app(settings=settings, router=router)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with LifespanManager(app):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/search_tm_partner", json={"kind": "attraction", "keyword": "x"})
    assert resp.status_code == 504
    assert resp.json()["error_code"] == "UPSTREAM_UNREACHABLE"


def test_health_ok(app):
    with TestClient(app) as client:
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert set(data.keys()) == {"status", "timestamp", "version", "uptime", "checks"}
        assert data["status"] == "healthy"
        assert data["checks"]["upstream"]["base_url"] == "https://app.ticketmaster.com/partners/v2"

        resp = client.get("/health/mcp")
        assert resp.json()["tools"] == ["search_tm_partner"]

        resp = client.get("/")
        assert resp.json()["status"] == "running"


@pytest.mark.asyncio
async def test_tool_route_unavailable_before_startup(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.post("/search_tm_partner", json={"kind": "event"})
    assert resp.status_code == 503


@pytest.mark.asyncio
async def test_unknown_kind_is_invalid_argument(api, partner_api):
    resp = await api.post("/search_tm_partner", json={"kind": "bogus"})
    assert resp.status_code == 400
    data = resp.json()
    assert data["error_code"] == "INVALID_ARGUMENT"
    assert data["message"] == (
        "Invalid search type: bogus. Must be 'event', 'venue', or 'attraction'."
    )
    assert partner_api.requests == []
