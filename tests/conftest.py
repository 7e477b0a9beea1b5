import os

os.environ.setdefault("TM_PARTNER_API_KEY", "test-key")
os.environ.setdefault("TM_PARTNER_API_SECRET", "test-secret")

import httpx
import pytest

from tm_partner_mcp.config import Settings
from tm_partner_mcp.core.services.partner_client import PartnerAPIClient
from tm_partner_mcp.core.services.search_router import SearchRouter


class FakePartnerAPI:
    """Records requests and answers them from a path -> response table."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, tuple[int, dict]] = {}

    def add(self, path: str, status_code: int = 200, **kwargs) -> None:
        self.routes[path] = (status_code, kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/partners/v2")
        if path in self.routes:
            status_code, kwargs = self.routes[path]
            return httpx.Response(status_code, **kwargs)
        return httpx.Response(404, json={"message": "no route"})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def settings():
    return Settings(
        TM_PARTNER_API_KEY="test-key",
        TM_PARTNER_API_SECRET="test-secret",
        _env_file=None,
    )


@pytest.fixture
def partner_api():
    return FakePartnerAPI()


@pytest.fixture
def client(settings, partner_api):
    return PartnerAPIClient(settings, transport=httpx.MockTransport(partner_api.handler))


@pytest.fixture
def router(settings, client):
    return SearchRouter(settings, client)
