"""HTTP client for the Ticketmaster Partner API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from tm_partner_mcp.config import Settings
from tm_partner_mcp.shared.exceptions import (
    UpstreamRejectedError,
    UpstreamUnreachableError,
)

logger = logging.getLogger(__name__)


def _clean_params(params: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


def _rejection_reason(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return resp.reason_phrase


class PartnerAPIClient:
    """Issues GET requests against a fixed base URL with fixed credentials.

    A new :class:`httpx.AsyncClient` is opened for every call so the client
    holds no connection state between tool invocations.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = settings.TM_PARTNER_BASE_URL
        self._auth = httpx.BasicAuth(
            settings.TM_PARTNER_API_KEY, settings.TM_PARTNER_API_SECRET
        )
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {
            "base_url": self.base_url,
            "auth": self._auth,
            "headers": {"Accept": "application/json"},
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Fetch ``path`` and return the decoded JSON body."""
        query = _clean_params(params or {})
        async with self._client() as client:
            try:
                resp = await client.get(path, params=query)
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "Partner API rejected %s with status %s",
                    path,
                    exc.response.status_code,
                )
                raise UpstreamRejectedError(
                    exc.response.status_code,
                    _rejection_reason(exc.response),
                    details=exc.response.text or None,
                ) from exc
            except httpx.RequestError as exc:
                logger.exception("Request error calling Partner API %s: %s", path, exc)
                raise UpstreamUnreachableError(details=str(exc) or None) from exc
            return resp.json()


__all__ = ["PartnerAPIClient"]
