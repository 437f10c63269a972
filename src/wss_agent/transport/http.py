"""
HTTP transport for the agent service — posts one url-encoded form, returns the body text.
"""

import logging
from typing import Optional

import httpx

from wss_agent.config import DEFAULT_CONNECTION_TIMEOUT_MINUTES, DEFAULT_SERVICE_URL
from wss_agent.errors import TransportError

log = logging.getLogger("wss_agent.transport.http")

APPLICATION_JSON = "application/json"


class HttpClient:
    def __init__(
        self,
        service_url: str = DEFAULT_SERVICE_URL,
        timeout: float = DEFAULT_CONNECTION_TIMEOUT_MINUTES * 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._service_url = service_url
        self._client = httpx.AsyncClient(
            headers={"User-Agent": "wss-agent-client/0.1.0", "Accept": APPLICATION_JSON},
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def service_url(self) -> str:
        return self._service_url

    async def post_form(self, fields: dict[str, str]) -> str:
        """POST ``fields`` as application/x-www-form-urlencoded and return the response text."""
        try:
            log.debug(f"HTTP POST {self._service_url} type={fields.get('type')}")
            resp = await self._client.post(self._service_url, data=fields)
        except httpx.HTTPError as e:
            log.error(f"Request to {self._service_url} failed: {e}")
            raise TransportError(f"Failed to reach service at {self._service_url}: {e}") from e

        log.debug(f"Response: {resp.status_code}")
        if resp.status_code >= 400:
            raise TransportError(f"HTTP {resp.status_code}: {resp.text[:200]}", status_code=resp.status_code)
        return resp.text

    async def close(self) -> None:
        await self._client.aclose()
