"""HTTP client for the relay read path."""

from typing import Any, Optional

import httpx

DASHBOARD_RELAY_PATH = "/api/v1/dashboard-webhook-proxy"
CONSUMER_RELAY_PATH = "/api/v1/consumer-dashboard"


class RelayClient:
    """Reads the latest relay record over HTTP.

    Config:
        base_url: Where the relay is served
        path: Relay entry point (business or consumer)
        timeout: Seconds per request
        transport: Optional httpx transport (e.g. ASGITransport in tests)
    """

    def __init__(
        self,
        base_url: str,
        path: str = DASHBOARD_RELAY_PATH,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.path = path
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    async def fetch(self) -> dict[str, Any]:
        """GET the relay and return its JSON body.

        Raises:
            httpx.HTTPError: On network failure, timeout or non-2xx status
            ValueError: If the body is not a JSON object
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(self.url)
            response.raise_for_status()
            body = response.json()
        if not isinstance(body, dict):
            raise ValueError("Relay response is not a JSON object")
        return body
