"""Data source gateway - uniform read access to the control-plane API.

Every read goes through ``DataSourceGateway.fetch``. A non-success response,
a transport failure and an undecodable body all come back as ``None``; that
absence value is the only error signal callers see.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from envlens.constants.defaults import API_PREFIX_DEFAULT
from envlens.constants.timeouts import HTTP_CONNECT_TIMEOUT, HTTP_REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


class DataSourceGateway:
    """Thin async wrapper around ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        *,
        api_prefix: str = API_PREFIX_DEFAULT,
        timeout: float = HTTP_REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: Control-plane origin, e.g. ``https://cp.example.com``
            api_prefix: Prefix prepended to every relative path
            timeout: Per-request timeout in seconds
            client: Pre-built client (tests pass one with a mock transport)
        """
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout, connect=min(timeout, HTTP_CONNECT_TIMEOUT)),
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )

    def url_for(self, path: str) -> str:
        """Join ``path`` onto the API prefix."""
        return f"{self.api_prefix}/{path.lstrip('/')}"

    async def fetch(self, path: str, params: dict[str, Any] | None = None) -> Any | None:
        """GET ``path`` and return the decoded JSON body, or ``None``.

        Never raises for HTTP, transport or decoding failures.
        """
        url = self.url_for(path)
        try:
            response = await self._client.get(url, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("GET %s failed: %s", url, exc.__class__.__name__)
            return None

        if not response.is_success:
            logger.debug("GET %s returned HTTP %s", url, response.status_code)
            return None

        try:
            return response.json()
        except ValueError:
            logger.debug("GET %s returned a non-JSON body", url)
            return None

    async def aclose(self) -> None:
        """Close the underlying client if this gateway created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> DataSourceGateway:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
