"""Base HTTP fetcher for the DeFi Llama API."""

from collections.abc import Mapping
from typing import Any, Protocol

import httpx
import structlog

from llama_tvl.config import settings
from llama_tvl.exceptions import DecodeError, HttpStatusError, TransportError

QueryValue = str | int | float | bool


class Fetcher(Protocol):
    """Anything that can GET a decoded JSON document for an endpoint."""

    async def fetch(
        self,
        endpoint: str,
        base_url: str | None = None,
        params: Mapping[str, QueryValue | None] | None = None,
    ) -> Any: ...


def _query_value(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(
    base_url: str,
    endpoint: str,
    params: Mapping[str, QueryValue | None] | None = None,
) -> httpx.URL:
    """
    Join an endpoint path onto a base URL and append query parameters.

    Parameters whose value is None are skipped; the rest are added in
    insertion order.
    """
    url = f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"
    query = [
        (key, _query_value(value))
        for key, value in (params or {}).items()
        if value is not None
    ]
    if query:
        return httpx.URL(url, params=query)
    return httpx.URL(url)


class HttpFetcher:
    """GETs JSON documents over httpx and maps failures to FetchError subclasses."""

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        logger: Any = None,
    ):
        self.base_url = base_url or settings.base_url
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=settings.timeout if timeout is None else timeout
        )
        self.logger = logger or structlog.get_logger().bind(component="HttpFetcher")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self.client.aclose()

    async def fetch(
        self,
        endpoint: str,
        base_url: str | None = None,
        params: Mapping[str, QueryValue | None] | None = None,
    ) -> Any:
        """
        Fetch and decode a JSON document.

        Args:
            endpoint: Path relative to the base URL, e.g. "/protocols"
            base_url: Overrides the configured base URL for this call
            params: Query parameters, None values are dropped

        Returns:
            Decoded JSON payload

        Raises:
            TransportError: The request could not be sent or no response arrived
            HttpStatusError: The response status was not 2xx
            DecodeError: The body was not valid JSON
        """
        url = build_url(base_url or self.base_url, endpoint, params)
        self.logger.debug("Fetching DeFiLlama data", url=str(url))

        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            self.logger.error("Request failed", endpoint=endpoint, error=str(e))
            raise TransportError(str(e), endpoint=endpoint) from e
        except Exception as e:
            self.logger.error("Request failed", endpoint=endpoint, error=str(e))
            raise TransportError(str(e), endpoint=endpoint) from e

        if not response.is_success:
            self.logger.error(
                "DeFiLlama API request failed",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise HttpStatusError(response.status_code, endpoint=endpoint)

        try:
            data = response.json()
        except ValueError as e:
            self.logger.error("Invalid JSON response", endpoint=endpoint, error=str(e))
            raise DecodeError(f"Invalid JSON from {endpoint}: {e}", endpoint=endpoint) from e

        self.logger.debug("Data fetched successfully", endpoint=endpoint)
        return data
