"""
DeFi Llama API Client

Fetches protocol and chain TVL data from DeFi Llama and optionally runs it
through the TVL analysis engine.
API Docs: https://defillama.com/docs/api
"""

from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from llama_tvl.analysis.report import format_chain_analysis, format_protocol_analysis
from llama_tvl.analysis.tvl import analyze_chain, analyze_protocol
from llama_tvl.exceptions import DecodeError
from llama_tvl.ingestion.base import Fetcher, HttpFetcher
from llama_tvl.models.analysis import (
    FormattedChainAnalysis,
    FormattedProtocolAnalysis,
    ProtocolAnalysis,
    TVLAnalysis,
)
from llama_tvl.models.responses import Chain, Protocol

_protocols_adapter = TypeAdapter(list[Protocol])
_chains_adapter = TypeAdapter(list[Chain])


class DeFiLlamaClient:
    """Client for DeFi Llama API."""

    def __init__(
        self,
        fetcher: Fetcher | None = None,
        *,
        base_url: str | None = None,
        logger: Any = None,
    ):
        """
        Args:
            fetcher: Transport used for every request; an HttpFetcher is
                created when omitted
            base_url: Overrides the configured API base URL
            logger: structlog-style logger, defaults to a bound global one
        """
        self.logger = logger or structlog.get_logger().bind(component="DeFiLlamaClient")
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or HttpFetcher(base_url=base_url, logger=logger)
        self.base_url = base_url

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the underlying fetcher if this client created it."""
        if self._owns_fetcher:
            await self.fetcher.close()

    async def _get(self, endpoint: str) -> Any:
        return await self.fetcher.fetch(endpoint, base_url=self.base_url)

    async def get_protocols(self) -> list[Protocol]:
        """Get all protocols listed on DeFi Llama."""
        self.logger.debug("Getting all protocols")
        data = await self._get("/protocols")
        try:
            return _protocols_adapter.validate_python(data)
        except ValidationError as e:
            raise DecodeError(f"Unexpected /protocols payload: {e}", endpoint="/protocols") from e

    async def get_protocol_tvl(
        self, protocol: str, formatted: bool = False
    ) -> dict[str, Any] | FormattedProtocolAnalysis:
        """
        Get TVL data for a specific protocol.

        Args:
            protocol: Protocol slug, e.g. "aave"
            formatted: Return the formatted analysis instead of the raw payload
        """
        self.logger.debug("Getting TVL data for protocol", protocol=protocol)
        data = await self._get(f"/protocol/{protocol}")
        if not formatted:
            return data
        return format_protocol_analysis(data)

    async def analyze_protocol(self, protocol: str) -> ProtocolAnalysis:
        """Fetch a protocol and return its numeric TVL analysis."""
        data = await self.get_protocol_tvl(protocol)
        return analyze_protocol(data)

    async def get_current_protocol_tvl(self, protocol: str) -> float:
        """Get current TVL for a specific protocol."""
        self.logger.debug("Getting current TVL for protocol", protocol=protocol)
        endpoint = f"/tvl/{protocol}"
        data = await self._get(endpoint)
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise DecodeError(f"Unexpected {endpoint} payload: {data!r}", endpoint=endpoint)
        return float(data)

    async def get_chains(self) -> list[Chain]:
        """Get all chains tracked by DeFi Llama."""
        self.logger.debug("Getting all chains")
        data = await self._get("/v2/chains")
        try:
            return _chains_adapter.validate_python(data)
        except ValidationError as e:
            raise DecodeError(f"Unexpected /v2/chains payload: {e}", endpoint="/v2/chains") from e

    async def get_historical_chain_tvl(
        self, chain: str | None = None, formatted: bool = False
    ) -> list[dict[str, Any]] | FormattedChainAnalysis:
        """
        Get historical TVL for one chain, or for all chains combined.

        Args:
            chain: Chain name, e.g. "Ethereum"; omitted for the DeFi total
            formatted: Return the formatted analysis instead of the raw series
        """
        self.logger.debug("Getting historical TVL data", chain=chain)
        endpoint = f"/v2/historicalChainTvl/{chain}" if chain else "/v2/historicalChainTvl"
        data = await self._get(endpoint)
        if not formatted:
            return data
        return format_chain_analysis(data, chain)

    async def analyze_chain(self, chain: str | None = None) -> TVLAnalysis:
        """Fetch a chain's history and return its numeric TVL analysis."""
        data = await self.get_historical_chain_tvl(chain)
        return analyze_chain(data, chain)
