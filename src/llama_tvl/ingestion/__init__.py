"""DeFi Llama data ingestion: HTTP fetcher and domain client."""

from llama_tvl.ingestion.base import Fetcher, HttpFetcher, build_url
from llama_tvl.ingestion.defillama import DeFiLlamaClient

__all__ = [
    "DeFiLlamaClient",
    "Fetcher",
    "HttpFetcher",
    "build_url",
]
