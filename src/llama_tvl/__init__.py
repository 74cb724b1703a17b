"""Async DeFi Llama client with TVL time-series analysis."""

from llama_tvl.exceptions import (
    AnalysisError,
    DecodeError,
    EmptySeriesError,
    FetchError,
    HttpStatusError,
    InvalidShapeError,
    LlamaTVLError,
    TransportError,
)
from llama_tvl.ingestion import DeFiLlamaClient, HttpFetcher

__version__ = "0.1.0"

__all__ = [
    "DeFiLlamaClient",
    "HttpFetcher",
    "LlamaTVLError",
    "FetchError",
    "TransportError",
    "HttpStatusError",
    "DecodeError",
    "AnalysisError",
    "InvalidShapeError",
    "EmptySeriesError",
]
