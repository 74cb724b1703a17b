"""Data models for API responses and TVL analyses."""

from llama_tvl.models.analysis import (
    BucketSummary,
    FormattedChainAnalysis,
    FormattedProtocolAnalysis,
    OverallSummary,
    ProtocolAnalysis,
    ProtocolInfo,
    SeriesStats,
    TVLAnalysis,
    TVLPoint,
)
from llama_tvl.models.responses import Chain, Protocol

__all__ = [
    "BucketSummary",
    "Chain",
    "FormattedChainAnalysis",
    "FormattedProtocolAnalysis",
    "OverallSummary",
    "Protocol",
    "ProtocolAnalysis",
    "ProtocolInfo",
    "SeriesStats",
    "TVLAnalysis",
    "TVLPoint",
]
