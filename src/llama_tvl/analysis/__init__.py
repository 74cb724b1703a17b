"""TVL analysis: normalization, bucketing, statistics and formatting."""

from llama_tvl.analysis.formatting import (
    change_percent,
    compact_currency,
    format_currency,
    format_number,
    format_percentage,
    format_timestamp,
    month_year,
    volatility_rating,
)
from llama_tvl.analysis.report import (
    format_chain_analysis,
    format_protocol_analysis,
    format_protocol_info,
    format_tvl_analysis,
)
from llama_tvl.analysis.statistics import compute_series_stats, percent_change
from llama_tvl.analysis.tvl import (
    analyze_chain,
    analyze_points,
    analyze_protocol,
    extract_chain_points,
    extract_protocol_points,
    select_protocol_series,
)

__all__ = [
    # Engine
    "analyze_chain",
    "analyze_points",
    "analyze_protocol",
    "extract_chain_points",
    "extract_protocol_points",
    "select_protocol_series",
    "compute_series_stats",
    "percent_change",
    # Formatted views
    "format_chain_analysis",
    "format_protocol_analysis",
    "format_protocol_info",
    "format_tvl_analysis",
    # Formatters
    "change_percent",
    "compact_currency",
    "format_currency",
    "format_number",
    "format_percentage",
    "format_timestamp",
    "month_year",
    "volatility_rating",
]
