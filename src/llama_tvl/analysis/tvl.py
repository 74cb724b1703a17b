"""
TVL Analysis Engine

Normalizes raw DeFi Llama TVL series into (timestamp, value) points and
summarizes them by calendar month, calendar year and over the whole series.

Two raw shapes are accepted:
- protocol payloads from /protocol/{id}, whose entries look like
  {"date": 1700000000, "totalLiquidityUSD": 123.4, "tokens": {...}}
- chain series from /v2/historicalChainTvl, entries {"date": ..., "tvl": ...}

All dates are UNIX seconds and bucketed in UTC.
"""

import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from llama_tvl.analysis.statistics import compute_series_stats, percent_change
from llama_tvl.exceptions import EmptySeriesError, InvalidShapeError
from llama_tvl.models.analysis import (
    BucketSummary,
    OverallSummary,
    ProtocolAnalysis,
    ProtocolInfo,
    TVLAnalysis,
    TVLPoint,
)


def _as_number(value: Any) -> float | None:
    """Return value as a finite float, or None for anything else (bools included)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _make_point(date: Any, value: float | None) -> TVLPoint | None:
    seconds = _as_number(date)
    if seconds is None or value is None:
        return None
    try:
        timestamp = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return TVLPoint(timestamp=timestamp, value=value)


def select_protocol_series(payload: Mapping[str, Any]) -> list[Any]:
    """
    Pick the raw TVL series of a protocol payload.

    The series nested under chainTvls for the payload's own chain wins;
    otherwise the top-level "tvl" field is used. A missing series is an
    empty list.

    Raises:
        InvalidShapeError: The payload is not an object or the series is not a list
    """
    if not isinstance(payload, Mapping):
        raise InvalidShapeError("Invalid protocol payload: expected a JSON object")

    series = None
    chain = payload.get("chain")
    chain_tvls = payload.get("chainTvls")
    if isinstance(chain, str) and isinstance(chain_tvls, Mapping):
        nested = chain_tvls.get(chain)
        if isinstance(nested, Mapping):
            series = nested.get("tvl")

    if series is None:
        series = payload.get("tvl")
    if series is None:
        return []

    if not _is_sequence(series):
        raise InvalidShapeError(
            f"Invalid TVL data structure for protocol {payload.get('name') or 'Unknown'}"
        )
    return list(series)


def _protocol_entry_value(entry: Mapping[str, Any]) -> float | None:
    direct = entry.get("totalLiquidityUSD")
    if direct is not None:
        return _as_number(direct)

    tokens = entry.get("tokens")
    if isinstance(tokens, Mapping) and tokens:
        # First token quantity stands in for liquidity
        return _as_number(next(iter(tokens.values())))
    return None


def extract_protocol_points(payload: Mapping[str, Any]) -> list[TVLPoint]:
    """Normalize a protocol payload's TVL series, dropping invalid entries."""
    points = []
    for entry in select_protocol_series(payload):
        if not isinstance(entry, Mapping):
            continue
        point = _make_point(entry.get("date"), _protocol_entry_value(entry))
        if point is not None:
            points.append(point)
    return points


def extract_chain_points(data: Sequence[Any]) -> list[TVLPoint]:
    """
    Normalize a historical chain TVL series, dropping invalid entries.

    Raises:
        InvalidShapeError: data is not a list
    """
    if not _is_sequence(data):
        raise InvalidShapeError("Invalid TVL data structure for chain: expected a list")

    points = []
    for entry in data:
        if not isinstance(entry, Mapping):
            continue
        point = _make_point(entry.get("date"), _as_number(entry.get("tvl")))
        if point is not None:
            points.append(point)
    return points


def _summarize_buckets(values: pd.Series, keys: pd.Series) -> list[BucketSummary]:
    summaries = []
    for key, group in values.groupby(keys, sort=False):
        bucket = group.to_numpy()
        stats = compute_series_stats(bucket)
        start_value = float(bucket[0])
        end_value = float(bucket[-1])
        summaries.append(
            BucketSummary(
                key=key if isinstance(key, str) else int(key),
                average=stats.average,
                minimum=stats.minimum,
                maximum=stats.maximum,
                start_value=start_value,
                end_value=end_value,
                percent_change=percent_change(start_value, end_value),
                count=len(bucket),
            )
        )
    return summaries


def analyze_points(points: Sequence[TVLPoint], label: str = "series") -> TVLAnalysis:
    """
    Summarize normalized TVL points by month, year and overall.

    Points are stably sorted by timestamp first, so bucket start/end values
    are the chronologically first/last ones even for unordered input.

    Args:
        points: Normalized points, at least one
        label: Used in the error message when points is empty

    Returns:
        TVLAnalysis with buckets in chronological order

    Raises:
        EmptySeriesError: No points were given
    """
    if not points:
        raise EmptySeriesError(f"No valid TVL data found for {label}")

    frame = pd.DataFrame(
        {
            "timestamp": [point.timestamp for point in points],
            "value": [point.value for point in points],
        }
    )
    frame = frame.sort_values("timestamp", kind="mergesort", ignore_index=True)

    month_keys = frame["timestamp"].dt.strftime("%Y-%m")
    year_keys = frame["timestamp"].dt.year

    values = frame["value"].to_numpy()
    stats = compute_series_stats(values)
    start_value = float(values[0])
    current_value = float(values[-1])

    return TVLAnalysis(
        by_month=_summarize_buckets(frame["value"], month_keys),
        by_year=_summarize_buckets(frame["value"], year_keys),
        overall=OverallSummary(
            average=stats.average,
            minimum=stats.minimum,
            maximum=stats.maximum,
            start_value=start_value,
            current_value=current_value,
            percent_change=percent_change(start_value, current_value),
            volatility=stats.volatility,
        ),
        point_count=len(frame),
    )


def analyze_protocol(payload: Mapping[str, Any]) -> ProtocolAnalysis:
    """
    Analyze a raw /protocol/{id} payload.

    Raises:
        InvalidShapeError: The selected TVL series is not a list
        EmptySeriesError: No valid point survived filtering
    """
    points = extract_protocol_points(payload)
    info = ProtocolInfo.from_payload(payload)
    return ProtocolAnalysis(
        info=info,
        tvl_analysis=analyze_points(points, label=f"protocol {info.name}"),
    )


def analyze_chain(data: Sequence[Any], chain: str | None = None) -> TVLAnalysis:
    """
    Analyze a raw /v2/historicalChainTvl series.

    Args:
        data: Raw series as returned by the API
        chain: Chain name, only used in error messages

    Raises:
        InvalidShapeError: data is not a list
        EmptySeriesError: No valid point survived filtering
    """
    points = extract_chain_points(data)
    return analyze_points(points, label=f"chain {chain}" if chain else "chain")
