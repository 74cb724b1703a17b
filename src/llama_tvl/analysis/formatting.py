"""Human-readable rendering of TVL figures."""

import math
from datetime import date, datetime, timezone


def _to_float(num: float | int | str | None) -> float | None:
    if num is None or num == "":
        return None
    try:
        value = float(num)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return value


def format_number(num: float | int | str | None) -> str:
    """Thousands separators, at most two decimals: 1234.5 -> "1,234.5"."""
    value = _to_float(num)
    if not value:
        return "0"
    text = f"{value:,.2f}"
    return text.rstrip("0").rstrip(".")


def format_currency(num: float | int | str | None) -> str:
    """Full dollar amount with two decimals: 1234.5 -> "$1,234.50"."""
    value = _to_float(num)
    if not value:
        return "$0.00"
    return f"${value:,.2f}"


def format_percentage(num: float | int | str | None) -> str:
    """Unsigned percentage with two decimals: 12.345 -> "12.35%"."""
    value = _to_float(num)
    if not value:
        return "0%"
    return f"{value:.2f}%"


def format_timestamp(timestamp: float) -> str:
    """Render UNIX seconds as a UTC date-time string."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def compact_currency(num: float | None) -> str:
    """
    Render a dollar amount with a K/M/B suffix.

    Thresholds use the absolute value; zero, None and NaN render as "$0".

    >>> compact_currency(2_500_000)
    '$2.50M'
    """
    if not num or math.isnan(num):
        return "$0"
    magnitude = abs(num)
    if magnitude >= 1e9:
        return f"${num / 1e9:.2f}B"
    if magnitude >= 1e6:
        return f"${num / 1e6:.2f}M"
    if magnitude >= 1e3:
        return f"${num / 1e3:.2f}K"
    return f"${num:.2f}"


def change_percent(value: float | None) -> str:
    """Signed percentage: 50 -> "+50.00%", -33.333 -> "-33.33%", None -> "N/A"."""
    if value is None or not math.isfinite(value):
        return "N/A"
    value = value or 0.0  # normalise -0.0
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def month_year(value: date | None) -> str:
    """Render a date as "Month Year", e.g. "March 2024"."""
    if value is None:
        return ""
    return value.strftime("%B %Y")


def volatility_rating(value: float) -> str:
    """Qualitative label for a relative volatility figure."""
    if value < 0.1:
        return "Very Low"
    elif value < 0.25:
        return "Low"
    elif value < 0.5:
        return "Moderate"
    elif value < 1:
        return "High"
    return "Very High"
