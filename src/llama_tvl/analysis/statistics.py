"""Summary statistics for TVL value lists."""

from collections.abc import Sequence

import numpy as np

from llama_tvl.models.analysis import SeriesStats


def compute_series_stats(values: Sequence[float] | np.ndarray) -> SeriesStats:
    """
    Compute mean, min, max and volatility of a list of TVL values.

    Volatility is the population standard deviation (divides by n, not n-1).
    An empty input yields zeros for every field.

    Args:
        values: TVL values, any order

    Returns:
        SeriesStats as plain Python floats
    """
    data = np.asarray(values, dtype=float)

    if data.size == 0:
        return SeriesStats(average=0.0, minimum=0.0, maximum=0.0, volatility=0.0)

    minimum = float(np.min(data))
    maximum = float(np.max(data))
    # Summation error can push the mean of equal values past the extremes
    average = min(max(float(np.mean(data)), minimum), maximum)

    return SeriesStats(
        average=average,
        minimum=minimum,
        maximum=maximum,
        volatility=float(np.std(data, ddof=0)),
    )


def percent_change(start: float, end: float) -> float | None:
    """Relative change from start to end in percent; None when start is zero."""
    if start == 0:
        return None
    return (end - start) / start * 100
