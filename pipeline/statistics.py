# pipeline/statistics.py
"""
TrackLens - Summary Statistics
Mean, Pearson correlation, extent and histogram over small numeric series.

Degenerate inputs never raise: they return NaN (or an empty result), which
the charts render as a neutral/undefined state.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from core.utils import finite_values, is_finite_number

__all__ = ["mean", "pearson", "extent", "histogram"]


def mean(values: Sequence[float]) -> float:
    """sum / count; NaN for an empty series."""
    if len(values) == 0:
        return math.nan
    return float(sum(values)) / len(values)


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Pearson correlation with population moments (divide by n, not n-1).

        r = cov(X, Y) / (std(X) * std(Y))

    Returns NaN when the series differ in length, have fewer than two
    points, contain non-finite values, or either one is constant.
    """
    if len(xs) != len(ys) or len(xs) < 2:
        return math.nan
    if not all(is_finite_number(v) for v in xs) or not all(is_finite_number(v) for v in ys):
        return math.nan

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    # Spread is exact here; float moments of a constant series can be ~1e-17
    if np.ptp(x) == 0.0 or np.ptp(y) == 0.0:
        return math.nan

    dx = x - x.mean()
    dy = y - y.mean()

    std_x = float(np.sqrt(np.mean(dx * dx)))
    std_y = float(np.sqrt(np.mean(dy * dy)))
    if std_x == 0.0 or std_y == 0.0:
        return math.nan

    r = float(np.mean(dx * dy)) / (std_x * std_y)
    return max(-1.0, min(1.0, r))


def extent(values: Sequence[float]) -> Optional[Tuple[float, float]]:
    """(min, max) over finite values; None when there are none."""
    clean = finite_values(values)
    if not clean:
        return None
    return min(clean), max(clean)


def histogram(
    values: Sequence[float],
    bins: int,
    domain: Optional[Tuple[float, float]] = None,
) -> List[int]:
    """
    Equal-width bin counts over `domain` (defaults to the data extent).

    Values outside the domain are ignored; the top edge is inclusive. A
    zero-width domain puts every in-domain value in the first bin.
    """
    if bins <= 0:
        raise ValueError("bins must be positive")

    clean = finite_values(values)
    counts = [0] * bins
    if not clean:
        return counts

    low, high = domain if domain is not None else (min(clean), max(clean))
    width = (high - low) / bins

    for v in clean:
        if v < low or v > high:
            continue
        if width == 0:
            counts[0] += 1
            continue
        idx = min(int((v - low) / width), bins - 1)
        counts[idx] += 1
    return counts
