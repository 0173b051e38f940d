"""
TrackLens - Utility Functions
Common helpers shared by the loader, the pipeline and the charts.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np
import pandas as pd


# ---------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------
def is_finite_number(value: Any) -> bool:
    """True for real, finite numbers (bools excluded)."""
    if isinstance(value, bool) or value is None:
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def finite_values(values: Iterable[Any]) -> List[float]:
    """Keep only finite numbers, as floats, in input order."""
    return [float(v) for v in values if is_finite_number(v)]


def safe_to_numeric(series: pd.Series, downcast: Optional[str] = None) -> pd.Series:
    """
    Convert Series to numeric; non-convertible values become NaN.
    Infinite values are mapped to NaN as well.
    """
    s = pd.to_numeric(series, errors="coerce", downcast=downcast)
    return s.replace([np.inf, -np.inf], np.nan)


# ---------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------
def clean_column_names(df: pd.DataFrame) -> pd.DataFrame:
    """Trim column names and strip a leading byte-order mark."""
    out = df.copy()
    out.columns = [str(c).replace("\ufeff", "").strip() for c in out.columns]
    return out


def df_overview(df: pd.DataFrame) -> Dict[str, Any]:
    """Compact overview of a DataFrame (useful for logs/UI)."""
    return {
        "shape": df.shape,
        "columns": df.columns.tolist(),
        "missing_pct": float(df.isna().sum().sum() / df.size * 100) if df.size else 0.0,
    }


# ---------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------
def format_number(value: Union[int, float], decimals: int = 2) -> str:
    """Format number with thousands separator; NaN renders as 'n/a'."""
    if not is_finite_number(value):
        return "n/a"
    if isinstance(value, int) or float(value).is_integer():
        return f"{int(value):,}"
    return f"{float(value):,.{decimals}f}"


def format_percentage(value: float, decimals: int = 1) -> str:
    """Format a fraction (0-1) as a percentage."""
    if not is_finite_number(value):
        return "n/a"
    return f"{float(value) * 100:.{decimals}f}%"


def format_duration_ms(value: float) -> str:
    """Format milliseconds as m:ss."""
    if not is_finite_number(value) or value < 0:
        return "n/a"
    total_seconds = int(round(float(value) / 1000.0))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def ms_to_minutes(value: float) -> float:
    """Milliseconds to minutes; NaN stays NaN."""
    return float(value) / 60_000.0 if is_finite_number(value) else math.nan
