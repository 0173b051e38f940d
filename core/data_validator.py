# core/data_validator.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  TrackLens - Dataset Validator                                            ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Required Column Check                                                 ║
║  ✓ Numeric Coercion Report                                               ║
║  ✓ Range Checks (popularity 0-100, positive durations, followers)         ║
║  ✓ Genre Coverage                                                        ║
╚════════════════════════════════════════════════════════════════════════════╝

Produces a report; never mutates or repairs the frame. Missing columns are
errors, everything row-level is a warning (those rows are simply filtered
out by the views that need the affected measure).

Usage:
```python
    from core.data_loader import get_record_loader
    from core.data_validator import DataValidator

    df = get_record_loader().read_frame("data/spotify_tracks.csv")
    result = DataValidator().validate(df)
    if not result.is_valid:
        print(result.errors)
```
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
from loguru import logger
from pydantic import BaseModel, Field

from config.constants import (
    COL_ARTIST_FOLLOWERS,
    COL_ARTIST_GENRES,
    COL_ARTIST_POPULARITY,
    COL_TRACK_DURATION_MS,
    COL_TRACK_POPULARITY,
    NUMERIC_COLUMNS,
    POPULARITY_RANGE,
    REQUIRED_COLUMNS,
)
from core.schema import parse_genres
from core.utils import safe_to_numeric

__all__ = ["DataValidator", "ValidationResult"]


# ═══════════════════════════════════════════════════════════════════════════
# Validation Result
# ═══════════════════════════════════════════════════════════════════════════

class ValidationResult(BaseModel):
    """
    📊 **Validation Result**

    Attributes:
        is_valid: Overall validation status
        errors: List of validation errors
        warnings: List of validation warnings
        info: Additional information dictionary
    """

    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    info: Dict[str, Any] = Field(default_factory=dict)

    def add_error(self, message: str) -> None:
        """Add error and mark as invalid."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_info(self, key: str, value: Any) -> None:
        self.info[key] = value


# ═══════════════════════════════════════════════════════════════════════════
# Data Validator
# ═══════════════════════════════════════════════════════════════════════════

class DataValidator:
    """🔍 **Dataset Quality Validator**"""

    def __init__(self, required_columns: Optional[List[str]] = None):
        self.required_columns = list(required_columns or REQUIRED_COLUMNS)
        self.logger = logger.bind(component="DataValidator")

    def validate(self, df: pd.DataFrame) -> ValidationResult:
        """Validate a raw or loaded frame against the track schema."""
        result = ValidationResult()

        result.add_info("n_rows", int(len(df)))
        result.add_info("n_columns", int(len(df.columns)))

        if df.empty:
            result.add_warning("Dataset has no rows")

        self._check_columns(df, result)
        self._check_numeric(df, result)
        self._check_ranges(df, result)
        self._check_genres(df, result)

        if result.is_valid:
            self.logger.debug(f"Dataset validation passed with {len(result.warnings)} warnings")
        else:
            self.logger.warning(f"Dataset validation failed with {len(result.errors)} errors")

        return result

    # ───────────────────────────────────────────────────────────────────
    # Checks
    # ───────────────────────────────────────────────────────────────────

    def _check_columns(self, df: pd.DataFrame, result: ValidationResult) -> None:
        missing = [col for col in self.required_columns if col not in df.columns]
        if missing:
            result.add_error(f"Missing required columns: {missing}")

        duplicates = df.columns[df.columns.duplicated()].tolist()
        if duplicates:
            result.add_error(f"Duplicate column names: {duplicates}")

    def _check_numeric(self, df: pd.DataFrame, result: ValidationResult) -> None:
        invalid_counts: Dict[str, int] = {}
        for col in NUMERIC_COLUMNS:
            if col not in df.columns:
                continue
            n_invalid = int(safe_to_numeric(df[col]).isna().sum())
            invalid_counts[col] = n_invalid
            if n_invalid:
                result.add_warning(f"Column '{col}' has {n_invalid} missing or non-numeric values")
        result.add_info("invalid_numeric", invalid_counts)

    def _check_ranges(self, df: pd.DataFrame, result: ValidationResult) -> None:
        low, high = POPULARITY_RANGE
        for col in (COL_TRACK_POPULARITY, COL_ARTIST_POPULARITY):
            if col in df.columns:
                values = safe_to_numeric(df[col])
                n_out = int(((values < low) | (values > high)).sum())
                if n_out:
                    result.add_warning(f"Column '{col}' has {n_out} values outside {low:g}-{high:g}")

        if COL_TRACK_DURATION_MS in df.columns:
            n_bad = int((safe_to_numeric(df[COL_TRACK_DURATION_MS]) <= 0).sum())
            if n_bad:
                result.add_warning(f"Column '{COL_TRACK_DURATION_MS}' has {n_bad} non-positive durations")

        if COL_ARTIST_FOLLOWERS in df.columns:
            followers = safe_to_numeric(df[COL_ARTIST_FOLLOWERS])
            n_negative = int((followers < 0).sum())
            n_zero = int((followers == 0).sum())
            if n_negative:
                result.add_warning(f"Column '{COL_ARTIST_FOLLOWERS}' has {n_negative} negative values")
            if n_zero:
                result.add_warning(
                    f"Column '{COL_ARTIST_FOLLOWERS}' has {n_zero} zero values "
                    "(excluded from follower-sized charts)"
                )

    def _check_genres(self, df: pd.DataFrame, result: ValidationResult) -> None:
        if COL_ARTIST_GENRES not in df.columns:
            return
        parsed = df[COL_ARTIST_GENRES].map(parse_genres)
        n_empty = int((parsed.map(len) == 0).sum())
        distinct = {token for tokens in parsed for token in tokens}
        result.add_info("n_genres", len(distinct))
        if n_empty:
            result.add_warning(f"{n_empty} rows have no genres (excluded from genre charts)")
