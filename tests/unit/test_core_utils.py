"""
TrackLens - Unit Tests for Core Utils
"""

import math

import numpy as np
import pandas as pd
import pytest

from core.utils import (
    clean_column_names,
    df_overview,
    finite_values,
    format_duration_ms,
    format_number,
    format_percentage,
    is_finite_number,
    ms_to_minutes,
    safe_to_numeric,
)


class TestIsFiniteNumber:
    """Tests for is_finite_number function"""

    @pytest.mark.parametrize("value", [0, 1.5, -3, "42", np.float64(2.0)])
    def test_finite(self, value):
        assert is_finite_number(value)

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, None, "abc", True, False])
    def test_not_finite(self, value):
        assert not is_finite_number(value)

    def test_finite_values_keeps_order(self):
        assert finite_values([3, math.nan, "x", 1.0, None, 2]) == [3.0, 1.0, 2.0]


class TestSafeToNumeric:
    """Tests for safe_to_numeric function"""

    def test_coerces_invalid_to_nan(self):
        result = safe_to_numeric(pd.Series(["1", "x", "", "2.5"]))
        assert result.iloc[0] == 1.0
        assert math.isnan(result.iloc[1])
        assert math.isnan(result.iloc[2])
        assert result.iloc[3] == 2.5

    def test_infinity_becomes_nan(self):
        result = safe_to_numeric(pd.Series([1.0, np.inf, -np.inf]))
        assert result.isna().tolist() == [False, True, True]


class TestCleanColumnNames:
    """Tests for clean_column_names function"""

    def test_strips_bom_and_whitespace(self):
        df = pd.DataFrame(columns=["\ufefftrack_name", " artist_name "])
        assert clean_column_names(df).columns.tolist() == ["track_name", "artist_name"]

    def test_does_not_mutate_input(self):
        df = pd.DataFrame(columns=[" a "])
        clean_column_names(df)
        assert df.columns.tolist() == [" a "]

    def test_overview_of_empty_frame(self):
        overview = df_overview(pd.DataFrame())
        assert overview["missing_pct"] == 0.0


class TestFormatting:
    """Tests for formatting helpers"""

    def test_format_number(self):
        assert format_number(1234567) == "1,234,567"
        assert format_number(1234.567, decimals=1) == "1,234.6"
        assert format_number(math.nan) == "n/a"

    def test_format_percentage(self):
        assert format_percentage(0.456) == "45.6%"
        assert format_percentage(1.0, decimals=0) == "100%"
        assert format_percentage(math.nan) == "n/a"

    def test_format_duration(self):
        assert format_duration_ms(210_000) == "3:30"
        assert format_duration_ms(59_600) == "1:00"
        assert format_duration_ms(-1) == "n/a"

    def test_ms_to_minutes(self):
        assert ms_to_minutes(90_000) == pytest.approx(1.5)
        assert math.isnan(ms_to_minutes(math.nan))
