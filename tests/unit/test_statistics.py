"""
TrackLens - Unit Tests for Summary Statistics
"""

import math

import pytest

from pipeline.statistics import extent, histogram, mean, pearson


class TestMean:
    """Tests for mean function"""

    def test_exact_mean(self):
        assert mean([10.0, 20.0, 30.0]) == 20.0

    def test_empty_is_nan(self):
        assert math.isnan(mean([]))


class TestPearson:
    """Tests for pearson function"""

    def test_perfect_positive(self):
        assert pearson([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert pearson([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)

    def test_symmetric(self):
        xs = [1.0, 4.0, 2.0, 8.0, 5.0]
        ys = [3.0, 1.0, 7.0, 2.0, 6.0]
        assert pearson(xs, ys) == pytest.approx(pearson(ys, xs))

    def test_bounded(self):
        xs = [0.1, 0.2, 0.30000000000000004, 0.4]
        ys = [1e9, 2e9, 3e9, 4e9]
        assert -1.0 <= pearson(xs, ys) <= 1.0

    def test_population_moments(self):
        # cov = 2/3, var_x = 2/3, var_y = 8/9 (divide by n)
        r = pearson([1, 2, 3], [1, 3, 3])
        assert r == pytest.approx((2 / 3) / math.sqrt((2 / 3) * (8 / 9)))

    @pytest.mark.parametrize(
        "xs, ys",
        [
            ([5, 5, 5], [1, 2, 3]),
            ([1, 2, 3], [7, 7, 7]),
            ([0.1, 0.1, 0.1], [1, 2, 3]),
            ([1, 2, 3], [0.7, 0.7, 0.7]),
            ([1], [2]),
            ([], []),
            ([1, 2], [1, 2, 3]),
            ([1, math.nan, 3], [1, 2, 3]),
        ],
    )
    def test_degenerate_is_nan(self, xs, ys):
        assert math.isnan(pearson(xs, ys))


class TestExtentAndHistogram:
    """Tests for extent and histogram functions"""

    def test_extent_ignores_nan(self):
        assert extent([3.0, math.nan, -1.0, 7.0]) == (-1.0, 7.0)

    def test_extent_empty(self):
        assert extent([math.nan]) is None

    def test_histogram_top_edge_inclusive(self):
        assert histogram([0, 50, 100], bins=2, domain=(0, 100)) == [1, 2]

    def test_histogram_ignores_out_of_domain(self):
        assert histogram([-5, 10, 200], bins=2, domain=(0, 100)) == [1, 0]

    def test_histogram_zero_width(self):
        assert histogram([5, 5], bins=3) == [2, 0, 0]

    def test_histogram_empty(self):
        assert histogram([], bins=4) == [0, 0, 0, 0]

    def test_histogram_requires_bins(self):
        with pytest.raises(ValueError):
            histogram([1, 2], bins=0)
