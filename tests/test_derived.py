"""Tests for YoY, MoM and spread derived series."""

from datetime import date

import pytest

from market_dashboard.indicators.derived import (
    apply_transform,
    month_over_month,
    spread,
    year_over_year,
)
from market_dashboard.models.market_data import Frequency, ObservationSeries, Transform


class TestYearOverYear:
    """Test the lagged percent-change transform."""

    def test_monthly_yoy_matches_formula(self, make_monthly_series):
        values = [200.0 + 1.7 * i + (i % 5) * 0.3 for i in range(24)]
        series = make_monthly_series(values, 2023)

        result = year_over_year(series, Frequency.MONTHLY)

        assert len(result) == 12
        assert len(result.values) == len(result.dates)
        assert result.dates == series.dates[12:]
        for k, i in enumerate(range(12, 24)):
            expected = ((values[i] - values[i - 12]) / values[i - 12]) * 100
            assert result.values[k] == pytest.approx(expected)

    def test_too_short_returns_empty(self, make_monthly_series):
        series = make_monthly_series([100.0] * 12, 2024)
        result = year_over_year(series)
        assert result.is_empty
        assert result.dates == ()

    def test_minimum_length_yields_one_point(self, make_monthly_series):
        series = make_monthly_series([100.0] * 12 + [103.0], 2024)
        result = year_over_year(series)
        assert result.values == pytest.approx((3.0,))

    def test_quarterly_uses_four_period_lag(self, make_series):
        series = make_series([100.0, 101.0, 102.0, 103.0, 110.0], date(2024, 1, 1), step_days=91)
        result = year_over_year(series, Frequency.QUARTERLY)
        assert result.values == pytest.approx((10.0,))

    def test_weekly_lag(self):
        assert Frequency.WEEKLY.yoy_lag == 52
        assert Frequency.DAILY.yoy_lag == 252
        assert Frequency.ANNUAL.yoy_lag == 1


class TestMonthOverMonth:
    def test_length_and_values(self, make_monthly_series):
        series = make_monthly_series([100.0, 110.0, 99.0], 2025)
        result = month_over_month(series)

        assert len(result) == 2
        assert result.values == pytest.approx((10.0, -10.0))
        assert result.dates == series.dates[1:]

    def test_zero_base_drops_point(self, make_monthly_series):
        series = make_monthly_series([0.0, 1.0, 2.0], 2025)
        result = month_over_month(series)

        assert result.values == pytest.approx((100.0,))
        assert result.dates == (date(2025, 3, 1),)


class TestApplyTransform:
    def test_none_is_passthrough(self, make_monthly_series):
        series = make_monthly_series([2.1, 1.4, 3.0], 2024)
        assert apply_transform(series, Transform.NONE, Frequency.QUARTERLY) is series

    def test_dispatch(self, make_monthly_series):
        series = make_monthly_series([100.0 + i for i in range(14)], 2024)
        assert len(apply_transform(series, Transform.YOY, Frequency.MONTHLY)) == 2
        assert len(apply_transform(series, Transform.MOM, Frequency.MONTHLY)) == 13


class TestSpread:
    """Test the 2s10s date intersection."""

    def test_intersection_in_two_year_order(self):
        d1, d2, d3, d4 = (date(2025, 1, d) for d in (6, 7, 8, 9))
        two_year = ObservationSeries.from_lists([4.0, 4.1, 4.2], [d1, d2, d3], "DGS2")
        ten_year = ObservationSeries.from_lists([4.5, 4.4, 4.6], [d2, d3, d4], "DGS10")

        result = spread(two_year, ten_year)

        assert result is not None
        assert result.dates == (d2, d3)
        assert result.values == pytest.approx(((4.5 - 4.1) * 100, (4.4 - 4.2) * 100))
        assert result.series_id == "DGS10-DGS2"

    def test_single_aligned_point_is_no_spread(self):
        two_year = ObservationSeries.from_lists([4.0, 4.1], [date(2025, 1, 6), date(2025, 1, 7)])
        ten_year = ObservationSeries.from_lists([4.5], [date(2025, 1, 7)])
        assert spread(two_year, ten_year) is None

    def test_inverted_curve_is_negative(self):
        dates = [date(2023, 7, 3), date(2023, 7, 5)]
        two_year = ObservationSeries.from_lists([4.94, 4.99], dates)
        ten_year = ObservationSeries.from_lists([3.86, 3.95], dates)
        result = spread(two_year, ten_year)
        assert all(v < 0 for v in result.values)
