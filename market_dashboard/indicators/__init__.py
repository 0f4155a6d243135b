"""Time-series normalization and period return calculations."""

from market_dashboard.indicators.alignment import find_index, find_value
from market_dashboard.indicators.derived import month_over_month, spread, year_over_year
from market_dashboard.indicators.filters import filter_by_frequency, filter_series
from market_dashboard.indicators.quarters import previous_quarter_end, same_quarter_last_year_end
from market_dashboard.indicators.returns import calculate_h8_changes, calculate_period_returns

__all__ = [
    "calculate_h8_changes",
    "calculate_period_returns",
    "filter_by_frequency",
    "filter_series",
    "find_index",
    "find_value",
    "month_over_month",
    "previous_quarter_end",
    "same_quarter_last_year_end",
    "spread",
    "year_over_year",
]
