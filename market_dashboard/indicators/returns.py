"""Period-over-period returns (1D through 5Y, QTD, YoY quarter)."""

import logging
from datetime import date, timedelta
from typing import Sequence

from market_dashboard.indicators.alignment import find_value
from market_dashboard.indicators.quarters import previous_quarter_end, same_quarter_last_year_end
from market_dashboard.models.market_data import (
    Direction,
    H8Changes,
    ObservationSeries,
    PeriodReturnSet,
    ReturnUnit,
)


logger = logging.getLogger(__name__)


# Lookback in calendar days relative to the most recent observation
PERIOD_DAYS: dict[str, int] = {
    "1W": 7,
    "1M": 30,
    "1Y": 365,
    "3Y": 1095,
    "5Y": 1825,
}

# Display order of the return keys
PERIOD_ORDER = ("1D", "1W", "1M", "YTD", "1Y", "3Y", "5Y")


def percent_change(current: float, base: float | None) -> float | None:
    """((current - base) / base) * 100, None when base is missing or zero."""
    if base is None or base == 0:
        return None
    return ((current - base) / base) * 100


def basis_point_change(current: float, base: float | None) -> float | None:
    """(current - base) * 100 for values quoted in percent."""
    if base is None:
        return None
    return (current - base) * 100


def _change(current: float, base: float | None, unit: ReturnUnit) -> float | None:
    if unit is ReturnUnit.BASIS_POINTS:
        return basis_point_change(current, base)
    return percent_change(current, base)


def period_targets(last: date, include_daily: bool = False) -> list[tuple[str, date, Direction]]:
    """Target date and search direction for every period key, in display order."""
    targets = []
    for key in PERIOD_ORDER:
        if key == "1D":
            if include_daily:
                targets.append((key, last - timedelta(days=1), Direction.BEFORE))
        elif key == "YTD":
            targets.append((key, date(last.year, 1, 1), Direction.AFTER))
        else:
            targets.append((key, last - timedelta(days=PERIOD_DAYS[key]), Direction.BEFORE))
    return targets


def calculate_period_returns(
    values: Sequence[float],
    dates: Sequence[date],
    unit: ReturnUnit = ReturnUnit.PERCENT,
    skip_weekends: bool = False,
    include_daily: bool = False,
) -> PeriodReturnSet:
    """
    Returns for each standard period relative to the latest observation.

    Args:
        values: Observation values, ascending by date
        dates: Dates parallel to `values`
        unit: PERCENT for prices/levels, BASIS_POINTS for rates
        skip_weekends: Ignore Saturday/Sunday when locating targets (daily series)
        include_daily: Also compute the 1D return (market instruments)

    Returns:
        Dict keyed by period. A period whose target cannot be located, or
        whose percent base is zero, is left out.
    """
    series = ObservationSeries.from_lists(values, dates)
    return calculate_series_returns(series, unit, skip_weekends, include_daily)


def calculate_series_returns(
    series: ObservationSeries,
    unit: ReturnUnit = ReturnUnit.PERCENT,
    skip_weekends: bool = False,
    include_daily: bool = False,
) -> PeriodReturnSet:
    """Same as calculate_period_returns for an ObservationSeries."""
    if series.is_empty:
        return {}

    current = series.last_value
    returns: PeriodReturnSet = {}

    missing = []

    for key, target, direction in period_targets(series.last_date, include_daily):
        base = find_value(series, target, direction, skip_weekends)
        change = _change(current, base, unit)
        if change is None:
            missing.append(key)
        else:
            returns[key] = change

    if missing:
        logger.debug(f"{series.series_id or 'series'}: no history for {missing}")

    return returns


def calculate_h8_changes(series: ObservationSeries) -> H8Changes:
    """
    Week-over-week, quarter-to-date and year-over-year-quarter percent changes.

    QTD compares against the value on or before the previous quarter end and
    YoY quarter against the end of the same quarter a year earlier. Weekly
    series have no weekend gaps to skip.
    """
    if series.is_empty:
        return H8Changes()

    current = series.last_value
    last = series.last_date

    wow = None
    if len(series) >= 2:
        wow = percent_change(current, series.values[-2])

    qtd_base = find_value(series, previous_quarter_end(last), Direction.BEFORE)
    yoy_base = find_value(series, same_quarter_last_year_end(last), Direction.BEFORE)

    return H8Changes(
        wow=wow,
        qtd=percent_change(current, qtd_base),
        yoy_qtr=percent_change(current, yoy_base),
    )
