"""Derived series: year-over-year, month-over-month and yield curve spread."""

import logging

from market_dashboard.models.market_data import Frequency, ObservationSeries, Transform


logger = logging.getLogger(__name__)


def _lagged_change(series: ObservationSeries, lag: int) -> ObservationSeries:
    """Percent change against the value `lag` periods earlier."""
    if len(series) < lag + 1:
        return ObservationSeries((), (), series.series_id)

    values = []
    dates = []
    for i in range(lag, len(series)):
        base = series.values[i - lag]
        if base == 0:
            logger.warning(
                f"{series.series_id or 'series'}: zero base at {series.dates[i - lag]}, "
                f"dropping {series.dates[i]}"
            )
            continue
        values.append(((series.values[i] - base) / base) * 100)
        dates.append(series.dates[i])

    return ObservationSeries(tuple(values), tuple(dates), series.series_id)


def year_over_year(
    series: ObservationSeries, frequency: Frequency = Frequency.MONTHLY
) -> ObservationSeries:
    """
    Year-over-year percent change.

    The lag comes from the frequency (12 for monthly, 4 for quarterly...).
    Output point i is paired with input date i + lag. Returns an empty series
    when there is less than one full year plus one point of history.
    """
    return _lagged_change(series, frequency.yoy_lag)


def month_over_month(series: ObservationSeries) -> ObservationSeries:
    """Period-over-period percent change, one point shorter than the input."""
    return _lagged_change(series, 1)


def apply_transform(
    series: ObservationSeries, transform: Transform, frequency: Frequency
) -> ObservationSeries:
    if transform is Transform.YOY:
        return year_over_year(series, frequency)
    if transform is Transform.MOM:
        return month_over_month(series)
    return series


def spread(
    two_year: ObservationSeries, ten_year: ObservationSeries
) -> ObservationSeries | None:
    """
    10yr minus 2yr in basis points on the dates both series report.

    Output follows the 2yr series order. Returns None when fewer than two
    dates line up.
    """
    long_by_date = dict(zip(ten_year.dates, ten_year.values))

    values = []
    dates = []
    for day, short in zip(two_year.dates, two_year.values):
        long = long_by_date.get(day)
        if long is None:
            continue
        values.append((long - short) * 100)
        dates.append(day)

    if len(values) < 2:
        logger.warning(
            f"Only {len(values)} aligned dates between "
            f"{two_year.series_id or '2yr'} and {ten_year.series_id or '10yr'}"
        )
        return None

    series_id = f"{ten_year.series_id}-{two_year.series_id}".strip("-")
    return ObservationSeries(tuple(values), tuple(dates), series_id)
