"""Calendar quarter boundaries for quarter-to-date comparisons."""

import calendar
from datetime import date


def quarter_of(day: date) -> int:
    """Quarter number 1-4."""
    return (day.month - 1) // 3 + 1


def quarter_end(year: int, quarter: int) -> date:
    month = quarter * 3
    return date(year, month, calendar.monthrange(year, month)[1])


def previous_quarter_end(ref: date) -> date:
    """
    Last day of the quarter before `ref`'s quarter.

    Q1 dates roll back to December 31 of the previous year.
    """
    quarter = quarter_of(ref)
    if quarter == 1:
        return date(ref.year - 1, 12, 31)
    return quarter_end(ref.year, quarter - 1)


def same_quarter_last_year_end(ref: date) -> date:
    """Last day of `ref`'s own quarter one year earlier."""
    return quarter_end(ref.year - 1, quarter_of(ref))
