"""Estimate the next publication date of a series."""

import calendar
from datetime import date, timedelta

from market_dashboard.indicators.quarters import quarter_end, quarter_of
from market_dashboard.models.market_data import ReleaseKind, ReleaseSchedule

THURSDAY = 3
FRIDAY = 4
FOMC_INTERVAL_DAYS = 42
GDP_RELEASE_LAG_DAYS = 30


def _add_months(day: date, months: int) -> tuple[int, int]:
    index = day.month - 1 + months
    return day.year + index // 12, index % 12 + 1


def _next_business_day(day: date) -> date:
    nxt = day + timedelta(days=1)
    while nxt.weekday() >= 5:
        nxt += timedelta(days=1)
    return nxt


def _next_weekday(day: date, weekday: int) -> date:
    """Next `weekday` strictly after `day`."""
    days = (weekday - day.weekday()) % 7 or 7
    return day + timedelta(days=days)


def next_release_date(
    schedule: ReleaseSchedule, observation_date: date, today: date | None = None
) -> date:
    """
    Approximate next release for a series given its latest observation.

    Monthly data for month X is assumed to publish in month X+2 on the
    scheduled day (clamped to month end). The jobs report lands on the first
    Friday of that month.
    """
    today = today or date.today()

    if schedule.kind is ReleaseKind.DAILY:
        return _next_business_day(today)
    if schedule.kind is ReleaseKind.WEEKLY:
        return _next_weekday(today, THURSDAY)
    if schedule.kind is ReleaseKind.QUARTERLY:
        end = quarter_end(observation_date.year, quarter_of(observation_date))
        return end + timedelta(days=GDP_RELEASE_LAG_DAYS)
    if schedule.kind is ReleaseKind.FOMC:
        return observation_date + timedelta(days=FOMC_INTERVAL_DAYS)

    year, month = _add_months(observation_date, 2)
    if schedule.kind is ReleaseKind.FIRST_FRIDAY:
        first = date(year, month, 1)
        return first if first.weekday() == FRIDAY else _next_weekday(first, FRIDAY)

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(schedule.day or 1, last_day))
