"""Nearest-date lookup used by the period return calculations."""

from datetime import date
from typing import Sequence

from market_dashboard.models.market_data import Direction, ObservationSeries

SATURDAY = 5
SUNDAY = 6


def is_weekend(day: date) -> bool:
    return day.weekday() in (SATURDAY, SUNDAY)


def find_index(
    dates: Sequence[date],
    target: date,
    direction: Direction = Direction.BEFORE,
    skip_weekends: bool = False,
) -> int | None:
    """
    Index of the observation closest to `target` on the requested side.

    BEFORE accepts dates on or before the target, AFTER on or after.
    Weekend dates are ignored when `skip_weekends` is set. The whole list is
    scanned; on equal distance the earliest position wins. Returns None when
    no date qualifies.
    """
    best_index = None
    best_distance = None

    for index, current in enumerate(dates):
        if skip_weekends and is_weekend(current):
            continue
        if direction is Direction.BEFORE and current > target:
            continue
        if direction is Direction.AFTER and current < target:
            continue

        distance = abs((current - target).days)
        if best_distance is None or distance < best_distance:
            best_index = index
            best_distance = distance

    return best_index


def find_value(
    series: ObservationSeries,
    target: date,
    direction: Direction = Direction.BEFORE,
    skip_weekends: bool = False,
) -> float | None:
    """Value at the closest qualifying date, or None."""
    index = find_index(series.dates, target, direction, skip_weekends)
    if index is None:
        return None
    return series.values[index]
