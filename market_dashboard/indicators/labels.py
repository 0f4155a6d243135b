"""X-axis label generation for charts."""

import math
from dataclasses import dataclass, field
from datetime import date
from functools import reduce
from typing import Sequence

from market_dashboard.models.market_data import (
    ChartLabelSet,
    Frequency,
    as_calendar_date,
)


DEFAULT_MAX_LABELS = 13

MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_label(day: date, style: Frequency = Frequency.MONTHLY) -> str:
    """
    Format a date for an axis label.

    Monthly "Jan '25", weekly/daily "1/15", quarterly "Q1'25", annual "2025".
    """
    if style is Frequency.MONTHLY:
        return f"{MONTH_ABBR[day.month - 1]} '{day.year % 100:02d}"
    if style is Frequency.QUARTERLY:
        return f"Q{(day.month - 1) // 3 + 1}'{day.year % 100:02d}"
    if style is Frequency.ANNUAL:
        return str(day.year)
    return f"{day.month}/{day.day}"


def format_tooltip_date(value: date | str) -> str:
    """MM/DD/YY for hover text."""
    day = as_calendar_date(value)
    return f"{day.month:02d}/{day.day:02d}/{day.year % 100:02d}"


@dataclass
class _MonthBuckets:
    """Accumulator: (year, month) -> first and last index seen."""

    months: list[tuple[int, int]] = field(default_factory=list)
    first: dict[tuple[int, int], int] = field(default_factory=dict)
    last: dict[tuple[int, int], int] = field(default_factory=dict)


def _bucket_months(dates: Sequence[date]) -> _MonthBuckets:
    def step(state: _MonthBuckets, item: tuple[int, date]) -> _MonthBuckets:
        index, day = item
        month = (day.year, day.month)
        if month not in state.first:
            state.months.append(month)
            state.first[month] = index
        state.last[month] = index
        return state

    return reduce(step, enumerate(dates), _MonthBuckets())


def _thin(anchors: list[int], max_labels: int) -> list[int]:
    """Keep every n-th anchor counting back from the most recent one."""
    if max_labels <= 0:
        return []
    if len(anchors) <= max_labels:
        return anchors
    stride = math.ceil(len(anchors) / max_labels)
    newest = len(anchors) - 1
    return [a for pos, a in enumerate(anchors) if (newest - pos) % stride == 0]


def _sparse(
    dates: list[date], anchors: list[int], values: Sequence[float] | None = None
) -> ChartLabelSet:
    labels = [""] * len(dates)
    for index in anchors:
        labels[index] = format_label(dates[index], Frequency.MONTHLY)
    return ChartLabelSet(
        labels=tuple(labels),
        monthly_label_indices=tuple(anchors),
        original_dates=tuple(d.isoformat() for d in dates),
        anchor_values=tuple(values[i] for i in anchors) if values is not None else (),
    )


def generate(dates: Sequence[date | str], max_labels: int = DEFAULT_MAX_LABELS) -> ChartLabelSet:
    """
    Sparse month labels for a dense daily or weekly series.

    The first observation of each calendar month is labelled; every other
    position gets a blank label. With more months than `max_labels` the
    anchors are thinned, always keeping the latest month.
    """
    days = [as_calendar_date(d) for d in dates]
    buckets = _bucket_months(days)
    anchors = _thin([buckets.first[m] for m in buckets.months], max_labels)
    return _sparse(days, anchors)


def generate_monthly(
    dates: Sequence[date | str],
    values: Sequence[float],
    target_months: int = DEFAULT_MAX_LABELS,
) -> ChartLabelSet:
    """
    Month-end anchors: the last observation of each of the most recent months.

    Uses every available month when there are fewer than `target_months`.
    """
    if len(dates) != len(values):
        raise ValueError(f"{len(values)} values vs {len(dates)} dates")
    days = [as_calendar_date(d) for d in dates]
    buckets = _bucket_months(days)
    months = buckets.months[-target_months:] if target_months > 0 else []
    anchors = [buckets.last[m] for m in months]
    return _sparse(days, anchors, values)


def point_labels(dates: Sequence[date | str], style: Frequency) -> ChartLabelSet:
    """One label per observation, for short monthly/quarterly/weekly charts."""
    days = [as_calendar_date(d) for d in dates]
    return ChartLabelSet(
        labels=tuple(format_label(d, style) for d in days),
        monthly_label_indices=tuple(range(len(days))),
        original_dates=tuple(d.isoformat() for d in days),
    )
