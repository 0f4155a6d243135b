"""Frequency downsampling for raw observation lists."""

from dataclasses import dataclass, field
from datetime import date
from functools import reduce
from typing import Sequence

from market_dashboard.models.market_data import Frequency, Observation, ObservationSeries


WEEKLY_MIN_DAYS = 7
QUARTERLY_MIN_MONTHS = 3


@dataclass
class _FilterState:
    """Accumulator for the downsampling fold."""

    kept: list[int] = field(default_factory=list)
    last_kept: date | None = None


def _keep(current: date, last_kept: date, frequency: Frequency) -> bool:
    """Decide whether `current` is far enough from the last kept date."""
    if frequency is Frequency.WEEKLY:
        return (current - last_kept).days >= WEEKLY_MIN_DAYS
    if frequency is Frequency.MONTHLY:
        return (current.year, current.month) != (last_kept.year, last_kept.month)
    if frequency is Frequency.QUARTERLY:
        months = (current.year - last_kept.year) * 12 + (current.month - last_kept.month)
        return months >= QUARTERLY_MIN_MONTHS
    if frequency is Frequency.ANNUAL:
        return current.year != last_kept.year
    return True


def kept_indices(dates: Sequence[date], frequency: Frequency | None) -> list[int]:
    """
    Positions that survive downsampling to `frequency`.

    Dates must be ascending. The first observation is always kept and every
    later one is compared against the last *kept* date, not its neighbour.
    """
    if frequency is None or frequency is Frequency.DAILY:
        return list(range(len(dates)))

    def step(state: _FilterState, item: tuple[int, date]) -> _FilterState:
        index, current = item
        if state.last_kept is None or _keep(current, state.last_kept, frequency):
            state.kept.append(index)
            state.last_kept = current
        return state

    return reduce(step, enumerate(dates), _FilterState()).kept


def filter_by_frequency(
    observations: Sequence[Observation], frequency: Frequency | None
) -> Sequence[Observation]:
    """
    Downsample observations to the target frequency.

    Daily (or no frequency) returns the input unchanged.
    """
    if frequency is None or frequency is Frequency.DAILY:
        return observations
    indices = kept_indices([obs.date for obs in observations], frequency)
    return [observations[i] for i in indices]


def filter_series(series: ObservationSeries, frequency: Frequency | None) -> ObservationSeries:
    """Same rule as filter_by_frequency applied to both parallel arrays."""
    if frequency is None or frequency is Frequency.DAILY:
        return series
    return series.take(kept_indices(series.dates, frequency))
