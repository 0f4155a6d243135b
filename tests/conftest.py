"""Shared fixtures for the dashboard test suite."""

from datetime import date, timedelta

import pytest

from market_dashboard.config import Settings
from market_dashboard.models.market_data import ObservationSeries


class SleepRecorder:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings():
    """Settings with a dummy key and no pacing delay."""
    return Settings(fred_api_key="test-key", request_delay=0.0)


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_series():
    """Build an ObservationSeries from values and a start date with fixed spacing."""

    def _make(values, start: date, step_days: int = 1, series_id: str = "TEST"):
        dates = [start + timedelta(days=step_days * i) for i in range(len(values))]
        return ObservationSeries.from_lists(values, dates, series_id)

    return _make


@pytest.fixture
def make_monthly_series():
    """Monthly series on the first of each month."""

    def _make(values, start_year: int, start_month: int = 1, series_id: str = "TEST"):
        dates = []
        for i in range(len(values)):
            index = start_month - 1 + i
            dates.append(date(start_year + index // 12, index % 12 + 1, 1))
        return ObservationSeries.from_lists(values, dates, series_id)

    return _make
