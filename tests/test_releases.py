"""Tests for release calendar estimates."""

from datetime import date

from market_dashboard.config import FRED_SERIES, RELEASE_SCHEDULES
from market_dashboard.indicators.releases import next_release_date
from market_dashboard.models.market_data import ReleaseKind, ReleaseSchedule


class TestNextReleaseDate:
    def test_monthly_two_months_out(self):
        schedule = RELEASE_SCHEDULES[FRED_SERIES["coreCPI"]]
        assert next_release_date(schedule, date(2025, 1, 1)) == date(2025, 3, 10)

    def test_monthly_day_clamped_to_month_end(self):
        schedule = RELEASE_SCHEDULES[FRED_SERIES["corePCE"]]
        assert next_release_date(schedule, date(2024, 12, 1)) == date(2025, 2, 28)

    def test_jobs_report_first_friday(self):
        schedule = RELEASE_SCHEDULES[FRED_SERIES["unemployment"]]
        assert next_release_date(schedule, date(2025, 1, 1)) == date(2025, 3, 7)

    def test_weekly_next_thursday(self):
        schedule = ReleaseSchedule("Claims", ReleaseKind.WEEKLY)
        assert next_release_date(schedule, date(2025, 1, 1), today=date(2025, 1, 6)) == date(2025, 1, 9)
        assert next_release_date(schedule, date(2025, 1, 1), today=date(2025, 1, 9)) == date(2025, 1, 16)

    def test_daily_skips_weekend(self):
        schedule = RELEASE_SCHEDULES[FRED_SERIES["treasury10yr"]]
        assert next_release_date(schedule, date(2025, 1, 2), today=date(2025, 1, 3)) == date(2025, 1, 6)

    def test_quarterly_after_quarter_end(self):
        schedule = RELEASE_SCHEDULES[FRED_SERIES["gdp"]]
        assert next_release_date(schedule, date(2025, 1, 1)) == date(2025, 4, 30)

    def test_fomc_six_weeks(self):
        schedule = RELEASE_SCHEDULES[FRED_SERIES["fedFunds"]]
        assert next_release_date(schedule, date(2025, 1, 1)) == date(2025, 2, 12)
