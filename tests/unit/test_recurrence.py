"""
Unit tests for next-occurrence computation.

Verifies:
- Each cadence
- Month-end and leap-day clamping
- datetime inputs keep their time of day
- Unknown intervals are rejected
"""

from datetime import date, datetime, timezone

import pytest

from ledger_kernel.domain.recurrence import next_occurrence
from ledger_kernel.exceptions import InvalidRecurringIntervalError, ValidationError
from ledger_kernel.models.transaction import RecurringInterval


class TestCadences:
    """One step of each interval."""

    def test_daily(self):
        assert next_occurrence(date(2024, 1, 15), RecurringInterval.DAILY) == date(2024, 1, 16)

    def test_daily_crosses_year(self):
        assert next_occurrence(date(2023, 12, 31), RecurringInterval.DAILY) == date(2024, 1, 1)

    def test_weekly(self):
        assert next_occurrence(date(2024, 1, 29), RecurringInterval.WEEKLY) == date(2024, 2, 5)

    def test_monthly(self):
        assert next_occurrence(date(2024, 1, 15), RecurringInterval.MONTHLY) == date(2024, 2, 15)

    def test_monthly_december_rolls_year(self):
        assert next_occurrence(date(2024, 12, 10), RecurringInterval.MONTHLY) == date(2025, 1, 10)

    def test_yearly(self):
        assert next_occurrence(date(2024, 3, 1), RecurringInterval.YEARLY) == date(2025, 3, 1)

    def test_accepts_string_interval(self):
        assert next_occurrence(date(2024, 1, 1), "WEEKLY") == date(2024, 1, 8)


class TestClamping:
    """Month arithmetic clamps to the last valid day."""

    def test_jan_31_monthly_non_leap(self):
        assert next_occurrence(date(2023, 1, 31), RecurringInterval.MONTHLY) == date(2023, 2, 28)

    def test_jan_31_monthly_leap(self):
        assert next_occurrence(date(2024, 1, 31), RecurringInterval.MONTHLY) == date(2024, 2, 29)

    def test_march_31_to_april_30(self):
        assert next_occurrence(date(2024, 3, 31), RecurringInterval.MONTHLY) == date(2024, 4, 30)

    def test_leap_day_yearly(self):
        assert next_occurrence(date(2024, 2, 29), RecurringInterval.YEARLY) == date(2025, 2, 28)


class TestDatetimeInput:

    def test_time_of_day_preserved(self):
        start = datetime(2024, 1, 31, 9, 30, tzinfo=timezone.utc)
        assert next_occurrence(start, RecurringInterval.MONTHLY) == datetime(
            2024, 2, 29, 9, 30, tzinfo=timezone.utc
        )


class TestInvalidInterval:

    def test_unknown_interval_raises(self):
        with pytest.raises(InvalidRecurringIntervalError) as exc_info:
            next_occurrence(date(2024, 1, 1), "HOURLY")
        assert exc_info.value.code == "INVALID_RECURRING_INTERVAL"
        assert exc_info.value.interval == "HOURLY"

    def test_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            next_occurrence(date(2024, 1, 1), "FORTNIGHTLY")
