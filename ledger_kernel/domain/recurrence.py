"""
Recurrence -- next-occurrence computation for recurring transactions.

Pure and deterministic.  The job that decides *when* to materialize due
occurrences lives outside the kernel; RecurringService only consumes this.

Month arithmetic clamps to the last valid day of the target month:
    Jan 31 + MONTHLY -> Feb 28 (Feb 29 in leap years)
    Feb 29 + YEARLY  -> Feb 28 on non-leap years
"""

import calendar
from datetime import date, datetime, timedelta
from typing import TypeVar

from ledger_kernel.exceptions import InvalidRecurringIntervalError
from ledger_kernel.models.transaction import RecurringInterval

D = TypeVar("D", date, datetime)


def _add_months(value: D, months: int) -> D:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


def next_occurrence(value: D, interval: RecurringInterval | str) -> D:
    """
    Return the next occurrence after ``value`` for ``interval``.

    Works for ``date`` and ``datetime``; the time of day is preserved.

    Raises:
        InvalidRecurringIntervalError: If interval is not a RecurringInterval.
    """
    try:
        cadence = RecurringInterval(interval)
    except ValueError:
        raise InvalidRecurringIntervalError(str(interval)) from None

    if cadence is RecurringInterval.DAILY:
        return value + timedelta(days=1)
    if cadence is RecurringInterval.WEEKLY:
        return value + timedelta(days=7)
    if cadence is RecurringInterval.MONTHLY:
        return _add_months(value, 1)
    return _add_months(value, 12)
