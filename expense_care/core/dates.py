"""Calendar range helpers for budget periods.

All values are naive datetimes in local time. Aware datetimes passed in
are converted to local time first. Ranges are inclusive at both ends.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from expense_care.models.schemas import BudgetPeriod

_WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
_PERIOD_LABELS = {
    BudgetPeriod.DAILY: "Today",
    BudgetPeriod.WEEKLY: "This Week",
    BudgetPeriod.MONTHLY: "This Month",
}


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return is_date_in_range(moment, self.start, self.end)


def to_local(moment: datetime | date | None = None) -> datetime:
    """Normalise *moment* to a naive local datetime (default: now)."""
    if moment is None:
        return datetime.now()
    if not isinstance(moment, datetime):
        return datetime.combine(moment, time.min)
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def date_key(moment: datetime | date) -> date:
    """Local calendar day of *moment*, used as a grouping key."""
    return to_local(moment).date()


def days_in_month(moment: datetime | date | None = None) -> int:
    d = to_local(moment)
    return calendar.monthrange(d.year, d.month)[1]


# --- Period boundaries ---


def start_of_day(moment: datetime | date | None = None) -> datetime:
    return datetime.combine(to_local(moment).date(), time.min)


def end_of_day(moment: datetime | date | None = None) -> datetime:
    return datetime.combine(to_local(moment).date(), time.max)


def start_of_week(moment: datetime | date | None = None) -> datetime:
    """Midnight of the Monday on or before *moment*.

    A Sunday belongs to the week that started six days earlier.
    """
    d = to_local(moment).date()
    return datetime.combine(d - timedelta(days=d.weekday()), time.min)


def end_of_week(moment: datetime | date | None = None) -> datetime:
    """Last instant of the Sunday closing *moment*'s week."""
    monday = start_of_week(moment).date()
    return datetime.combine(monday + timedelta(days=6), time.max)


def start_of_month(moment: datetime | date | None = None) -> datetime:
    d = to_local(moment).date()
    return datetime.combine(d.replace(day=1), time.min)


def end_of_month(moment: datetime | date | None = None) -> datetime:
    d = to_local(moment).date()
    return datetime.combine(d.replace(day=days_in_month(d)), time.max)


def day_range(moment: datetime | date | None = None) -> DateRange:
    return DateRange(start_of_day(moment), end_of_day(moment))


def week_range(moment: datetime | date | None = None) -> DateRange:
    return DateRange(start_of_week(moment), end_of_week(moment))


def month_range(moment: datetime | date | None = None) -> DateRange:
    return DateRange(start_of_month(moment), end_of_month(moment))


def get_date_range_for_period(
    period: BudgetPeriod,
    reference_date: datetime | date | None = None,
) -> DateRange:
    """Calendar range of the daily/weekly/monthly period containing *reference_date*."""
    period = BudgetPeriod(period)
    if period is BudgetPeriod.DAILY:
        return day_range(reference_date)
    if period is BudgetPeriod.WEEKLY:
        return week_range(reference_date)
    return month_range(reference_date)


# --- Predicates ---


def is_date_in_range(
    moment: datetime,
    range_start: datetime,
    range_end: datetime,
) -> bool:
    """True if *moment* lies in ``[range_start, range_end]``."""
    return to_local(range_start) <= to_local(moment) <= to_local(range_end)


def is_same_day(a: datetime | date, b: datetime | date) -> bool:
    """Calendar-day equality, not elapsed-time equality."""
    return date_key(a) == date_key(b)


# --- Labels ---


def weekday_label(moment: datetime | date) -> str:
    return _WEEKDAY_LABELS[date_key(moment).weekday()]


def period_label(period: BudgetPeriod) -> str:
    return _PERIOD_LABELS[BudgetPeriod(period)]


def format_display_date(
    moment: datetime | date,
    reference_date: datetime | date | None = None,
) -> str:
    """``Today``, ``Yesterday``, or e.g. ``Mon, Jan 5, 2026``."""
    today = date_key(to_local(reference_date))
    d = date_key(moment)
    if d == today:
        return "Today"
    if d == today - timedelta(days=1):
        return "Yesterday"
    return f"{_WEEKDAY_LABELS[d.weekday()]}, {_MONTH_LABELS[d.month - 1]} {d.day}, {d.year}"
