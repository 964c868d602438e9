"""Pure analysis functions for expense and budget data.

All functions take an already-loaded snapshot of expenses (and budget
limits) and return result dataclasses. No I/O and no shared state, so
every call is independent and recomputes from its inputs.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from expense_care.core.dates import (
    date_key,
    day_range,
    days_in_month,
    end_of_day,
    get_date_range_for_period,
    is_date_in_range,
    month_range,
    start_of_day,
    to_local,
    week_range,
    weekday_label,
)
from expense_care.models.results import (
    AllBudgetStatuses,
    BudgetStatus,
    CategorySummaryItem,
    DailySpending,
    ForecastResult,
    PeriodSummary,
    StreakResult,
)
from expense_care.models.schemas import (
    Budget,
    BudgetPeriod,
    CategoryKey,
    Expense,
    HealthStatus,
)

BUDGET_WARNING_THRESHOLD = 80.0
BUDGET_OVER_THRESHOLD = 100.0
FORECAST_WARNING_RATIO = 0.9
DEFAULT_LOOKBACK_DAYS = 365
DEFAULT_COMPARISON_DAYS = 7


def filter_expenses_by_date_range(
    expenses: Iterable[Expense],
    start: datetime,
    end: datetime,
) -> list[Expense]:
    """Expenses whose instant lies in ``[start, end]`` (no day rounding)."""
    return [e for e in expenses if is_date_in_range(e.date, start, end)]


def daily_totals(expenses: Iterable[Expense]) -> dict[date, float]:
    """Sum expense amounts per local calendar day."""
    totals: dict[date, float] = {}
    for e in expenses:
        key = date_key(e.date)
        totals[key] = totals.get(key, 0.0) + e.amount
    return totals


# --- Budget Status ---


def health_status(
    percent_used: float,
    warning_threshold: float = BUDGET_WARNING_THRESHOLD,
) -> HealthStatus:
    """Classify a percent-used figure. Boundaries go to the more severe bucket."""
    if percent_used >= BUDGET_OVER_THRESHOLD:
        return HealthStatus.OVER
    if percent_used >= warning_threshold:
        return HealthStatus.WARNING
    return HealthStatus.SAFE


def compute_status(
    limit: float,
    expenses: Iterable[Expense],
    warning_threshold: float = BUDGET_WARNING_THRESHOLD,
) -> BudgetStatus:
    """Spending status of *expenses* against *limit*.

    The caller filters *expenses* to the period first. A non-positive limit
    means "no limit configured" and yields an all-zero ``safe`` status.
    """
    if limit <= 0:
        return BudgetStatus(
            total_spent=0.0, remaining=0.0, percent_used=0.0, status=HealthStatus.SAFE,
        )

    total_spent = sum(e.amount for e in expenses)
    percent_used = total_spent / limit * 100

    return BudgetStatus(
        total_spent=total_spent,
        remaining=limit - total_spent,
        percent_used=percent_used,
        status=health_status(percent_used, warning_threshold),
    )


def compute_all_statuses(
    budget: Budget,
    expenses: Iterable[Expense],
    reference_date: datetime | None = None,
    warning_threshold: float = BUDGET_WARNING_THRESHOLD,
) -> AllBudgetStatuses:
    """Status for today, this week and this month.

    Weekly and monthly entries are ``None`` when the budget has no limit
    for that period, which is distinct from a zero-spend status.
    """
    now = to_local(reference_date)
    expenses = list(expenses)

    def _status(limit: float, rng) -> BudgetStatus:
        in_period = filter_expenses_by_date_range(expenses, rng.start, rng.end)
        return compute_status(limit, in_period, warning_threshold)

    return AllBudgetStatuses(
        daily=_status(budget.daily_limit, day_range(now)),
        weekly=_status(budget.weekly_limit, week_range(now)) if budget.weekly_limit else None,
        monthly=_status(budget.monthly_limit, month_range(now)) if budget.monthly_limit else None,
    )


# --- Category Summary ---


def summarize_categories(
    expenses: Iterable[Expense],
    range_start: datetime | date,
    range_end: datetime | date,
) -> PeriodSummary:
    """Group spending by category over whole calendar days.

    The bounds are widened to the start of *range_start*'s day and the end
    of *range_end*'s day. Categories come out largest first; equal amounts
    are ordered by category key.
    """
    filtered = filter_expenses_by_date_range(
        expenses, start_of_day(range_start), end_of_day(range_end)
    )
    if not filtered:
        return PeriodSummary(total=0.0, categories=[])

    by_category: dict[CategoryKey, float] = {}
    for e in filtered:
        by_category[e.category] = by_category.get(e.category, 0.0) + e.amount

    total = sum(by_category.values())
    categories = [
        CategorySummaryItem(
            category=cat,
            amount=amount,
            percent=(amount / total * 100) if total > 0 else 0.0,
        )
        for cat, amount in by_category.items()
    ]
    categories.sort(key=lambda c: (-c.amount, c.category.value))

    return PeriodSummary(total=total, categories=categories)


def summarize_period(
    expenses: Iterable[Expense],
    period: BudgetPeriod,
    reference_date: datetime | None = None,
) -> PeriodSummary:
    """Category breakdown for the current day, week or month."""
    rng = get_date_range_for_period(period, reference_date)
    return summarize_categories(expenses, rng.start, rng.end)


# --- Budget Streak ---


def compute_streak(
    expenses: Iterable[Expense],
    daily_limit: float,
    budget_start_date: datetime | date,
    max_lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    reference_date: datetime | None = None,
) -> StreakResult:
    """Count consecutive days at or under *daily_limit*, walking back from today.

    Days with no expenses count as under budget. The walk stops at the first
    day over the limit, at the day before the budget started, or after
    *max_lookback_days* days. Today counts when it qualifies.
    """
    if daily_limit <= 0:
        return StreakResult(streak_days=0, is_active_today=False)

    totals = daily_totals(expenses)
    today = date_key(to_local(reference_date))
    start_key = date_key(budget_start_date)

    streak_days = 0
    for offset in range(max_lookback_days):
        day = today - timedelta(days=offset)
        if day < start_key:
            break
        if totals.get(day, 0.0) > daily_limit:
            break
        streak_days += 1

    return StreakResult(
        streak_days=streak_days,
        is_active_today=totals.get(today, 0.0) <= daily_limit,
    )


# --- Monthly Forecast ---


def effective_monthly_limit(
    budget: Budget,
    reference_date: datetime | None = None,
) -> float:
    """The monthly limit, or the daily limit spread over the whole month."""
    if budget.monthly_limit:
        return budget.monthly_limit
    return budget.daily_limit * days_in_month(reference_date)


def project_month(
    expenses: Iterable[Expense],
    monthly_limit: float,
    reference_date: datetime | None = None,
) -> ForecastResult:
    """Project month-end spending from the average daily spend so far.

    Today counts as elapsed, so on the 15th the month-to-date total is
    spread over 15 days and extrapolated over the days after today.
    """
    now = to_local(reference_date)
    rng = month_range(now)
    month_expenses = filter_expenses_by_date_range(expenses, rng.start, rng.end)

    total_spent = sum(e.amount for e in month_expenses)
    days_elapsed = now.day
    days_remaining = rng.end.day - days_elapsed

    burn_rate = total_spent / days_elapsed if days_elapsed > 0 else 0.0
    projected_total = total_spent + burn_rate * days_remaining

    remaining_budget = monthly_limit - total_spent
    if remaining_budget <= 0:
        safe_daily_limit = 0.0
    elif days_remaining > 0:
        safe_daily_limit = remaining_budget / days_remaining
    else:
        # Last day of the month: whatever is left is today's allowance
        safe_daily_limit = remaining_budget

    if projected_total > monthly_limit:
        status = HealthStatus.OVER
    elif projected_total > monthly_limit * FORECAST_WARNING_RATIO:
        status = HealthStatus.WARNING
    else:
        status = HealthStatus.SAFE

    return ForecastResult(
        total_spent=total_spent,
        projected_total=projected_total,
        safe_daily_limit=safe_daily_limit,
        status=status,
        current_burn_rate=burn_rate,
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
    )


# --- Spending Comparison ---


def last_n_days(
    expenses: Iterable[Expense],
    n: int = DEFAULT_COMPARISON_DAYS,
    reference_date: datetime | None = None,
) -> list[DailySpending]:
    """Daily totals for the *n* days ending today, oldest first.

    Always returns exactly *n* entries; days without expenses have amount 0.
    """
    totals = daily_totals(expenses)
    today = date_key(to_local(reference_date))

    days: list[DailySpending] = []
    for offset in range(n - 1, -1, -1):
        day = today - timedelta(days=offset)
        days.append(DailySpending(
            date=day,
            day_label="Today" if offset == 0 else weekday_label(day),
            amount=totals.get(day, 0.0),
            is_today=offset == 0,
        ))
    return days
