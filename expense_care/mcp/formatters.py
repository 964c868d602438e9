"""Markdown formatters for MCP tool responses.

Pure functions that take analysis results and return human-readable Markdown strings.
"""

from __future__ import annotations

from datetime import datetime

from expense_care.core.currency import format_currency
from expense_care.core.dates import format_display_date, period_label
from expense_care.models.results import (
    AllBudgetStatuses,
    BudgetStatus,
    DailySpending,
    ForecastResult,
    PeriodSummary,
    StreakResult,
)
from expense_care.models.schemas import (
    Budget,
    BudgetPeriod,
    Currency,
    Expense,
    HealthStatus,
)

_STATUS_TAGS = {
    HealthStatus.SAFE: "OK",
    HealthStatus.WARNING: "!",
    HealthStatus.OVER: "!!",
}


def _remaining_text(status: BudgetStatus, currency: Currency) -> str:
    if status.remaining >= 0:
        return f"{format_currency(status.remaining, currency)} left"
    return f"{format_currency(abs(status.remaining), currency)} over"


def warning_message(status: BudgetStatus, currency: Currency, period: str = "daily") -> str | None:
    """Banner text for a period in ``warning`` or ``over``; ``None`` when safe."""
    if status.status == HealthStatus.SAFE:
        return None
    if status.status == HealthStatus.OVER:
        if status.remaining == 0:
            return f"You've reached your {period} budget limit"
        return (
            f"You've exceeded your {period} budget by "
            f"{format_currency(abs(status.remaining), currency)}"
        )
    return f"You've used {round(status.percent_used)}% of your {period} budget"


def format_budget_statuses(statuses: AllBudgetStatuses, budget: Budget) -> str:
    currency = budget.currency
    lines = ["## Budget Status\n"]
    rows = [
        (BudgetPeriod.DAILY, statuses.daily, budget.daily_limit),
        (BudgetPeriod.WEEKLY, statuses.weekly, budget.weekly_limit),
        (BudgetPeriod.MONTHLY, statuses.monthly, budget.monthly_limit),
    ]
    for period, status, limit in rows:
        if status is None:
            lines.append(f"- **{period_label(period)}:** no {period.value} limit set")
            continue
        lines.append(
            f"- [{_STATUS_TAGS[status.status]}] **{period_label(period)}:** "
            f"{format_currency(status.total_spent, currency)} of "
            f"{format_currency(limit, currency)} "
            f"({status.percent_used:.0f}%) | {_remaining_text(status, currency)}"
        )

    banner = warning_message(statuses.daily, currency)
    if banner:
        lines.append(f"\n**Warning:** {banner}")
    return "\n".join(lines)


def format_category_summary(
    summary: PeriodSummary,
    currency: Currency,
    title: str,
) -> str:
    if not summary.categories:
        return f"No expenses recorded for {title}."

    lines = [
        f"## Spending by Category ({title})\n",
        f"**Total:** {format_currency(summary.total, currency)}\n",
        "| Category | Amount | Share |",
        "|---|---|---|",
    ]
    for item in summary.categories:
        lines.append(
            f"| {item.category.label} "
            f"| {format_currency(item.amount, currency)} "
            f"| {item.percent:.1f}% |"
        )
    return "\n".join(lines)


def streak_message(streak_days: int) -> str:
    """Encouragement line for a streak length."""
    if streak_days == 0:
        return "Start fresh today!"
    if streak_days == 1:
        return "Great start! Keep it up!"
    if streak_days <= 3:
        return "You're building momentum!"
    if streak_days <= 7:
        return "Impressive discipline!"
    if streak_days <= 14:
        return "You're on fire!"
    if streak_days <= 30:
        return "Legendary self-control!"
    return "Absolutely unstoppable!"


def format_streak(result: StreakResult) -> str:
    unit = "day" if result.streak_days == 1 else "days"
    today = (
        "Today is still within your daily limit."
        if result.is_active_today
        else "Today is over your daily limit."
    )
    return "\n".join([
        f"## Budget Streak: {result.streak_days} {unit}\n",
        streak_message(result.streak_days),
        "",
        today,
    ])


def format_forecast(result: ForecastResult, monthly_limit: float, currency: Currency) -> str:
    """Month-end projection with a headline verdict."""
    if result.status == HealthStatus.OVER:
        title = "Danger"
        message = (
            "Projected to overspend by "
            f"{format_currency(result.projected_total - monthly_limit, currency)}"
        )
    elif result.status == HealthStatus.WARNING:
        title = "Watch Out"
        message = "Nearing your monthly limit"
    else:
        title = "On Track"
        message = (
            "Projected to save "
            f"{format_currency(monthly_limit - result.projected_total, currency)}"
        )

    lines = [
        f"## [{_STATUS_TAGS[result.status]}] Monthly Forecast: {title}\n",
        f"- **Monthly limit:** {format_currency(monthly_limit, currency)}",
        f"- **Spent so far:** {format_currency(result.total_spent, currency)} "
        f"({result.days_elapsed} days)",
        f"- **Daily rate:** {format_currency(result.current_burn_rate, currency)}/day",
        f"- **Projected total:** {format_currency(result.projected_total, currency)} "
        f"({result.days_remaining} days left)",
        f"- **Safe to spend:** {format_currency(result.safe_daily_limit, currency)}/day",
        f"\n**Status:** {message}",
    ]
    return "\n".join(lines)


def format_spending_comparison(
    days: list[DailySpending],
    currency: Currency,
    daily_limit: float | None = None,
) -> str:
    lines = [f"## Last {len(days)} Days\n"]
    if daily_limit is not None:
        lines.append(f"Daily limit: {format_currency(daily_limit, currency)}\n")
    for day in days:
        over = daily_limit is not None and day.amount > daily_limit
        marker = " !!" if over else ""
        lines.append(
            f"- {day.day_label} ({day.date.isoformat()}): "
            f"{format_currency(day.amount, currency)}{marker}"
        )
    return "\n".join(lines)


def format_expenses(
    expenses: list[Expense],
    currency: Currency,
    limit: int,
    reference_date: datetime | None = None,
) -> str:
    shown = sorted(expenses, key=lambda e: e.date, reverse=True)[:limit]
    if not shown:
        return "No expenses found matching your criteria."

    lines = [f"## Expenses ({len(shown)} shown)\n"]
    for e in shown:
        lines.append(
            f"- {format_display_date(e.date, reference_date)} {e.date:%H:%M} "
            f"**{format_currency(e.amount, currency)}** "
            f"| {e.category.label} "
            f"| `{e.id}`"
        )
        if e.note:
            lines.append(f"  _Note: {e.note}_")
    return "\n".join(lines)


def format_expense_saved(expense: Expense, currency: Currency, action: str = "added") -> str:
    lines = [
        f"Expense {action}!\n",
        f"- **Amount:** {format_currency(expense.amount, currency)}",
        f"- **Category:** {expense.category.label}",
        f"- **Date:** {expense.date:%Y-%m-%d %H:%M}",
        f"- **ID:** `{expense.id}`",
    ]
    if expense.note:
        lines.append(f"- **Note:** {expense.note}")
    return "\n".join(lines)


def format_budget_created(budget: Budget) -> str:
    currency = budget.currency
    lines = [
        "Budget created and set as active!\n",
        f"- **Daily limit:** {format_currency(budget.daily_limit, currency)}",
    ]
    if budget.weekly_limit:
        lines.append(f"- **Weekly limit:** {format_currency(budget.weekly_limit, currency)}")
    if budget.monthly_limit:
        lines.append(f"- **Monthly limit:** {format_currency(budget.monthly_limit, currency)}")
    lines.append(f"- **Currency:** {currency.value}")
    lines.append(f"- **Runs:** {budget.start_date:%Y-%m-%d} to {budget.end_date:%Y-%m-%d}")
    return "\n".join(lines)
