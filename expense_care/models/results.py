"""Result dataclasses for budget analytics outputs.

These are derived values recomputed from an expense snapshot on every
call. Frozen dataclasses rather than Pydantic models since they don't
need validation and are never persisted.
"""

from dataclasses import dataclass, field
from datetime import date

from expense_care.models.schemas import CategoryKey, HealthStatus


@dataclass(frozen=True)
class BudgetStatus:
    """Spending against one period's limit."""
    total_spent: float
    remaining: float        # may be negative
    percent_used: float     # may exceed 100
    status: HealthStatus


@dataclass(frozen=True)
class AllBudgetStatuses:
    """Status per period. ``None`` means the period has no configured limit."""
    daily: BudgetStatus
    weekly: BudgetStatus | None = None
    monthly: BudgetStatus | None = None


@dataclass(frozen=True)
class CategorySummaryItem:
    """One category's share of a period's spending."""
    category: CategoryKey
    amount: float
    percent: float  # 0-100, share of the period total


@dataclass(frozen=True)
class PeriodSummary:
    """Category breakdown for a date range, largest category first."""
    total: float = 0.0
    categories: list[CategorySummaryItem] = field(default_factory=list)


@dataclass(frozen=True)
class StreakResult:
    """Consecutive days at or under the daily limit, counting back from today."""
    streak_days: int
    is_active_today: bool


@dataclass(frozen=True)
class ForecastResult:
    """Linear month-end projection from the average daily spend so far."""
    total_spent: float
    projected_total: float
    safe_daily_limit: float   # what can still be spent per remaining day
    status: HealthStatus
    current_burn_rate: float  # average spend per elapsed day
    days_elapsed: int         # includes today
    days_remaining: int       # excludes today


@dataclass(frozen=True)
class DailySpending:
    """A single day in the trailing comparison series."""
    date: date
    day_label: str  # "Today" or a short weekday name
    amount: float
    is_today: bool
