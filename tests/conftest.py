"""Shared test fixtures for expense care tests."""

from datetime import datetime

from expense_care.models.schemas import Budget, CategoryKey, Currency, Expense


def make_expense(
    amount: float = 12.5,
    category: str = "food",
    date: datetime = datetime(2025, 3, 12, 12, 0),
    note: str = "",
    id: str | None = None,
) -> Expense:
    return Expense(
        id=id or f"exp-{category}-{date:%Y%m%d%H%M%S}-{amount}",
        amount=amount,
        category=CategoryKey(category),
        date=date,
        note=note,
    )


def make_budget(
    daily_limit: float = 50.0,
    weekly_limit: float | None = 300.0,
    monthly_limit: float | None = 1200.0,
    currency: str = "USD",
    start_date: datetime = datetime(2025, 1, 1),
    end_date: datetime = datetime(2025, 12, 31),
    is_active: bool = True,
) -> Budget:
    return Budget(
        id="budget-1",
        daily_limit=daily_limit,
        weekly_limit=weekly_limit,
        monthly_limit=monthly_limit,
        currency=Currency(currency),
        start_date=start_date,
        end_date=end_date,
        is_active=is_active,
    )
