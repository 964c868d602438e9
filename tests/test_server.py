"""Tests for MCP tool wiring, using a store-backed fake context."""

from datetime import datetime
from types import SimpleNamespace

import pytest

from expense_care.core.store import SnapshotStore
from expense_care.mcp import server
from expense_care.models.schemas import (
    CategorySummaryInput,
    CreateBudgetInput,
    CreateExpenseInput,
    ListExpensesInput,
    SpendingComparisonInput,
    StreakInput,
    UpdateExpenseInput,
)


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(data_file=str(tmp_path / "data.json"))


@pytest.fixture
def ctx(store):
    lifespan_context = {"store": store, "warning_threshold": 80.0}
    return SimpleNamespace(
        request_context=SimpleNamespace(lifespan_context=lifespan_context)
    )


@pytest.fixture
async def budgeted(ctx):
    await server.expense_setup_budget(
        CreateBudgetInput(
            daily_limit=50,
            weekly_limit=300,
            start_date=datetime(2020, 1, 1),
            end_date=datetime(2100, 1, 1),
        ),
        ctx,
    )
    return ctx


class TestWithoutBudget:
    async def test_status_asks_for_budget(self, ctx):
        result = await server.expense_budget_status(ctx)
        assert "No active budget" in result

    async def test_add_expense_rejected(self, ctx):
        result = await server.expense_add(
            CreateExpenseInput(amount=5, category="food"), ctx
        )
        assert "set up a budget" in result

    async def test_list_is_empty(self, ctx):
        result = await server.expense_list(ListExpensesInput(), ctx)
        assert result == "No expenses found matching your criteria."


class TestTools:
    async def test_setup_budget(self, ctx):
        result = await server.expense_setup_budget(
            CreateBudgetInput(
                daily_limit=40,
                start_date=datetime(2025, 1, 1),
                end_date=datetime(2025, 12, 31),
            ),
            ctx,
        )
        assert result.startswith("Budget created")

    async def test_add_and_status(self, budgeted):
        added = await server.expense_add(
            CreateExpenseInput(amount=45, category="food", note="dinner"), budgeted
        )
        assert added.startswith("Expense added!")

        status = await server.expense_budget_status(budgeted)
        assert "**Today:** $45.00 of $50.00" in status
        assert "You've used 90% of your daily budget" in status
        assert "no monthly limit set" in status

    async def test_category_summary_for_period(self, budgeted):
        await server.expense_add(CreateExpenseInput(amount=10, category="transport"), budgeted)
        result = await server.expense_category_summary(
            CategorySummaryInput(period="daily"), budgeted
        )
        assert "Spending by Category (Today)" in result
        assert "Transport" in result

    async def test_category_summary_defaults_to_today(self, budgeted):
        result = await server.expense_category_summary(CategorySummaryInput(), budgeted)
        assert result == "No expenses recorded for Today."

    async def test_streak(self, budgeted):
        result = await server.expense_streak(StreakInput(max_lookback_days=3), budgeted)
        assert "## Budget Streak" in result

    async def test_forecast(self, budgeted):
        result = await server.expense_forecast(budgeted)
        assert "Monthly Forecast" in result

    async def test_spending_comparison(self, budgeted):
        result = await server.expense_spending_comparison(
            SpendingComparisonInput(num_days=3), budgeted
        )
        assert "## Last 3 Days" in result
        assert "- Today (" in result

    async def test_update_and_delete(self, budgeted, store):
        await server.expense_add(CreateExpenseInput(amount=10, category="food"), budgeted)
        expense_id = store.get_expenses()[0].id

        updated = await server.expense_update(
            expense_id, UpdateExpenseInput(amount=12), budgeted
        )
        assert updated.startswith("Expense updated!")
        assert "$12.00" in updated

        deleted = await server.expense_delete(expense_id, budgeted)
        assert deleted.startswith("Expense deleted!")
        assert store.get_expenses() == ()

    async def test_delete_unknown_expense(self, budgeted):
        result = await server.expense_delete("missing", budgeted)
        assert "No expense found" in result

    async def test_list_filters_by_category(self, budgeted):
        await server.expense_add(CreateExpenseInput(amount=10, category="food"), budgeted)
        await server.expense_add(CreateExpenseInput(amount=20, category="health"), budgeted)
        result = await server.expense_list(ListExpensesInput(category="health"), budgeted)
        assert "(1 shown)" in result
        assert "Health" in result
        assert "Food" not in result
