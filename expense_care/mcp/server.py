"""Expense Care MCP Server.

Exposes budget status, category breakdowns, streaks, forecasts and
expense bookkeeping as MCP tools. Every analysis tool takes a fresh
snapshot from the store and recomputes from it.
"""

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP

# Ensure project root is on sys.path so `expense_care` is importable when
# loaded directly by tools like `mcp dev` (which use importlib, not `python -m`).
_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

load_dotenv()

from expense_care.core.analyzers import (
    BUDGET_WARNING_THRESHOLD,
    compute_all_statuses,
    compute_streak,
    effective_monthly_limit,
    last_n_days,
    project_month,
    summarize_categories,
    summarize_period,
)
from expense_care.core.dates import period_label
from expense_care.core.store import Snapshot, SnapshotStore, StoreError
from expense_care.mcp.error_handling import handle_tool_errors
from expense_care.mcp.formatters import (
    format_budget_created,
    format_budget_statuses,
    format_category_summary,
    format_expense_saved,
    format_expenses,
    format_forecast,
    format_spending_comparison,
    format_streak,
)
from expense_care.models.schemas import (
    DEFAULT_CURRENCY,
    Budget,
    CategorySummaryInput,
    CreateBudgetInput,
    CreateExpenseInput,
    ListExpensesInput,
    SpendingComparisonInput,
    StreakInput,
    UpdateExpenseInput,
)


# --- Lifespan: initialize shared resources ---


@asynccontextmanager
async def app_lifespan(server: FastMCP):
    data_file = os.environ.get("EXPENSE_CARE_DATA_FILE") or None
    threshold = float(
        os.environ.get("EXPENSE_CARE_WARNING_THRESHOLD", BUDGET_WARNING_THRESHOLD)
    )
    store = SnapshotStore(data_file=data_file)

    yield {"store": store, "warning_threshold": threshold}


mcp = FastMCP("expense_care", lifespan=app_lifespan)


# --- Helpers to get dependencies from context ---


def _get_store(ctx) -> SnapshotStore:
    return ctx.request_context.lifespan_context["store"]


def _get_threshold(ctx) -> float:
    return ctx.request_context.lifespan_context["warning_threshold"]


def _require_budget(snapshot: Snapshot) -> Budget:
    if snapshot.budget is None:
        raise StoreError(
            "No active budget. Set one up with `expense_setup_budget` first."
        )
    return snapshot.budget


# --- Analysis Tools ---


@mcp.tool(
    name="expense_budget_status",
    annotations={
        "title": "Budget Status",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def expense_budget_status(ctx: Context) -> str:
    """Show spending against the daily, weekly and monthly limits."""
    snapshot = _get_store(ctx).snapshot()
    budget = _require_budget(snapshot)
    statuses = compute_all_statuses(
        budget, snapshot.expenses, warning_threshold=_get_threshold(ctx)
    )
    return format_budget_statuses(statuses, budget)


@mcp.tool(
    name="expense_category_summary",
    annotations={
        "title": "Spending by Category",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def expense_category_summary(params: CategorySummaryInput, ctx: Context) -> str:
    """Break down spending by category for a period or a date range."""
    snapshot = _get_store(ctx).snapshot()
    currency = snapshot.budget.currency if snapshot.budget else DEFAULT_CURRENCY

    if params.period is not None:
        summary = summarize_period(snapshot.expenses, params.period)
        title = period_label(params.period)
    else:
        start = params.start_date
        end = params.end_date or start
        if start is None:
            summary = summarize_period(snapshot.expenses, "daily")
            title = period_label("daily")
        else:
            summary = summarize_categories(snapshot.expenses, start, end)
            title = f"{start:%Y-%m-%d} to {end:%Y-%m-%d}"

    return format_category_summary(summary, currency, title)


@mcp.tool(
    name="expense_streak",
    annotations={
        "title": "Budget Streak",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def expense_streak(params: StreakInput, ctx: Context) -> str:
    """Count consecutive days spent within the daily limit."""
    snapshot = _get_store(ctx).snapshot()
    budget = _require_budget(snapshot)
    result = compute_streak(
        snapshot.expenses,
        budget.daily_limit,
        budget.start_date,
        max_lookback_days=params.max_lookback_days,
    )
    return format_streak(result)


@mcp.tool(
    name="expense_forecast",
    annotations={
        "title": "Monthly Forecast",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def expense_forecast(ctx: Context) -> str:
    """Project month-end spending from the current pace."""
    snapshot = _get_store(ctx).snapshot()
    budget = _require_budget(snapshot)
    monthly_limit = effective_monthly_limit(budget)
    result = project_month(snapshot.expenses, monthly_limit)
    return format_forecast(result, monthly_limit, budget.currency)


@mcp.tool(
    name="expense_spending_comparison",
    annotations={
        "title": "Recent Daily Spending",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def expense_spending_comparison(params: SpendingComparisonInput, ctx: Context) -> str:
    """Daily totals for the last few days, today last."""
    snapshot = _get_store(ctx).snapshot()
    budget = snapshot.budget
    days = last_n_days(snapshot.expenses, n=params.num_days)
    return format_spending_comparison(
        days,
        budget.currency if budget else DEFAULT_CURRENCY,
        daily_limit=budget.daily_limit if budget else None,
    )


@mcp.tool(
    name="expense_list",
    annotations={
        "title": "List Expenses",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def expense_list(params: ListExpensesInput, ctx: Context) -> str:
    """List recorded expenses, newest first."""
    snapshot = _get_store(ctx).snapshot()
    currency = snapshot.budget.currency if snapshot.budget else DEFAULT_CURRENCY

    filtered = []
    for e in snapshot.expenses:
        if params.category is not None and e.category != params.category:
            continue
        if params.since_date is not None and e.date < params.since_date:
            continue
        filtered.append(e)

    return format_expenses(filtered, currency, params.limit)


# --- Write Tools ---


@mcp.tool(
    name="expense_add",
    annotations={
        "title": "Add Expense",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def expense_add(params: CreateExpenseInput, ctx: Context) -> str:
    """Record a new expense against the active budget."""
    store = _get_store(ctx)
    expense = store.add_expense(params)
    budget = store.get_active_budget()
    return format_expense_saved(expense, budget.currency if budget else DEFAULT_CURRENCY)


@mcp.tool(
    name="expense_update",
    annotations={
        "title": "Update Expense",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def expense_update(expense_id: str, params: UpdateExpenseInput, ctx: Context) -> str:
    """Change the amount, category, note or date of an expense."""
    store = _get_store(ctx)
    expense = store.update_expense(expense_id, params)
    budget = store.get_active_budget()
    return format_expense_saved(
        expense, budget.currency if budget else DEFAULT_CURRENCY, action="updated"
    )


@mcp.tool(
    name="expense_delete",
    annotations={
        "title": "Delete Expense",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def expense_delete(expense_id: str, ctx: Context) -> str:
    """Delete an expense by its ID."""
    store = _get_store(ctx)
    expense = store.delete_expense(expense_id)
    budget = store.get_active_budget()
    return format_expense_saved(
        expense, budget.currency if budget else DEFAULT_CURRENCY, action="deleted"
    )


@mcp.tool(
    name="expense_setup_budget",
    annotations={
        "title": "Set Up Budget",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def expense_setup_budget(params: CreateBudgetInput, ctx: Context) -> str:
    """Create a new budget; the previous active budget is deactivated."""
    budget = _get_store(ctx).create_budget(params)
    return format_budget_created(budget)


# --- Entry point ---

if __name__ == "__main__":
    mcp.run()
