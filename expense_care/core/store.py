"""Local JSON store for expenses and budgets.

Stands in for the app's document database: it accepts create/update/delete
requests and hands out immutable snapshots that the analyzers recompute
from. Only one budget is active at a time.
"""

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from expense_care.models.schemas import (
    Budget,
    CreateBudgetInput,
    CreateExpenseInput,
    Expense,
    UpdateExpenseInput,
)

logger = logging.getLogger("expense_care")

DEFAULT_DATA_FILE = Path.home() / ".expense-care" / "data.json"


class StoreError(Exception):
    """Raised when a store request cannot be applied."""


@dataclass(frozen=True)
class Snapshot:
    """Expenses and the active budget as of one moment."""
    expenses: tuple[Expense, ...]
    budget: Optional[Budget]


class SnapshotStore:
    """Persists expenses and budgets to a single JSON file."""

    def __init__(self, data_file: Optional[str] = None):
        self._data_file = data_file or str(DEFAULT_DATA_FILE)
        self._expenses: dict[str, Expense] = {}
        self._budgets: dict[str, Budget] = {}
        self._load()

    @property
    def data_file(self) -> str:
        return self._data_file

    def _load(self):
        """Load records from disk. A missing file is an empty store."""
        path = Path(self._data_file)
        if not path.exists():
            return
        raw = json.loads(path.read_text())
        self._expenses = {
            e.id: e for e in (Expense.model_validate(item) for item in raw.get("expenses", []))
        }
        self._budgets = {
            b.id: b for b in (Budget.model_validate(item) for item in raw.get("budgets", []))
        }
        logger.debug(
            "Loaded %d expenses and %d budgets from %s",
            len(self._expenses), len(self._budgets), path,
        )

    def _commit(
        self,
        expenses: Optional[dict[str, Expense]] = None,
        budgets: Optional[dict[str, Budget]] = None,
    ):
        """Write the new records to disk, then make them current.

        Memory only changes once the write succeeds.
        """
        expenses = self._expenses if expenses is None else expenses
        budgets = self._budgets if budgets is None else budgets
        path = Path(self._data_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "expenses": [e.model_dump(mode="json") for e in expenses.values()],
            "budgets": [b.model_dump(mode="json") for b in budgets.values()],
        }
        path.write_text(json.dumps(data, indent=2))
        logger.debug("Saved store to %s", path)
        self._expenses = expenses
        self._budgets = budgets

    # --- Reads ---

    def snapshot(self) -> Snapshot:
        return Snapshot(expenses=self.get_expenses(), budget=self.get_active_budget())

    def get_expenses(self) -> tuple[Expense, ...]:
        """All expenses, newest first."""
        return tuple(sorted(self._expenses.values(), key=lambda e: e.date, reverse=True))

    def get_active_budget(self) -> Optional[Budget]:
        for b in self._budgets.values():
            if b.is_active:
                return b
        return None

    def get_budget_history(self) -> list[Budget]:
        """All budgets, most recent start date first."""
        return sorted(self._budgets.values(), key=lambda b: b.start_date, reverse=True)

    # --- Expenses ---

    def add_expense(self, data: CreateExpenseInput) -> Expense:
        if self.get_active_budget() is None:
            raise StoreError("Please set up a budget before adding expenses.")
        expense = Expense(
            id=uuid.uuid4().hex,
            amount=data.amount,
            category=data.category,
            date=data.date or datetime.now(),
            note=data.note,
        )
        self._commit(expenses={**self._expenses, expense.id: expense})
        return expense

    def update_expense(self, expense_id: str, data: UpdateExpenseInput) -> Expense:
        current = self._get_expense(expense_id)
        updated = current.model_copy(update=data.model_dump(exclude_none=True))
        # model_copy skips validation; round-trip to re-check the snapshot invariants
        updated = Expense.model_validate(updated.model_dump())
        self._commit(expenses={**self._expenses, expense_id: updated})
        return updated

    def delete_expense(self, expense_id: str) -> Expense:
        removed = self._get_expense(expense_id)
        expenses = dict(self._expenses)
        del expenses[expense_id]
        self._commit(expenses=expenses)
        return removed

    def _get_expense(self, expense_id: str) -> Expense:
        try:
            return self._expenses[expense_id]
        except KeyError:
            raise StoreError(f"No expense found with id '{expense_id}'.") from None

    # --- Budgets ---

    def create_budget(self, data: CreateBudgetInput) -> Budget:
        """Create a new active budget, deactivating the current one."""
        budget = Budget(
            id=uuid.uuid4().hex,
            daily_limit=data.daily_limit,
            weekly_limit=data.weekly_limit,
            monthly_limit=data.monthly_limit,
            currency=data.currency,
            start_date=data.start_date,
            end_date=data.end_date,
            is_active=True,
        )

        budgets = {
            budget_id: b.model_copy(update={"is_active": False}) if b.is_active else b
            for budget_id, b in self._budgets.items()
        }
        budgets[budget.id] = budget
        self._commit(budgets=budgets)
        return budget

    def deactivate_budget(self, budget_id: str) -> Budget:
        if budget_id not in self._budgets:
            raise StoreError(f"No budget found with id '{budget_id}'.")
        budget = self._budgets[budget_id].model_copy(update={"is_active": False})
        self._commit(budgets={**self._budgets, budget_id: budget})
        return budget
