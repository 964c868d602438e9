"""Tests for the JSON snapshot store."""

import json
from datetime import datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

from expense_care.core.store import SnapshotStore, StoreError
from expense_care.models.schemas import (
    CategoryKey,
    CreateBudgetInput,
    CreateExpenseInput,
    Currency,
    UpdateExpenseInput,
)


@pytest.fixture
def store(tmp_path):
    """Store backed by a temp file."""
    return SnapshotStore(data_file=str(tmp_path / "data.json"))


def _budget_input(**overrides) -> CreateBudgetInput:
    data = {
        "daily_limit": 50,
        "weekly_limit": 300,
        "start_date": datetime(2025, 1, 1),
        "end_date": datetime(2025, 12, 31),
    }
    data.update(overrides)
    return CreateBudgetInput(**data)


def _expense_input(**overrides) -> CreateExpenseInput:
    data = {"amount": 12.5, "category": "food", "date": datetime(2025, 3, 12, 9, 0)}
    data.update(overrides)
    return CreateExpenseInput(**data)


class TestBudgets:
    def test_empty_store(self, store):
        snap = store.snapshot()
        assert snap.expenses == ()
        assert snap.budget is None

    def test_create_budget_is_active(self, store):
        budget = store.create_budget(_budget_input(currency="EUR"))
        assert budget.is_active
        assert budget.currency == Currency.EUR
        assert store.get_active_budget() == budget

    def test_new_budget_deactivates_previous(self, store):
        first = store.create_budget(_budget_input())
        second = store.create_budget(_budget_input(
            daily_limit=80, start_date=datetime(2025, 6, 1),
        ))
        assert store.get_active_budget().id == second.id
        history = store.get_budget_history()
        assert [b.id for b in history] == [second.id, first.id]
        assert [b.is_active for b in history] == [True, False]

    def test_deactivate_budget(self, store):
        budget = store.create_budget(_budget_input())
        store.deactivate_budget(budget.id)
        assert store.get_active_budget() is None

    def test_rejected_budget_keeps_previous_active(self, store, tmp_path):
        current = store.create_budget(_budget_input())
        bad = CreateBudgetInput.model_construct(
            daily_limit=float("nan"),
            weekly_limit=None,
            monthly_limit=None,
            currency=Currency.USD,
            start_date=datetime(2025, 6, 1),
            end_date=datetime(2025, 12, 31),
        )
        with pytest.raises(ValidationError):
            store.create_budget(bad)

        assert store.get_active_budget() == current
        assert store.get_budget_history() == [current]
        reloaded = SnapshotStore(data_file=str(tmp_path / "data.json"))
        assert reloaded.get_active_budget() == current

    def test_deactivate_unknown_budget(self, store):
        with pytest.raises(StoreError, match="No budget found"):
            store.deactivate_budget("nope")


class TestExpenses:
    def test_add_requires_active_budget(self, store):
        with pytest.raises(StoreError, match="set up a budget"):
            store.add_expense(_expense_input())

    def test_add_expense(self, store):
        store.create_budget(_budget_input())
        expense = store.add_expense(_expense_input(note="lunch"))
        assert expense.id
        assert expense.category == CategoryKey.FOOD
        assert expense.note == "lunch"
        assert store.snapshot().expenses == (expense,)

    def test_add_defaults_date_to_now(self, store):
        store.create_budget(_budget_input())
        before = datetime.now()
        expense = store.add_expense(CreateExpenseInput(amount=3, category="transport"))
        assert before <= expense.date <= datetime.now()

    def test_expenses_newest_first(self, store):
        store.create_budget(_budget_input())
        old = store.add_expense(_expense_input(date=datetime(2025, 3, 1)))
        new = store.add_expense(_expense_input(date=datetime(2025, 3, 20)))
        assert store.get_expenses() == (new, old)

    def test_update_expense(self, store):
        store.create_budget(_budget_input())
        expense = store.add_expense(_expense_input())
        updated = store.update_expense(
            expense.id, UpdateExpenseInput(amount=20, category="bills")
        )
        assert updated.id == expense.id
        assert updated.amount == 20
        assert updated.category == CategoryKey.BILLS
        assert updated.date == expense.date
        assert store.get_expenses() == (updated,)

    def test_update_unknown_expense(self, store):
        with pytest.raises(StoreError, match="No expense found"):
            store.update_expense("missing", UpdateExpenseInput(amount=1))

    def test_delete_expense(self, store):
        store.create_budget(_budget_input())
        expense = store.add_expense(_expense_input())
        removed = store.delete_expense(expense.id)
        assert removed == expense
        assert store.get_expenses() == ()

    def test_delete_unknown_expense(self, store):
        with pytest.raises(StoreError):
            store.delete_expense("missing")

    def test_snapshot_is_not_affected_by_later_writes(self, store):
        store.create_budget(_budget_input())
        store.add_expense(_expense_input())
        snap = store.snapshot()
        store.add_expense(_expense_input(amount=99))
        assert len(snap.expenses) == 1
        assert len(store.snapshot().expenses) == 2


class TestPersistence:
    def test_round_trips_through_disk(self, tmp_path):
        path = str(tmp_path / "data.json")
        store = SnapshotStore(data_file=path)
        budget = store.create_budget(_budget_input(monthly_limit=1000))
        expense = store.add_expense(_expense_input(note="coffee"))

        reloaded = SnapshotStore(data_file=path)
        assert reloaded.get_active_budget() == budget
        assert reloaded.get_expenses() == (expense,)

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "data.json"
        store = SnapshotStore(data_file=str(path))
        store.create_budget(_budget_input())
        assert path.exists()

    def test_lenient_ingestion_of_stored_records(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({
            "expenses": [{
                "id": "e1", "amount": 4.5, "category": "pets",
                "date": "2025-03-12T10:00:00", "note": None,
            }],
            "budgets": [{
                "id": "b1", "daily_limit": 40, "currency": "CHF",
                "start_date": "2025-01-01T00:00:00",
                "end_date": "2025-12-31T00:00:00", "is_active": True,
            }],
        }))
        store = SnapshotStore(data_file=str(path))
        snap = store.snapshot()
        assert snap.expenses[0].category == CategoryKey.OTHER
        assert snap.expenses[0].note == ""
        assert snap.budget.currency == Currency.UNKNOWN

    def test_failed_write_leaves_records_unchanged(self, store, monkeypatch):
        budget = store.create_budget(_budget_input())
        expense = store.add_expense(_expense_input())

        def fail_write(self, *args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "write_text", fail_write)

        with pytest.raises(OSError):
            store.add_expense(_expense_input(amount=99))
        with pytest.raises(OSError):
            store.update_expense(expense.id, UpdateExpenseInput(amount=1))
        with pytest.raises(OSError):
            store.delete_expense(expense.id)
        with pytest.raises(OSError):
            store.create_budget(_budget_input(start_date=datetime(2025, 6, 1)))

        assert store.get_expenses() == (expense,)
        assert store.get_active_budget() == budget
        assert store.get_budget_history() == [budget]
