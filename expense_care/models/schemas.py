"""Pydantic models for expense and budget data.

Snapshot models (``Expense``, ``Budget``) are lenient: they resolve unknown
category keys and currency codes to their fallback members and normalise
timestamps to naive local time. Input models are strict and reject bad
values with user-facing messages.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


MAX_EXPENSE_AMOUNT = 1_000_000
MAX_NOTE_LENGTH = 200
MIN_BUDGET_LIMIT = 1
MAX_BUDGET_LIMIT = 1_000_000


def _to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# --- Enums ---

class CategoryKey(str, Enum):
    FOOD = "food"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    BILLS = "bills"
    HEALTH = "health"
    EDUCATION = "education"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip().lower():
                    return member
        return cls.OTHER

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[CategoryKey, str] = {
    CategoryKey.FOOD: "Food & Drinks",
    CategoryKey.TRANSPORT: "Transport",
    CategoryKey.SHOPPING: "Shopping",
    CategoryKey.ENTERTAINMENT: "Entertainment",
    CategoryKey.BILLS: "Bills & Utilities",
    CategoryKey.HEALTH: "Health",
    CategoryKey.EDUCATION: "Education",
    CategoryKey.OTHER: "Other",
}


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    THB = "THB"
    JPY = "JPY"
    AUD = "AUD"
    # ISO 4217 code for "no currency"
    UNKNOWN = "XXX"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip().upper():
                    return member
        return cls.UNKNOWN


DEFAULT_CURRENCY = Currency.USD
SUPPORTED_CURRENCIES = tuple(c for c in Currency if c is not Currency.UNKNOWN)


class HealthStatus(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    OVER = "over"


class BudgetPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# --- Snapshot Models ---

class Expense(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    amount: float = Field(..., gt=0)
    category: CategoryKey = CategoryKey.OTHER
    date: datetime
    note: str = ""

    @field_validator("category", mode="before")
    @classmethod
    def _resolve_category(cls, v):
        if v is None:
            return CategoryKey.OTHER
        return CategoryKey(v)

    @field_validator("date")
    @classmethod
    def _local_date(cls, v: datetime) -> datetime:
        return _to_local_naive(v)

    @field_validator("note", mode="before")
    @classmethod
    def _note_default(cls, v):
        return v or ""


class Budget(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    daily_limit: float = Field(..., gt=0)
    weekly_limit: Optional[float] = Field(None, gt=0)
    monthly_limit: Optional[float] = Field(None, gt=0)
    currency: Currency = DEFAULT_CURRENCY
    start_date: datetime
    end_date: datetime
    is_active: bool = True

    @field_validator("currency", mode="before")
    @classmethod
    def _resolve_currency(cls, v):
        if v is None:
            return DEFAULT_CURRENCY
        return Currency(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def _local_dates(cls, v: datetime) -> datetime:
        return _to_local_naive(v)


# --- Input Models for Creating/Updating ---

def _check_category(value):
    if isinstance(value, CategoryKey):
        return value
    valid = {c.value for c in CategoryKey}
    if not isinstance(value, str) or value.strip().lower() not in valid:
        raise ValueError(
            f"Please select a valid category ({', '.join(sorted(valid))})."
        )
    return value.strip().lower()


def _check_amount(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError("Amount must be a valid number.")
    if value <= 0:
        raise ValueError("Amount must be greater than zero.")
    if value > MAX_EXPENSE_AMOUNT:
        raise ValueError("Amount seems too large. Please verify.")
    return value


def _check_note(value) -> str:
    value = (value or "").strip()
    if len(value) > MAX_NOTE_LENGTH:
        raise ValueError(f"Note must be {MAX_NOTE_LENGTH} characters or fewer.")
    return value


def _check_limit(value: Optional[float], label: str) -> Optional[float]:
    if value is None:
        return value
    if not math.isfinite(value):
        raise ValueError(f"{label} must be a valid number.")
    if value < MIN_BUDGET_LIMIT:
        raise ValueError(f"{label} must be at least {MIN_BUDGET_LIMIT}.")
    if value > MAX_BUDGET_LIMIT:
        raise ValueError(f"{label} cannot exceed {MAX_BUDGET_LIMIT:,}.")
    return value


class CreateExpenseInput(BaseModel):
    """Input for recording a new expense."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    amount: float = Field(..., description="Amount spent, in the budget's currency")
    category: CategoryKey = Field(..., description="Expense category key")
    note: str = Field(default="", description="Optional note")
    date: Optional[datetime] = Field(
        None, description="When the expense happened (ISO 8601). Defaults to now."
    )

    @field_validator("amount")
    @classmethod
    def _valid_amount(cls, v: float) -> float:
        return _check_amount(v)

    @field_validator("category", mode="before")
    @classmethod
    def _strict_category(cls, v):
        return _check_category(v)

    @field_validator("note", mode="before")
    @classmethod
    def _valid_note(cls, v):
        return _check_note(v)

    @field_validator("date")
    @classmethod
    def _local_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_local_naive(v) if v is not None else v


class UpdateExpenseInput(BaseModel):
    """Input for editing an existing expense. Only provided fields change."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    amount: Optional[float] = Field(None, description="New amount")
    category: Optional[CategoryKey] = Field(None, description="New category key")
    note: Optional[str] = Field(None, description="New note (empty string clears it)")
    date: Optional[datetime] = Field(None, description="New date (ISO 8601)")

    @field_validator("amount")
    @classmethod
    def _valid_amount(cls, v: Optional[float]) -> Optional[float]:
        return v if v is None else _check_amount(v)

    @field_validator("category", mode="before")
    @classmethod
    def _strict_category(cls, v):
        return v if v is None else _check_category(v)

    @field_validator("note", mode="before")
    @classmethod
    def _valid_note(cls, v):
        return v if v is None else _check_note(v)

    @field_validator("date")
    @classmethod
    def _local_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_local_naive(v) if v is not None else v

    @model_validator(mode="after")
    def _at_least_one_field(self):
        if all(
            getattr(self, f) is None for f in ("amount", "category", "note", "date")
        ):
            raise ValueError("At least one field to update must be provided.")
        return self


class CreateBudgetInput(BaseModel):
    """Input for creating a new active budget."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    daily_limit: float = Field(..., description="Daily spending limit")
    weekly_limit: Optional[float] = Field(None, description="Optional weekly limit")
    monthly_limit: Optional[float] = Field(None, description="Optional monthly limit")
    currency: Currency = Field(default=DEFAULT_CURRENCY, description="ISO 4217 currency code")
    start_date: datetime = Field(..., description="Budget start (ISO 8601)")
    end_date: datetime = Field(..., description="Budget end (ISO 8601)")

    @field_validator("daily_limit")
    @classmethod
    def _check_daily(cls, v: float) -> float:
        return _check_limit(v, "Daily limit")

    @field_validator("weekly_limit")
    @classmethod
    def _check_weekly(cls, v: Optional[float]) -> Optional[float]:
        return _check_limit(v, "Weekly limit")

    @field_validator("monthly_limit")
    @classmethod
    def _check_monthly(cls, v: Optional[float]) -> Optional[float]:
        return _check_limit(v, "Monthly limit")

    @field_validator("currency", mode="before")
    @classmethod
    def _strict_currency(cls, v):
        if isinstance(v, Currency) and v is not Currency.UNKNOWN:
            return v
        code = v.strip().upper() if isinstance(v, str) else ""
        if len(code) != 3:
            raise ValueError("Currency must be a valid 3-letter ISO code.")
        if code not in {c.value for c in SUPPORTED_CURRENCIES}:
            raise ValueError(
                f"Currency must be one of: {', '.join(c.value for c in SUPPORTED_CURRENCIES)}."
            )
        return code

    @field_validator("start_date", "end_date")
    @classmethod
    def _local_dates(cls, v: datetime) -> datetime:
        return _to_local_naive(v)

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date.")
        return self


# --- MCP Tool Input Models ---


class CategorySummaryInput(BaseModel):
    """Input for a category breakdown over a date range."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    start_date: Optional[datetime] = Field(
        None, description="First day of the range (YYYY-MM-DD). Defaults to today."
    )
    end_date: Optional[datetime] = Field(
        None, description="Last day of the range (YYYY-MM-DD). Defaults to start_date."
    )
    period: Optional[BudgetPeriod] = Field(
        None,
        description="Use the current daily/weekly/monthly period instead of explicit dates",
    )

    @field_validator("start_date", "end_date")
    @classmethod
    def _local_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_local_naive(v) if v is not None else v


class StreakInput(BaseModel):
    """Input for the under-budget streak calculation."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    max_lookback_days: int = Field(
        default=365, ge=1, le=3650, description="How many days back to look at most"
    )


class SpendingComparisonInput(BaseModel):
    """Input for the trailing daily spending series."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    num_days: int = Field(default=7, ge=1, le=31, description="Number of days to show")


class ListExpensesInput(BaseModel):
    """Input for listing recorded expenses."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    category: Optional[CategoryKey] = Field(None, description="Only this category")
    since_date: Optional[datetime] = Field(
        None, description="Only expenses on or after this date (YYYY-MM-DD)"
    )
    limit: int = Field(default=25, ge=1, le=100, description="Max results")

    @field_validator("category", mode="before")
    @classmethod
    def _strict_category(cls, v):
        return v if v is None else _check_category(v)

    @field_validator("since_date")
    @classmethod
    def _local_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_local_naive(v) if v is not None else v
