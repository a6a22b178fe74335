from dataclasses import dataclass
from datetime import date
from typing import NamedTuple, Optional

DAILY = "daily"
WEEKLY = "weekly"
BI_WEEKLY = "bi-weekly"
MONTHLY = "monthly"
QUARTERLY = "quarterly"
ANNUALLY = "annually"

FREQUENCIES = (DAILY, WEEKLY, BI_WEEKLY, MONTHLY, QUARTERLY, ANNUALLY)

UNKNOWN_CATEGORY = "Unknown"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class Expense:
    id: str
    user_id: str
    amount: float       # always > 0
    date: date
    category_id: str
    description: Optional[str] = None


# A spending limit for one category over [start_date, end_date]
@dataclass(frozen=True)
class Budget:
    id: str
    user_id: str
    category_id: str
    limit_amount: float
    start_date: date
    end_date: date
    alert_threshold: float  # 0-100


@dataclass(frozen=True)
class IncomeSource:
    id: str
    user_id: str
    name: str
    amount: float
    frequency: str      # one of FREQUENCIES
    description: Optional[str] = None


@dataclass(frozen=True)
class ExpenseSummary:
    category: str
    amount: float
    percentage: float


@dataclass(frozen=True)
class BudgetStatus:
    category: str
    spent: float
    limit: float
    percentage: float


class Snapshot(NamedTuple):
    categories: tuple
    expenses: tuple
    budgets: tuple
    income_sources: tuple


DEFAULT_CATEGORIES = (
    Category("1", "Housing", "Rent, mortgage, repairs"),
    Category("2", "Transportation", "Car payments, gas, public transit"),
    Category("3", "Food", "Groceries, dining out"),
    Category("4", "Utilities", "Electricity, water, internet"),
    Category("5", "Entertainment", "Movies, games, hobbies"),
    Category("6", "Healthcare", "Insurance, medications, doctor visits"),
    Category("7", "Personal", "Clothing, haircuts, gym"),
    Category("8", "Education", "Tuition, books, courses"),
)
