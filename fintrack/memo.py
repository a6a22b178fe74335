"""Memoized aggregates keyed on immutable snapshot tuples.

An entry is valid for exactly the tuples it was computed from. Adding or
deleting a record produces a new tuple and so a new key, which means an
entry can never be served for data it was not computed from.
"""

from datetime import date
from functools import lru_cache
from typing import Optional

from fintrack import aggregates, config
from fintrack.domain import Budget, Category, Expense, IncomeSource
from fintrack.transforms import category_lookup


@lru_cache(maxsize=128)
def expense_summary(
    expenses: tuple[Expense, ...], categories: tuple[Category, ...]
) -> tuple:
    return aggregates.summarize_by_category(expenses, category_lookup(categories))


@lru_cache(maxsize=128)
def _budget_status(budgets: tuple, expenses: tuple, categories: tuple, windowed: bool) -> tuple:
    return aggregates.evaluate_budgets(budgets, expenses, category_lookup(categories), windowed)


def budget_status(
    budgets: tuple[Budget, ...],
    expenses: tuple[Expense, ...],
    categories: tuple[Category, ...],
    windowed: Optional[bool] = None,
) -> tuple:
    if windowed is None:
        windowed = config.budget_windowed()
    return _budget_status(budgets, expenses, categories, windowed)


@lru_cache(maxsize=128)
def monthly_income(sources: tuple[IncomeSource, ...]) -> float:
    return aggregates.total_monthly_income(sources)


@lru_cache(maxsize=128)
def expenses_in_window(expenses: tuple[Expense, ...], as_of: date, window_days: int) -> float:
    return aggregates.total_in_window(expenses, as_of, window_days)


def clear_caches() -> None:
    for cached in (expense_summary, _budget_status, monthly_income, expenses_in_window):
        cached.cache_clear()
