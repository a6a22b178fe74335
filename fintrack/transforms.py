import json
import logging
from datetime import date, datetime
from typing import Callable, Tuple

from fintrack.domain import (
    DEFAULT_CATEGORIES,
    UNKNOWN_CATEGORY,
    Budget,
    Category,
    Expense,
    IncomeSource,
    Snapshot,
)

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a stored snapshot cannot be turned into records."""


def parse_date(value) -> date:
    """Parse an ISO date; datetime strings keep only their date part."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def category_from_dict(d: dict) -> Category:
    return Category(id=str(d["id"]), name=d["name"], description=d.get("description"))


def expense_from_dict(d: dict) -> Expense:
    return Expense(
        id=str(d["id"]),
        user_id=str(d.get("userId", "")),
        amount=float(d["amount"]),
        date=parse_date(d["date"]),
        category_id=str(d["categoryId"]),
        description=d.get("description") or None,
    )


def budget_from_dict(d: dict) -> Budget:
    return Budget(
        id=str(d["id"]),
        user_id=str(d.get("userId", "")),
        category_id=str(d["categoryId"]),
        limit_amount=float(d["limitAmount"]),
        start_date=parse_date(d["startDate"]),
        end_date=parse_date(d["endDate"]),
        alert_threshold=float(d.get("alertThreshold", 80)),
    )


def income_source_from_dict(d: dict) -> IncomeSource:
    return IncomeSource(
        id=str(d["id"]),
        user_id=str(d.get("userId", "")),
        name=d["name"],
        amount=float(d["amount"]),
        frequency=d.get("frequency", "monthly"),
        description=d.get("description") or None,
    )


def snapshot_from_dict(data: dict) -> Snapshot:
    try:
        categories = tuple(category_from_dict(c) for c in data.get("categories", ()))
        return Snapshot(
            categories=categories or DEFAULT_CATEGORIES,
            expenses=tuple(expense_from_dict(e) for e in data.get("expenses", ())),
            budgets=tuple(budget_from_dict(b) for b in data.get("budgets", ())),
            income_sources=tuple(income_source_from_dict(s) for s in data.get("incomeSources", ())),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"malformed record: {e}") from e


def load_snapshot(path) -> Snapshot:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SnapshotError(f"{path} is not valid UTF-8 JSON: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotError(f"{path} must contain a JSON object")

    snapshot = snapshot_from_dict(data)
    logger.info(
        "loaded %s: %d expenses, %d budgets, %d income sources",
        path, len(snapshot.expenses), len(snapshot.budgets), len(snapshot.income_sources),
    )
    return snapshot


def category_lookup(categories: Tuple[Category, ...]) -> Callable[[str], str]:
    names = {c.id: c.name for c in categories}

    def _name_of(category_id: str) -> str:
        return names.get(category_id, UNKNOWN_CATEGORY)

    return _name_of


def _without_id(records: tuple, record_id: str) -> tuple:
    return tuple(filter(lambda r: r.id != record_id, records))


def add_expense(expenses: Tuple[Expense, ...], e: Expense) -> Tuple[Expense, ...]:
    return expenses + (e,)


def delete_expense(expenses: Tuple[Expense, ...], expense_id: str) -> Tuple[Expense, ...]:
    return _without_id(expenses, expense_id)


def add_budget(budgets: Tuple[Budget, ...], b: Budget) -> Tuple[Budget, ...]:
    return budgets + (b,)


def delete_budget(budgets: Tuple[Budget, ...], budget_id: str) -> Tuple[Budget, ...]:
    return _without_id(budgets, budget_id)


def add_income_source(sources: Tuple[IncomeSource, ...], s: IncomeSource) -> Tuple[IncomeSource, ...]:
    return sources + (s,)


def delete_income_source(sources: Tuple[IncomeSource, ...], source_id: str) -> Tuple[IncomeSource, ...]:
    return _without_id(sources, source_id)


def scope_to_user(snapshot: Snapshot, user_id: str) -> Snapshot:
    """Keep only the records owned by ``user_id``. Categories are shared."""
    def owned(r) -> bool:
        return r.user_id == user_id

    return snapshot._replace(
        expenses=tuple(filter(owned, snapshot.expenses)),
        budgets=tuple(filter(owned, snapshot.budgets)),
        income_sources=tuple(filter(owned, snapshot.income_sources)),
    )
