from collections import defaultdict
from datetime import date
from itertools import islice
from typing import Callable, Iterable, Iterator, Optional, Tuple

from fintrack.domain import UNKNOWN_CATEGORY, Expense, ExpenseSummary

NEWEST = "newest"
OLDEST = "oldest"
HIGHEST = "highest"
LOWEST = "lowest"

_SORT_KEYS = {
    NEWEST: (lambda e: e.date, True),
    OLDEST: (lambda e: e.date, False),
    HIGHEST: (lambda e: e.amount, True),
    LOWEST: (lambda e: e.amount, False),
}


def by_category(cat_id: str):
    def _filter(e: Expense) -> bool:
        return e.category_id == cat_id

    return _filter


def by_date_range(start: date, end: date):
    def _filter(e: Expense) -> bool:
        return start <= e.date <= end

    return _filter


def since(start: date):
    def _filter(e: Expense) -> bool:
        return e.date >= start

    return _filter


def matches_search(term: str):
    needle = term.strip().lower()

    def _filter(e: Expense) -> bool:
        if not needle:
            return True
        return needle in (e.description or "").lower()

    return _filter


def iter_expenses(
    expenses: Iterable[Expense], pred: Callable[[Expense], bool]
) -> Iterator[Expense]:
    for e in expenses:
        if pred(e):
            yield e


def filter_expenses(
    expenses: Iterable[Expense], search: str = "", category_id: Optional[str] = None
) -> Tuple[Expense, ...]:
    result = iter_expenses(expenses, matches_search(search))
    if category_id:
        result = iter_expenses(result, by_category(category_id))
    return tuple(result)


def sort_expenses(expenses: Iterable[Expense], order: str = NEWEST) -> Tuple[Expense, ...]:
    """Sort by date or amount; an unknown order keeps the input order."""
    if order not in _SORT_KEYS:
        return tuple(expenses)
    key, reverse = _SORT_KEYS[order]
    return tuple(sorted(expenses, key=key, reverse=reverse))


def recent_expenses(expenses: Iterable[Expense], limit: int = 5) -> Tuple[Expense, ...]:
    return sort_expenses(expenses, NEWEST)[: max(0, limit)]


def top_categories(
    expenses: Iterable[Expense], category_name_of: Callable[[str], str], k: int
) -> Iterator[tuple[str, float]]:
    totals: dict[str, float] = defaultdict(float)
    for e in expenses:
        totals[category_name_of(e.category_id) or UNKNOWN_CATEGORY] += e.amount

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    yield from islice(ordered, max(0, k))


def highest_spending(summaries: Iterable[ExpenseSummary]) -> Optional[ExpenseSummary]:
    # later entries win ties
    best = None
    for s in summaries:
        if best is None or s.amount >= best.amount:
            best = s
    return best
