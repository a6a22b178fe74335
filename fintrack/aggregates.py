import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from functools import reduce
from typing import Callable, Iterable, Optional, Tuple

from fintrack import config
from fintrack.domain import (
    ANNUALLY,
    BI_WEEKLY,
    DAILY,
    MONTHLY,
    QUARTERLY,
    UNKNOWN_CATEGORY,
    WEEKLY,
    Budget,
    BudgetStatus,
    Expense,
    ExpenseSummary,
    IncomeSource,
)

logger = logging.getLogger(__name__)

CategoryNameOf = Callable[[str], str]

WARNING_PERCENT = 75
CRITICAL_PERCENT = 90

BAND_OK = "ok"
BAND_WARNING = "warning"
BAND_CRITICAL = "critical"

# frequency -> function turning one payment into a monthly amount
MONTHLY_MULTIPLIERS = {
    DAILY: lambda amount: amount * 30,
    WEEKLY: lambda amount: amount * 4.33,
    BI_WEEKLY: lambda amount: amount * 2.17,
    MONTHLY: lambda amount: amount,
    QUARTERLY: lambda amount: amount / 3,
    ANNUALLY: lambda amount: amount / 12,
}


def _percentage(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0


def _resolve(category_name_of: CategoryNameOf, category_id: str) -> str:
    return category_name_of(category_id) or UNKNOWN_CATEGORY


def total_amount(expenses: Iterable[Expense]) -> float:
    return reduce(lambda acc, e: acc + e.amount, expenses, 0)


def summarize_by_category(
    expenses: Iterable[Expense], category_name_of: CategoryNameOf
) -> Tuple[ExpenseSummary, ...]:
    """Group expenses by category name and compute each group's share of spend.

    Groups appear in order of first occurrence. Every percentage is 0 when
    the total spend is 0.
    """
    expenses = tuple(expenses)
    total = total_amount(expenses)

    by_name: dict[str, float] = defaultdict(float)
    for e in expenses:
        by_name[_resolve(category_name_of, e.category_id)] += e.amount

    return tuple(
        ExpenseSummary(category=name, amount=amount, percentage=_percentage(amount, total))
        for name, amount in by_name.items()
    )


def _in_budget_window(b: Budget) -> Callable[[Expense], bool]:
    def _filter(e: Expense) -> bool:
        return b.start_date <= e.date <= b.end_date

    return _filter


def budget_spent(b: Budget, expenses: Iterable[Expense], windowed: bool = False) -> float:
    matching = (e for e in expenses if e.category_id == b.category_id)
    if windowed:
        matching = filter(_in_budget_window(b), matching)
    return total_amount(matching)


def evaluate_budgets(
    budgets: Iterable[Budget],
    expenses: Iterable[Expense],
    category_name_of: CategoryNameOf,
    windowed: Optional[bool] = None,
) -> Tuple[BudgetStatus, ...]:
    """Compute spend and utilization for each budget, preserving input order.

    With ``windowed=False`` every expense in the budget's category counts,
    whatever its date. With ``windowed=True`` only expenses dated inside
    ``[start_date, end_date]`` count. ``None`` reads the configured default.
    """
    if windowed is None:
        windowed = config.budget_windowed()
    expenses = tuple(expenses)

    statuses = []
    for b in budgets:
        spent = budget_spent(b, expenses, windowed)
        if windowed:
            logger.debug("budget %s: %s spent between %s and %s", b.id, spent, b.start_date, b.end_date)
        statuses.append(
            BudgetStatus(
                category=_resolve(category_name_of, b.category_id),
                spent=spent,
                limit=b.limit_amount,
                percentage=_percentage(spent, b.limit_amount),
            )
        )
    return tuple(statuses)


def budget_band(percentage: float) -> str:
    if percentage >= CRITICAL_PERCENT:
        return BAND_CRITICAL
    if percentage >= WARNING_PERCENT:
        return BAND_WARNING
    return BAND_OK


def over_alert_threshold(status: BudgetStatus, b: Budget) -> bool:
    return status.percentage >= b.alert_threshold


def utilization_width(percentage: float) -> float:
    """Percentage clamped to [0, 100] for progress bars."""
    return max(0, min(percentage, 100))


def monthly_equivalent(source: IncomeSource) -> float:
    """Normalize one income source to a monthly amount.

    Unrecognized frequencies are treated as monthly.
    """
    convert = MONTHLY_MULTIPLIERS.get(source.frequency, MONTHLY_MULTIPLIERS[MONTHLY])
    return convert(source.amount)


def total_monthly_income(sources: Iterable[IncomeSource]) -> float:
    return reduce(lambda acc, s: acc + monthly_equivalent(s), sources, 0)


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def total_in_window(
    expenses: Iterable[Expense],
    as_of: Optional[date] = None,
    window_days: Optional[int] = None,
) -> float:
    """Sum of expenses dated on or after ``as_of - window_days``."""
    as_of = _as_date(as_of) if as_of is not None else date.today()
    if window_days is None:
        window_days = config.window_days()
    cutoff = as_of - timedelta(days=window_days)
    return total_amount(e for e in expenses if e.date >= cutoff)


def net_balance(
    sources: Iterable[IncomeSource],
    expenses: Iterable[Expense],
    as_of: Optional[date] = None,
    window_days: Optional[int] = None,
) -> float:
    """Monthly income minus the rolling expense total."""
    return total_monthly_income(sources) - total_in_window(expenses, as_of, window_days)


def is_positive_balance(
    sources: Iterable[IncomeSource],
    expenses: Iterable[Expense],
    as_of: Optional[date] = None,
    window_days: Optional[int] = None,
) -> bool:
    return net_balance(sources, expenses, as_of, window_days) > 0
