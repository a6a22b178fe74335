"""Period reports over a snapshot and their tabular export.

A report covers the expenses dated on or after the start of the chosen
period (``week``, ``month``, ``quarter`` or ``year`` back from ``as_of``).
Budget statuses in a report are evaluated against the whole snapshot, the
same way the dashboard shows them.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Tuple

import pandas as pd

from fintrack.aggregates import budget_band, evaluate_budgets, summarize_by_category, total_amount
from fintrack.domain import BudgetStatus, Expense, ExpenseSummary, Snapshot
from fintrack.queries import highest_spending, iter_expenses, since
from fintrack.transforms import category_lookup

WEEK = "week"
MONTH = "month"
QUARTER = "quarter"
YEAR = "year"

PERIOD_OFFSETS = {
    WEEK: pd.DateOffset(days=7),
    MONTH: pd.DateOffset(months=1),
    QUARTER: pd.DateOffset(months=3),
    YEAR: pd.DateOffset(years=1),
}

PERIOD_LABELS = {
    WEEK: "Last 7 Days",
    MONTH: "Last 30 Days",
    QUARTER: "Last 3 Months",
    YEAR: "Last 12 Months",
}


@dataclass(frozen=True)
class PeriodReport:
    period: str
    start: date
    as_of: date
    total: float
    count: int
    summaries: Tuple[ExpenseSummary, ...]
    highest: Optional[ExpenseSummary]
    budget_statuses: Tuple[BudgetStatus, ...]


def period_start(period: str, as_of: Optional[date] = None) -> date:
    """First day covered by ``period``; unknown periods fall back to a month."""
    as_of = as_of or date.today()
    offset = PERIOD_OFFSETS.get(period, PERIOD_OFFSETS[MONTH])
    return (pd.Timestamp(as_of) - offset).date()


def expenses_in_period(
    expenses: Iterable[Expense], period: str, as_of: Optional[date] = None
) -> Tuple[Expense, ...]:
    return tuple(iter_expenses(expenses, since(period_start(period, as_of))))


def period_report(
    snapshot: Snapshot,
    period: str = MONTH,
    as_of: Optional[date] = None,
    windowed: Optional[bool] = None,
) -> PeriodReport:
    as_of = as_of or date.today()
    if period not in PERIOD_OFFSETS:
        period = MONTH
    name_of = category_lookup(snapshot.categories)
    expenses = expenses_in_period(snapshot.expenses, period, as_of)
    summaries = summarize_by_category(expenses, name_of)

    return PeriodReport(
        period=period,
        start=period_start(period, as_of),
        as_of=as_of,
        total=total_amount(expenses),
        count=len(expenses),
        summaries=summaries,
        highest=highest_spending(summaries),
        budget_statuses=evaluate_budgets(snapshot.budgets, snapshot.expenses, name_of, windowed),
    )


def summaries_frame(summaries: Iterable[ExpenseSummary]) -> pd.DataFrame:
    rows = [
        {"category": s.category, "amount": s.amount, "percentage": s.percentage}
        for s in summaries
    ]
    return pd.DataFrame(rows, columns=["category", "amount", "percentage"])


def budget_status_frame(statuses: Iterable[BudgetStatus]) -> pd.DataFrame:
    rows = [
        {
            "category": s.category,
            "spent": s.spent,
            "limit": s.limit,
            "percentage": s.percentage,
            "band": budget_band(s.percentage),
        }
        for s in statuses
    ]
    return pd.DataFrame(rows, columns=["category", "spent", "limit", "percentage", "band"])


def export_report_csv(report: PeriodReport, kind: str = "expenses") -> str:
    """CSV text for the expense breakdown (``kind="expenses"``) or budget status."""
    if kind == "budgets":
        return budget_status_frame(report.budget_statuses).to_csv(index=False)

    df = summaries_frame(report.summaries)
    if not df.empty:
        df["amount"] = df["amount"].round(2)
        df["percentage"] = df["percentage"].round(1)
    return df.to_csv(index=False)
