import io
from datetime import date

import pandas as pd
import pytest

from fintrack.domain import DEFAULT_CATEGORIES, Budget, Expense, Snapshot
from fintrack.reports import (
    expenses_in_period,
    export_report_csv,
    period_report,
    period_start,
    summaries_frame,
)

AS_OF = date(2025, 3, 31)


def make_snapshot():
    expenses = (
        Expense("e1", "u1", 100.0, date(2025, 3, 30), "3", "Groceries"),
        Expense("e2", "u1", 300.0, date(2025, 3, 10), "1", "Rent"),
        Expense("e3", "u1", 50.0, date(2025, 1, 15), "3", "Dinner"),
        Expense("e4", "u1", 80.0, date(2024, 6, 1), "5", "Concert"),
    )
    budgets = (
        Budget("b1", "u1", "3", 200.0, date(2025, 3, 1), date(2025, 4, 1), 80),
    )
    return Snapshot(DEFAULT_CATEGORIES, expenses, budgets, ())


def test_period_start_calendar_offsets():
    assert period_start("week", AS_OF) == date(2025, 3, 24)
    assert period_start("month", AS_OF) == date(2025, 2, 28)
    assert period_start("quarter", AS_OF) == date(2024, 12, 31)
    assert period_start("year", AS_OF) == date(2024, 3, 31)


def test_period_start_unknown_is_month():
    assert period_start("decade", AS_OF) == period_start("month", AS_OF)


def test_expenses_in_period():
    snapshot = make_snapshot()
    assert [e.id for e in expenses_in_period(snapshot.expenses, "week", AS_OF)] == ["e1"]
    assert [e.id for e in expenses_in_period(snapshot.expenses, "quarter", AS_OF)] == ["e1", "e2", "e3"]


def test_period_report_month():
    report = period_report(make_snapshot(), "month", AS_OF, windowed=False)

    assert report.start == date(2025, 2, 28)
    assert report.total == 400
    assert report.count == 2
    assert {s.category for s in report.summaries} == {"Food", "Housing"}
    assert report.highest.category == "Housing"
    assert report.highest.percentage == pytest.approx(75)
    # budgets are evaluated against the whole snapshot
    assert report.budget_statuses[0].spent == 150


def test_period_report_empty_period():
    report = period_report(make_snapshot(), "week", date(2030, 1, 1), windowed=False)
    assert report.total == 0
    assert report.summaries == ()
    assert report.highest is None


def test_summaries_frame_columns():
    report = period_report(make_snapshot(), "year", AS_OF, windowed=False)
    df = summaries_frame(report.summaries)
    assert list(df.columns) == ["category", "amount", "percentage"]
    assert df["amount"].sum() == pytest.approx(report.total)


def test_export_report_csv_expenses():
    report = period_report(make_snapshot(), "month", AS_OF, windowed=False)
    df = pd.read_csv(io.StringIO(export_report_csv(report)))

    assert list(df["category"]) == ["Food", "Housing"]
    assert list(df["percentage"]) == [25.0, 75.0]


def test_export_report_csv_budgets():
    report = period_report(make_snapshot(), "month", AS_OF, windowed=False)
    df = pd.read_csv(io.StringIO(export_report_csv(report, kind="budgets")))

    assert df.loc[0, "category"] == "Food"
    assert df.loc[0, "percentage"] == pytest.approx(75)
    assert df.loc[0, "band"] == "warning"


def test_export_report_csv_empty():
    report = period_report(make_snapshot(), "week", date(2030, 1, 1), windowed=False)
    assert export_report_csv(report).strip() == "category,amount,percentage"
