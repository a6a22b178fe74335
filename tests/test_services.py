import asyncio
from datetime import date

import pytest

from fintrack.async_reports import dashboard_snapshot
from fintrack.domain import DEFAULT_CATEGORIES, Budget, Expense, IncomeSource, Snapshot
from fintrack.events import BUDGET_ALERT, Event, EventBus, register_default_handlers
from fintrack.services import (
    DashboardService,
    ReportService,
    default_dashboard_service,
    record_expense,
)

AS_OF = date(2025, 9, 30)


def make_snapshot():
    expenses = (
        Expense("e1", "u1", 1200.0, date(2025, 9, 1), "1", "Rent"),
        Expense("e2", "u1", 150.0, date(2025, 9, 20), "3", "Groceries"),
        Expense("e3", "u1", 40.0, date(2025, 6, 1), "3", "Old lunch"),
    )
    budgets = (Budget("b1", "u1", "3", 200.0, date(2025, 9, 1), date(2025, 10, 1), 80),)
    sources = (
        IncomeSource("i1", "u1", "Salary", 1000.0, "weekly"),
        IncomeSource("i2", "u1", "Bonus", 12000.0, "annually"),
    )
    return Snapshot(DEFAULT_CATEGORIES, expenses, budgets, sources)


@pytest.fixture(autouse=True)
def unwindowed(monkeypatch):
    monkeypatch.setenv("FINTRACK_BUDGET_WINDOWED", "false")
    monkeypatch.setenv("FINTRACK_WINDOW_DAYS", "30")


def test_default_dashboard():
    rpt = default_dashboard_service().dashboard(make_snapshot(), AS_OF)
    result = rpt["result"]

    assert {s.category: s.amount for s in result["expense_summary"]} == {"Housing": 1200, "Food": 190}
    assert result["budget_status"][0].spent == 190
    assert result["total_income"] == pytest.approx(5330)
    assert result["total_expenses"] == 1350
    assert result["balance"] == pytest.approx(3980)
    assert result["positive_balance"] is True
    assert [e.id for e in result["recent_expenses"]] == ["e2", "e1", "e3"]
    assert all(v["messages"] == [] for v in rpt["validation"])
    assert [s["calculator"] for s in rpt["steps"]][0] == "expense_summary_step"


def test_dashboard_reports_invalid_and_orphan_records():
    snapshot = make_snapshot()
    bad = Expense("bad", "u1", -5.0, date(2025, 9, 2), "99")
    snapshot = snapshot._replace(expenses=snapshot.expenses + (bad,))

    rpt = default_dashboard_service().dashboard(snapshot, AS_OF)
    messages = {v["validator"]: v["messages"] for v in rpt["validation"]}

    assert messages["invalid_records"] == ["bad: Please enter a valid amount"]
    assert messages["unknown_categories"] == ["bad: unknown category 99"]


def test_dashboard_validator_error_handling():
    def bad_validator(snapshot):
        raise RuntimeError("oops")

    def c_dummy(snapshot, as_of, acc):
        return {"x": 1}

    svc = DashboardService(validators=[bad_validator], calculators=[c_dummy])
    rpt = svc.dashboard(make_snapshot(), AS_OF)

    assert "validator_error" in rpt["validation"][0]["messages"][0]
    assert rpt["result"]["x"] == 1


def test_report_service_publishes_budget_alerts():
    bus = EventBus()
    alerts = []

    def on_alert(event: Event, payload: dict) -> dict:
        alerts.append(payload["budget_id"])
        return {}

    bus.subscribe(BUDGET_ALERT, on_alert)
    report = ReportService(bus).period_report(make_snapshot(), "month", AS_OF)

    assert report.total == 1350
    assert alerts == ["b1"]


def test_record_expense_adds_and_alerts():
    bus = register_default_handlers(EventBus())
    e = Expense("e9", "u1", 10.0, date(2025, 9, 29), "3")
    # 190 of 250 spent (76%), the new expense brings it to 80%
    roomy = (Budget("b1", "u1", "3", 250.0, date(2025, 9, 1), date(2025, 10, 1), 80),)
    snapshot = make_snapshot()._replace(budgets=roomy)

    result = record_expense(snapshot, e, bus)

    assert result.is_right()
    snapshot, results = result.get_or_else(None)
    assert snapshot.expenses[-1] == e
    assert results[0]["spent"] == 200
    assert "alert" in results[0]


def test_record_expense_rejects_invalid():
    snapshot = make_snapshot()
    result = record_expense(snapshot, Expense("e9", "u1", 0.0, date(2025, 9, 29), "3"))
    assert result.get_error()["error"] == "invalid_amount"


@pytest.mark.asyncio
async def test_dashboard_snapshot_concurrent():
    res = await dashboard_snapshot(make_snapshot(), AS_OF)

    assert set(res) == {"expense_summary", "budget_status", "total_income", "total_expenses"}
    assert res["total_income"] == pytest.approx(5330)
    assert res["total_expenses"] == 1350


def test_dashboard_snapshot_matches_service():
    snapshot = make_snapshot()
    res = asyncio.run(dashboard_snapshot(snapshot, AS_OF))
    rpt = default_dashboard_service().dashboard(snapshot, AS_OF)

    for key in res:
        assert res[key] == rpt["result"][key]


def test_record_expense_on_over_budget_does_not_alert_again():
    bus = register_default_handlers(EventBus())
    e = Expense("e9", "u1", 10.0, date(2025, 9, 29), "3")

    snapshot, results = record_expense(make_snapshot(), e, bus).get_or_else(None)

    assert len(snapshot.expenses) == 4
    assert results[0]["spent"] == 200
    assert "alert" not in results[0]
