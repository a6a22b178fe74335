import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from fintrack import aggregates, config
from fintrack.domain import Expense, Snapshot
from fintrack.events import BUDGET_ALERT, EXPENSE_ADDED, EventBus
from fintrack.functional import (
    Either,
    Left,
    Right,
    validate_budget,
    validate_expense,
    validate_income_source,
)
from fintrack.queries import recent_expenses
from fintrack.reports import MONTH, PeriodReport, period_report
from fintrack.transforms import add_expense, category_lookup

logger = logging.getLogger(__name__)

Validator = Callable[[Snapshot], Sequence[str]]
Calculator = Callable[..., Dict[str, Any]]


class DashboardService:
    """Facade that builds the dashboard from injected validators and calculators.

    validators: functions taking a snapshot -> Sequence[str] of problems
    calculators: functions taking (snapshot, as_of, acc) -> dict (partial results)
    """

    def __init__(self, validators: Sequence[Validator], calculators: Sequence[Calculator]):
        self.validators = validators
        self.calculators = calculators

    def dashboard(self, snapshot: Snapshot, as_of: Optional[date] = None) -> Dict[str, Any]:
        """Run validators and calculators and return the dashboard with intermediate steps."""
        as_of = as_of or date.today()
        report = {
            "as_of": as_of,
            "validation": [],
            "steps": [],
            "result": {}
        }

        for v in self.validators:
            try:
                msgs = list(v(snapshot))
            except Exception as e:
                logger.exception("validator %s failed", getattr(v, "__name__", v))
                msgs = [f"validator_error: {e}"]
            report["validation"].append({"validator": getattr(v, "__name__", str(v)), "messages": msgs})

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(snapshot, as_of, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        return report


def invalid_records(snapshot: Snapshot) -> Sequence[str]:
    checks = (
        (validate_expense, snapshot.expenses),
        (validate_budget, snapshot.budgets),
        (validate_income_source, snapshot.income_sources),
    )
    msgs = []
    for validate, records in checks:
        for r in records:
            result = validate(r)
            if result.is_left():
                msgs.append(f"{r.id}: {result.get_error()['message']}")
    return msgs


def unknown_categories(snapshot: Snapshot) -> Sequence[str]:
    known = {c.id for c in snapshot.categories}
    return [
        f"{r.id}: unknown category {r.category_id}"
        for r in snapshot.expenses + snapshot.budgets
        if r.category_id not in known
    ]


def expense_summary_step(snapshot: Snapshot, as_of: date, acc: dict) -> dict:
    name_of = category_lookup(snapshot.categories)
    return {"expense_summary": aggregates.summarize_by_category(snapshot.expenses, name_of)}


def budget_status_step(snapshot: Snapshot, as_of: date, acc: dict) -> dict:
    name_of = category_lookup(snapshot.categories)
    return {"budget_status": aggregates.evaluate_budgets(snapshot.budgets, snapshot.expenses, name_of)}


def income_step(snapshot: Snapshot, as_of: date, acc: dict) -> dict:
    return {"total_income": aggregates.total_monthly_income(snapshot.income_sources)}


def expenses_step(snapshot: Snapshot, as_of: date, acc: dict) -> dict:
    return {"total_expenses": aggregates.total_in_window(snapshot.expenses, as_of)}


def balance_step(snapshot: Snapshot, as_of: date, acc: dict) -> dict:
    income = acc.get("total_income", aggregates.total_monthly_income(snapshot.income_sources))
    spent = acc.get("total_expenses", aggregates.total_in_window(snapshot.expenses, as_of))
    return {"balance": income - spent, "positive_balance": income > spent}


def recent_step(snapshot: Snapshot, as_of: date, acc: dict) -> dict:
    return {"recent_expenses": recent_expenses(snapshot.expenses)}


def default_dashboard_service() -> DashboardService:
    return DashboardService(
        validators=[invalid_records, unknown_categories],
        calculators=[
            expense_summary_step,
            budget_status_step,
            income_step,
            expenses_step,
            balance_step,
            recent_step,
        ],
    )


class ReportService:
    """Facade for period reports; budget alerts are published on the bus."""

    def __init__(self, bus: Optional[EventBus] = None):
        self.bus = bus

    def period_report(
        self, snapshot: Snapshot, period: str = MONTH, as_of: Optional[date] = None
    ) -> PeriodReport:
        report = period_report(snapshot, period, as_of)
        if self.bus is not None:
            for b, status in zip(snapshot.budgets, report.budget_statuses):
                if aggregates.over_alert_threshold(status, b):
                    self.bus.publish(BUDGET_ALERT, {"budget_id": b.id, "status": status})
        return report


def record_expense(
    snapshot: Snapshot, e: Expense, bus: Optional[EventBus] = None
) -> Either[dict, Tuple[Snapshot, list]]:
    """Validate and add an expense, publishing EXPENSE_ADDED for each budget it touches.

    Returns the new snapshot and the handler results.
    """
    checked = validate_expense(e)
    if checked.is_left():
        return Left(checked.get_error())

    results = []
    if bus is not None:
        name_of = category_lookup(snapshot.categories)
        windowed = config.budget_windowed()
        for b in snapshot.budgets:
            if b.category_id != e.category_id:
                continue
            if windowed and not b.start_date <= e.date <= b.end_date:
                continue
            results.extend(bus.publish(EXPENSE_ADDED, {
                "amount": e.amount,
                "category": name_of(b.category_id),
                "limit": b.limit_amount,
                "current_spent": aggregates.budget_spent(b, snapshot.expenses, windowed),
                "alert_threshold": b.alert_threshold,
            }))

    return Right((snapshot._replace(expenses=add_expense(snapshot.expenses, e)), results))
