import asyncio
from datetime import date
from typing import Any, Dict, Optional

from fintrack import aggregates
from fintrack.domain import Snapshot
from fintrack.transforms import category_lookup


async def dashboard_snapshot(snapshot: Snapshot, as_of: Optional[date] = None) -> Dict[str, Any]:
    """Compute the four dashboard aggregates concurrently.

    Each aggregate is independent, so they are gathered as separate tasks.
    Returns a mapping with expense_summary, budget_status, total_income and
    total_expenses.
    """
    as_of = as_of or date.today()
    name_of = category_lookup(snapshot.categories)

    async def run(key: str, func, *args) -> tuple[str, Any]:
        await asyncio.sleep(0)  # cooperate
        return key, func(*args)

    results = await asyncio.gather(
        run("expense_summary", aggregates.summarize_by_category, snapshot.expenses, name_of),
        run("budget_status", aggregates.evaluate_budgets, snapshot.budgets, snapshot.expenses, name_of),
        run("total_income", aggregates.total_monthly_income, snapshot.income_sources),
        run("total_expenses", aggregates.total_in_window, snapshot.expenses, as_of),
    )
    return {k: v for k, v in results}
