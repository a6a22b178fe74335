import logging
import sys
from datetime import date
from typing import Optional

import pandas as pd

from fintrack import config
from fintrack.aggregates import utilization_width
from fintrack.reports import MONTH, PERIOD_LABELS, budget_status_frame, summaries_frame
from fintrack.services import ReportService, default_dashboard_service
from fintrack.transforms import load_snapshot, scope_to_user

logger = logging.getLogger(__name__)


def render(snapshot, period: str = MONTH, as_of: Optional[date] = None) -> str:
    as_of = as_of or date.today()
    rpt = default_dashboard_service().dashboard(snapshot, as_of)
    result = rpt["result"]
    report = ReportService().period_report(snapshot, period, as_of)

    lines = [
        f"Dashboard as of {as_of.isoformat()}",
        f"  Monthly income:      {result['total_income']:,.2f}",
        f"  Expenses (rolling):  {result['total_expenses']:,.2f}",
        f"  Balance:             {result['balance']:,.2f} "
        f"({'Positive' if result['positive_balance'] else 'Negative'} balance)",
        "",
        f"{PERIOD_LABELS.get(report.period, report.period)}: "
        f"{report.count} expenses, {report.total:,.2f} total, highest "
        f"{report.highest.category if report.highest else 'N/A'}",
    ]

    with pd.option_context("display.float_format", "{:,.2f}".format):
        if report.summaries:
            lines += ["", summaries_frame(report.summaries).to_string(index=False)]
        if report.budget_statuses:
            df = budget_status_frame(report.budget_statuses)
            df["bar"] = df["percentage"].map(lambda p: "#" * int(utilization_width(p) // 10))
            lines += ["", df.to_string(index=False)]

    for v in rpt["validation"]:
        for msg in v["messages"]:
            lines.append(f"warning: {msg}")
    return "\n".join(lines)


def main(argv=None) -> int:
    config.configure_logging()
    argv = sys.argv[1:] if argv is None else argv
    period = argv[0] if argv else MONTH

    user_id = config.user_id()
    if user_id is None:
        logger.error("FINTRACK_USER_ID is not set")
        return 1

    path = config.data_path()
    try:
        snapshot = load_snapshot(path)
    except (OSError, ValueError) as e:
        logger.error("cannot load %s: %s", path, e)
        return 1

    print(render(scope_to_user(snapshot, user_id), period))
    return 0


if __name__ == "__main__":
    sys.exit(main())
