import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    'EXPENSE_ADDED', 'BUDGET_ALERT', 'Event', 'EventBus',
    'check_budget_handler', 'register_default_handlers',
]

logger = logging.getLogger(__name__)

EXPENSE_ADDED = "EXPENSE_ADDED"
BUDGET_ALERT = "BUDGET_ALERT"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name)
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in list(handlers)]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)


def check_budget_handler(event: Event, payload: dict) -> dict:
    """Report whether a new expense pushes a budget across its alert threshold.

    A budget that was already at or above the threshold does not alert again.

    payload keys: amount, category, limit, current_spent, alert_threshold.
    """
    amount = payload.get("amount", 0)
    limit = payload.get("limit", 0)
    threshold = payload.get("alert_threshold", 100)
    before = payload.get("current_spent", 0)
    spent = before + amount

    percentage = (spent / limit) * 100 if limit > 0 else 0
    previous = (before / limit) * 100 if limit > 0 else 0
    result = {"spent": spent, "percentage": percentage}
    if limit > 0 and previous < threshold <= percentage:
        category = payload.get("category", "")
        result["alert"] = f"Budget alert for {category}: {spent:,.2f} / {limit:,.2f} ({percentage:.1f}%)"
        logger.info(result["alert"])
    return result


def register_default_handlers(bus: EventBus) -> EventBus:
    bus.subscribe(EXPENSE_ADDED, check_budget_handler)
    return bus
