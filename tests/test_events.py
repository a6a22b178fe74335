from datetime import datetime

from fintrack.events import (
    BUDGET_ALERT,
    EXPENSE_ADDED,
    Event,
    EventBus,
    check_budget_handler,
    register_default_handlers,
)


def test_event_bus_subscribe_and_publish():
    bus = EventBus()
    seen = []

    def handler(event: Event, payload: dict) -> dict:
        seen.append(event.name)
        return {"processed": True}

    bus.subscribe(EXPENSE_ADDED, handler)
    results = bus.publish(EXPENSE_ADDED, {"amount": 50})

    assert results == [{"processed": True}]
    assert seen == [EXPENSE_ADDED]


def test_publish_without_subscribers():
    assert EventBus().publish(BUDGET_ALERT, {}) == []


def test_event_bus_unsubscribe():
    bus = EventBus()
    calls = []

    def handler(event: Event, payload: dict) -> dict:
        calls.append(payload)
        return {}

    bus.subscribe(EXPENSE_ADDED, handler)
    bus.publish(EXPENSE_ADDED, {"amount": 1})
    bus.unsubscribe(EXPENSE_ADDED, handler)
    bus.publish(EXPENSE_ADDED, {"amount": 2})

    assert calls == [{"amount": 1}]


def test_check_budget_handler_below_threshold():
    event = Event(EXPENSE_ADDED, datetime.now().isoformat(), {})
    payload = {"amount": 20, "category": "Food", "limit": 100, "current_spent": 30, "alert_threshold": 80}

    result = check_budget_handler(event, payload)

    assert result == {"spent": 50, "percentage": 50}
    assert payload["current_spent"] == 30


def test_check_budget_handler_crosses_threshold():
    event = Event(EXPENSE_ADDED, datetime.now().isoformat(), {})
    payload = {"amount": 30, "category": "Food", "limit": 100, "current_spent": 60, "alert_threshold": 80}

    result = check_budget_handler(event, payload)

    assert result["spent"] == 90
    assert "Budget alert for Food" in result["alert"]


def test_check_budget_handler_zero_limit_never_alerts():
    event = Event(EXPENSE_ADDED, datetime.now().isoformat(), {})
    result = check_budget_handler(event, {"amount": 500, "limit": 0, "alert_threshold": 0})
    assert result["percentage"] == 0
    assert "alert" not in result


def test_register_default_handlers():
    bus = register_default_handlers(EventBus())
    [result] = bus.publish(EXPENSE_ADDED, {"amount": 10, "limit": 10, "alert_threshold": 100})
    assert "alert" in result


def test_check_budget_handler_already_over_threshold_does_not_repeat():
    event = Event(EXPENSE_ADDED, datetime.now().isoformat(), {})
    payload = {"amount": 5, "category": "Food", "limit": 100, "current_spent": 85, "alert_threshold": 80}

    result = check_budget_handler(event, payload)

    assert result["spent"] == 90
    assert "alert" not in result
