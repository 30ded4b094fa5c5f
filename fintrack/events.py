import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional

from fintrack.budgets import EXCEEDED_THRESHOLD, WARNING_THRESHOLD
from fintrack.domain import Alert, BudgetProgress

__all__ = [
    'event_bus', 'BUDGET_WARNING', 'BUDGET_EXCEEDED', 'Event', 'EventBus',
    'BudgetNotifier', 'budget_alert', 'log_alert_handler', 'register_default_handlers',
]

logger = logging.getLogger(__name__)

BUDGET_WARNING = "BUDGET_WARNING"
BUDGET_EXCEEDED = "BUDGET_EXCEEDED"


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
        if name not in self._subscribers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in self._subscribers[name]]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


def budget_alert(p: BudgetProgress, currency: str = "$") -> Optional[Alert]:
    """The single alert a budget deserves right now, if any."""
    if p.percentage >= EXCEEDED_THRESHOLD:
        level, title = "exceeded", "Budget Exceeded!"
    elif p.percentage >= WARNING_THRESHOLD:
        level, title = "warning", "Budget Alert"
    else:
        return None
    category = p.budget.category
    return Alert(
        level=level,
        budget_id=p.budget.id,
        category=category,
        spent=p.spent,
        limit=p.budget.limit,
        message=f"{title} {category}: {currency}{p.spent:.2f} / {currency}{p.budget.limit:.2f}",
    )


class BudgetNotifier:
    """Raises threshold alerts for aggregated budgets.

    Every call to ``check`` re-emits alerts for all budgets at or above a
    threshold.  With ``dedupe=True`` an alert already raised for the same
    budget and level by this notifier is suppressed.
    """

    def __init__(self, bus: Optional[EventBus] = None, dedupe: bool = False, currency: str = "$"):
        self.bus = bus if bus is not None else event_bus
        self.dedupe = dedupe
        self.currency = currency
        self._seen: set = set()

    def check(self, progress: Iterable[BudgetProgress]) -> List[Alert]:
        alerts = []
        for p in progress:
            alert = budget_alert(p, self.currency)
            if alert is None:
                continue
            key = (alert.budget_id, alert.category, alert.level)
            if self.dedupe and key in self._seen:
                continue
            self._seen.add(key)
            alerts.append(alert)
            name = BUDGET_EXCEEDED if alert.level == "exceeded" else BUDGET_WARNING
            self.bus.publish(name, {"alert": alert, "message": alert.message})
        return alerts

    def reset(self) -> None:
        self._seen.clear()


def log_alert_handler(event: Event, payload: dict) -> dict:
    logger.warning(f"{event.name}: {payload.get('message', '')}")
    return {"logged": True}


event_bus = EventBus()


def register_default_handlers(bus: EventBus = event_bus) -> None:
    bus.subscribe(BUDGET_WARNING, log_alert_handler)
    bus.subscribe(BUDGET_EXCEEDED, log_alert_handler)


register_default_handlers()
