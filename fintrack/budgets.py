from collections import defaultdict
from typing import Iterable

from fintrack.domain import (
    EXPENSE,
    NEAR_LIMIT,
    ON_TRACK,
    OVER_BUDGET,
    Budget,
    BudgetProgress,
    Transaction,
)
from fintrack.filters import all_of, by_category, by_month, by_type

WARNING_THRESHOLD = 80.0
EXCEEDED_THRESHOLD = 100.0


def budget_percentage(spent: float, limit: float) -> float:
    if limit <= 0:
        return 0.0
    return spent / limit * 100


def classify(percentage: float) -> str:
    # boundaries belong to the higher band
    if percentage >= EXCEEDED_THRESHOLD:
        return OVER_BUDGET
    if percentage >= WARNING_THRESHOLD:
        return NEAR_LIMIT
    return ON_TRACK


def spent_for(budget: Budget, trans: Iterable[Transaction], month: str) -> float:
    matches = all_of(by_type(EXPENSE), by_category(budget.category), by_month(month))
    return sum(t.amount for t in trans if matches(t))


def aggregate_budgets(
    trans: Iterable[Transaction], budgets: Iterable[Budget], month: str
) -> list[BudgetProgress]:
    """Spend, remaining and status for every budget in ``month``."""
    trans = tuple(trans)
    progress = []
    for b in budgets:
        spent = spent_for(b, trans, month)
        pct = budget_percentage(spent, b.limit)
        progress.append(BudgetProgress(
            budget=b,
            spent=spent,
            remaining=b.limit - spent,
            percentage=pct,
            status=classify(pct),
        ))
    return progress


def aggregate_budget_periods(
    trans: Iterable[Transaction], budgets: Iterable[Budget], start: str, end: str
) -> list[BudgetProgress]:
    """Progress of the budgets whose month lies in ``[start, end]``.

    Each budget is measured against its own month, oldest month first.
    """
    trans = tuple(trans)
    first, last = start[:7], end[:7]
    by_period: dict[str, list[Budget]] = defaultdict(list)
    for b in budgets:
        if first <= b.month <= last:
            by_period[b.month].append(b)
    return [p for month in sorted(by_period) for p in aggregate_budgets(trans, by_period[month], month)]


def budget_totals(progress: Iterable[BudgetProgress]) -> dict:
    progress = list(progress)
    total_budget = sum(p.budget.limit for p in progress)
    total_spent = sum(p.spent for p in progress)
    return {
        "total_budget": total_budget,
        "total_spent": total_spent,
        "total_remaining": total_budget - total_spent,
    }
