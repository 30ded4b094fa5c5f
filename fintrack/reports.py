"""Report aggregation over in-memory transactions."""
import calendar
from collections import defaultdict
from datetime import date
from itertools import islice
from typing import Iterable, Optional

from fintrack.domain import (
    EXPENSE,
    INCOME,
    Budget,
    BudgetProgress,
    CategoryShare,
    MonthlyTrend,
    ReportTotals,
    Transaction,
)
from fintrack.filters import by_date_range, by_month, by_type

THIS_MONTH = "this_month"
LAST_MONTH = "last_month"
THIS_YEAR = "this_year"
CUSTOM = "custom"
PRESETS = (THIS_MONTH, LAST_MONTH, THIS_YEAR, CUSTOM)

UNCATEGORIZED = "Uncategorized"


def _month_bounds(year: int, month: int) -> tuple[str, str]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last_day).isoformat()


def date_range(
    preset: str,
    today: Optional[date] = None,
    custom_start: Optional[str] = None,
    custom_end: Optional[str] = None,
) -> tuple[str, str]:
    """Inclusive ``(start, end)`` ISO dates for a report preset.

    ``custom`` without both bounds, and any unknown preset, fall back to
    the current month.
    """
    today = today or date.today()
    if preset == LAST_MONTH:
        year, month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
        return _month_bounds(year, month)
    if preset == THIS_YEAR:
        return date(today.year, 1, 1).isoformat(), date(today.year, 12, 31).isoformat()
    if preset == CUSTOM and custom_start and custom_end:
        return str(custom_start)[:10], str(custom_end)[:10]
    return _month_bounds(today.year, today.month)


def in_range(trans: Iterable[Transaction], start: str, end: str) -> tuple[Transaction, ...]:
    return tuple(filter(by_date_range(start, end), trans))


def _sum(trans: Iterable[Transaction]) -> float:
    return sum(t.amount for t in trans)


def report_totals(
    trans: Iterable[Transaction], start: str, end: str, budgets: Iterable[Budget] = ()
) -> ReportTotals:
    selected = in_range(trans, start, end)
    income = _sum(filter(by_type(INCOME), selected))
    expenses = _sum(filter(by_type(EXPENSE), selected))
    total_budgeted = sum(b.limit for b in budgets)
    utilization = expenses / total_budgeted * 100 if total_budgeted > 0 else 0.0
    return ReportTotals(
        income=income,
        expenses=expenses,
        savings=income - expenses,
        budget_utilization=utilization,
    )


def category_breakdown(trans: Iterable[Transaction]) -> list[CategoryShare]:
    """Expense totals per category with their share of all expenses, largest first."""
    totals: dict[str, float] = defaultdict(float)
    for t in filter(by_type(EXPENSE), trans):
        totals[t.category or UNCATEGORIZED] += t.amount

    grand_total = sum(totals.values())
    shares = [
        CategoryShare(
            name=name,
            amount=amount,
            percentage=amount / grand_total * 100 if grand_total > 0 else 0.0,
        )
        for name, amount in totals.items()
    ]
    return sorted(shares, key=lambda s: s.amount, reverse=True)


def monthly_trend(trans: Iterable[Transaction]) -> list[MonthlyTrend]:
    """Income and expenses per ``YYYY-MM``, oldest month first."""
    income: dict[str, float] = defaultdict(float)
    expenses: dict[str, float] = defaultdict(float)
    for t in trans:
        if not t.date:
            continue
        if t.type == INCOME:
            income[t.month] += t.amount
        elif t.type == EXPENSE:
            expenses[t.month] += t.amount

    months = sorted(set(income) | set(expenses))
    return [MonthlyTrend(month=m, income=income[m], expenses=expenses[m]) for m in months]


def budget_performance(progress: Iterable[BudgetProgress]) -> list[dict]:
    return [
        {
            "budget": p.budget.title or p.budget.category,
            "period": p.budget.month,
            "budgeted": p.budget.limit,
            "spent": p.spent,
            "remaining": p.remaining,
            "percentage": p.percentage,
            "status": p.status,
        }
        for p in progress
    ]


def monthly_summary(trans: Iterable[Transaction], month: str) -> dict:
    current = tuple(filter(by_month(month), trans))
    income = _sum(filter(by_type(INCOME), current))
    expenses = _sum(filter(by_type(EXPENSE), current))
    return {"income": income, "expenses": expenses, "balance": income - expenses}


def recent_transactions(trans: Iterable[Transaction], limit: int = 5) -> list[Transaction]:
    ordered = sorted(trans, key=lambda t: t.date, reverse=True)
    return list(islice(ordered, max(0, limit)))
