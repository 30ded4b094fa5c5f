import asyncio
from datetime import date
from typing import Optional

from fintrack.budgets import aggregate_budget_periods, aggregate_budgets, budget_totals
from fintrack.events import BudgetNotifier
from fintrack.goals import goals_summary
from fintrack.reports import (
    budget_performance,
    category_breakdown,
    in_range,
    monthly_summary,
    monthly_trend,
    recent_transactions,
    report_totals,
)
from fintrack.services import Services
from fintrack.transforms import total_balance


def current_month(today: Optional[date] = None) -> str:
    return (today or date.today()).strftime("%Y-%m")


async def _gather(*calls):
    """Run blocking service reads side by side."""
    return await asyncio.gather(*(asyncio.to_thread(fn, *args) for fn, *args in calls))


async def load_dashboard(services: Services, month: str) -> dict:
    transactions, categories = await _gather(
        (services.transactions.get_all,),
        (services.categories.get_all,),
    )
    return {
        "transactions": transactions,
        "categories": categories,
        "summary": monthly_summary(transactions, month),
        "recent": recent_transactions(transactions, 5),
    }


async def load_budget_page(
    services: Services, month: str, notifier: Optional[BudgetNotifier] = None
) -> dict:
    """Budgets of ``month`` with their spend; alerts fire on every load."""
    budgets, transactions, categories = await _gather(
        (services.budgets.get_by_month, month),
        (services.transactions.get_all,),
        (services.categories.get_all,),
    )
    progress = aggregate_budgets(transactions, budgets, month)
    alerts = notifier.check(progress) if notifier is not None else []
    return {
        "progress": progress,
        "categories": categories,
        "totals": budget_totals(progress),
        "alerts": alerts,
    }


async def load_report(services: Services, start: str, end: str) -> dict:
    transactions, categories, budgets, accounts = await _gather(
        (services.transactions.get_all,),
        (services.categories.get_all,),
        (services.budgets.get_all,),
        (services.accounts.get_all,),
    )
    selected = in_range(transactions, start, end)
    progress = aggregate_budget_periods(transactions, budgets, start, end)
    return {
        "totals": report_totals(transactions, start, end, budgets),
        "breakdown": category_breakdown(selected),
        # trend covers all history, not just the selected range
        "trend": monthly_trend(transactions),
        "performance": budget_performance(progress),
        "categories": categories,
        "accounts": accounts,
        "total_balance": total_balance(accounts),
    }


async def load_goals(services: Services) -> dict:
    goals = await asyncio.to_thread(services.goals.get_all)
    return {"goals": goals, "summary": goals_summary(goals)}
