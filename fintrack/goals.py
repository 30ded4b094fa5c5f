from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from fintrack.domain import SavingsGoal
from fintrack.errors import ValidationError


def goal_progress(goal: SavingsGoal) -> float:
    """Percent of the target saved so far, capped at 100."""
    if goal.target_amount <= 0:
        return 0.0
    return min(100.0, goal.current_amount / goal.target_amount * 100)


def apply_contribution(goal: SavingsGoal, amount: float) -> SavingsGoal:
    # contributions only ever grow the saved amount
    if amount is None or amount < 0:
        raise ValidationError({"contribution": "Please enter a valid amount"})
    return replace(goal, current_amount=goal.current_amount + amount)


def days_remaining(target_date: str, today: Optional[date] = None) -> int:
    today = today or date.today()
    try:
        target = date.fromisoformat(target_date[:10])
    except ValueError:
        return 0
    return (target - today).days


def goals_summary(goals: Iterable[SavingsGoal]) -> dict:
    goals = list(goals)
    total_target = sum(g.target_amount for g in goals)
    total_saved = sum(g.current_amount for g in goals)
    overall = total_saved / total_target * 100 if total_target > 0 else 0.0
    return {
        "total_target": total_target,
        "total_saved": total_saved,
        "overall_progress": overall,
    }
