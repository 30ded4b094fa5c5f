from datetime import date

import pytest

from fintrack.domain import SavingsGoal
from fintrack.errors import ValidationError
from fintrack.goals import apply_contribution, days_remaining, goal_progress, goals_summary


def make_goal(current=400.0, target=1000.0):
    return SavingsGoal(id=1, name="Laptop", target_amount=target, target_date="2024-12-31",
                       current_amount=current)


def test_contribution_adds_to_current_amount():
    goal = make_goal()
    updated = apply_contribution(goal, 200)

    assert updated.current_amount == 600
    assert goal_progress(updated) == pytest.approx(60.0)
    assert goal.current_amount == 400


def test_negative_contribution_rejected():
    with pytest.raises(ValidationError) as exc:
        apply_contribution(make_goal(), -1)
    assert "contribution" in exc.value.field_errors


def test_progress_capped_and_zero_target():
    assert goal_progress(make_goal(current=1500)) == 100.0
    assert goal_progress(make_goal(target=0)) == 0.0


def test_days_remaining():
    assert days_remaining("2024-12-31", date(2024, 12, 1)) == 30
    assert days_remaining("2024-12-31", date(2025, 1, 1)) == -1
    assert days_remaining("not a date", date(2024, 1, 1)) == 0


def test_goals_summary():
    summary = goals_summary([make_goal(400, 1000), make_goal(100, 1000)])
    assert summary == {"total_target": 2000, "total_saved": 500, "overall_progress": 25.0}
    assert goals_summary([])["overall_progress"] == 0.0
