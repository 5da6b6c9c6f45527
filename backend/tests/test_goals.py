"""
Tests for goal progress.
"""
from datetime import date

import pytest

from fitmetrics.models import Goal
from fitmetrics.services.analytics.metrics.goals import compute_goals, goal_progress


class TestGoalProgress:
    """Linear progress between start and target"""

    def test_halfway(self):
        goal = Goal(lift="Bench Press", start_value=100, current_value=150, target_value=200)
        assert goal_progress(goal) == 50

    def test_rounds_half_up(self):
        # 25 / 40 = 62.5%
        goal = Goal(lift="Bench Press", start_value=185, current_value=210, target_value=225)
        assert goal_progress(goal) == 63

    @pytest.mark.parametrize("current", [0, 100, 500])
    def test_degenerate_range(self, current):
        goal = Goal(lift="Squat", start_value=300, current_value=current, target_value=300)
        assert goal_progress(goal) == 0
        lower = Goal(lift="Squat", start_value=300, current_value=current, target_value=250)
        assert goal_progress(lower) == 0

    def test_clamped_above(self):
        goal = Goal(lift="Deadlift", start_value=250, current_value=320, target_value=315)
        assert goal_progress(goal) == 100

    def test_clamped_below(self):
        goal = Goal(lift="Deadlift", start_value=250, current_value=200, target_value=300)
        assert goal_progress(goal) == 0


class TestComputeGoals:

    def test_active_count_and_shape(self):
        goals = [
            Goal(lift="Bench Press", start_value=100, current_value=150, target_value=200,
                 status="active", target_date=date(2026, 6, 1)),
            Goal(lift="Squat", start_value=200, current_value=320, target_value=300,
                 status="completed"),
        ]
        result = compute_goals(goals).to_dict()
        assert result["activeGoals"] == 1
        assert result["goals"][0] == {
            "lift": "Bench Press",
            "type": "weight",
            "start": 100,
            "current": 150,
            "target": 200,
            "progress": 50,
            "status": "active",
            "targetDate": "2026-06-01",
        }
        assert result["goals"][1]["progress"] == 100

    def test_no_goals(self):
        assert compute_goals([]).to_dict() == {"activeGoals": 0, "goals": []}
