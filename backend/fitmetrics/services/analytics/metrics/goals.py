"""
Goal progress calculation.

Progress is a linear interpolation between the start and target values,
clamped to [0, 100]. Goals whose target is not above the start have no
measurable progress and report 0.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from fitmetrics.models import Goal
from fitmetrics.services.analytics.metrics.base import clamp, round_int


def goal_progress(goal: Goal) -> int:
    """Integer progress percentage for one goal."""
    span = goal.target_value - goal.start_value
    if span <= 0:
        return 0
    progress = round_int((goal.current_value - goal.start_value) / span * 100)
    return int(clamp(progress, 0, 100))


@dataclass(frozen=True)
class GoalProgress:
    goal: Goal
    progress: int

    def to_dict(self) -> Dict[str, Any]:
        goal = self.goal
        return {
            "lift": goal.lift,
            "type": goal.metric_type,
            "start": goal.start_value,
            "current": goal.current_value,
            "target": goal.target_value,
            "progress": self.progress,
            "status": goal.status,
            "targetDate": goal.target_date.isoformat() if goal.target_date else None,
        }


@dataclass(frozen=True)
class GoalsResult:
    active_goals: int
    goals: List[GoalProgress]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "activeGoals": self.active_goals,
            "goals": [g.to_dict() for g in self.goals],
        }


def compute_goals(goals: Sequence[Goal]) -> GoalsResult:
    """Progress for every goal plus the number of active ones."""
    return GoalsResult(
        active_goals=sum(1 for goal in goals if goal.is_active),
        goals=[GoalProgress(goal=goal, progress=goal_progress(goal)) for goal in goals],
    )
