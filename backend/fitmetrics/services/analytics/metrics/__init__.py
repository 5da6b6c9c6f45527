"""
Metric calculations.

Each module holds pure functions over already-normalized batches:
- streak: activity streaks and consistency
- rollup: group-by aggregation, cost summary and activity stats
- strength: estimated maxes, PR histories, volume and exercise frequency
- goals: goal progress
- coaching: athlete completion rollups
- profile: profile and body stats
"""
from fitmetrics.services.analytics.metrics.coaching import (
    compute_athlete_progress,
    compute_coach_summary,
)
from fitmetrics.services.analytics.metrics.goals import compute_goals, goal_progress
from fitmetrics.services.analytics.metrics.profile import compute_body_stats, compute_profile
from fitmetrics.services.analytics.metrics.rollup import (
    compute_activity_stats,
    compute_cost_summary,
    rollup,
)
from fitmetrics.services.analytics.metrics.strength import (
    compute_max_lifts,
    compute_pr_history,
    compute_top_exercises,
    compute_training_volume,
    estimate_one_rep_max,
    summarize_workouts,
)
from fitmetrics.services.analytics.metrics.streak import (
    activity_days,
    compute_consistency,
    compute_streak,
)

__all__ = [
    "activity_days",
    "compute_activity_stats",
    "compute_athlete_progress",
    "compute_body_stats",
    "compute_coach_summary",
    "compute_consistency",
    "compute_cost_summary",
    "compute_goals",
    "compute_max_lifts",
    "compute_pr_history",
    "compute_profile",
    "compute_streak",
    "compute_top_exercises",
    "compute_training_volume",
    "estimate_one_rep_max",
    "goal_progress",
    "rollup",
    "summarize_workouts",
]
