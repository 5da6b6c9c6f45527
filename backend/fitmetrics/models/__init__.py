from fitmetrics.models.event import (
    COST_LOG,
    WORKOUT,
    CostEntry,
    Event,
    Exercise,
    ExerciseSet,
    WorkoutPayload,
)
from fitmetrics.models.goal import Goal
from fitmetrics.models.subject import Group, Subject

__all__ = [
    "COST_LOG",
    "WORKOUT",
    "CostEntry",
    "Event",
    "Exercise",
    "ExerciseSet",
    "WorkoutPayload",
    "Goal",
    "Group",
    "Subject",
]
