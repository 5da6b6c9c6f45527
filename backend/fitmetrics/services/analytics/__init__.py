"""
Analytics module - Workout and activity metric aggregation.

This module provides:
- Record adapters for normalizing stored records
- Pure metric calculations (streaks, rollups, strength, goals, coaching)
- The calculator engine orchestrating fetch, normalization and computation
- The record source interface and its in-memory implementation
"""
from fitmetrics.services.analytics.adapter import (
    CostLogAdapter,
    GoalAdapter,
    GroupAdapter,
    RecordAdapter,
    SubjectAdapter,
    WorkoutAdapter,
    get_adapter,
    parse_instant,
)
from fitmetrics.services.analytics.calculator import (
    ActivityFeed,
    AnalyticsCalculator,
    NotFound,
    SubjectReport,
)
from fitmetrics.services.analytics.source import InMemoryRecordSource, RecordSource

__all__ = [
    # Adapters
    "RecordAdapter",
    "WorkoutAdapter",
    "CostLogAdapter",
    "GoalAdapter",
    "SubjectAdapter",
    "GroupAdapter",
    "get_adapter",
    "parse_instant",
    # Calculator
    "AnalyticsCalculator",
    "ActivityFeed",
    "NotFound",
    "SubjectReport",
    # Source
    "RecordSource",
    "InMemoryRecordSource",
]
