"""
Services module - Application business logic layer.

Modules:
- analytics: metric aggregation over workout and activity records
"""
from fitmetrics.services.analytics import AnalyticsCalculator, InMemoryRecordSource, RecordSource

__all__ = [
    "AnalyticsCalculator",
    "InMemoryRecordSource",
    "RecordSource",
]
