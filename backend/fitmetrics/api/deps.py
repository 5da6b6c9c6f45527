"""
Shared FastAPI dependencies.
"""
from fastapi import Depends, Request

from fitmetrics.services.analytics import AnalyticsCalculator, RecordSource


def get_record_source(request: Request) -> RecordSource:
    """The record source injected into the app at creation time."""
    return request.app.state.record_source


def get_calculator(source: RecordSource = Depends(get_record_source)) -> AnalyticsCalculator:
    return AnalyticsCalculator(source)
