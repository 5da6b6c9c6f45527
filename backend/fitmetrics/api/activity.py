"""
AI activity API endpoints.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from fitmetrics.api.deps import get_calculator
from fitmetrics.api.fitness import respond
from fitmetrics.core.logging import get_logger
from fitmetrics.services.analytics import AnalyticsCalculator

logger = get_logger(__name__)
router = APIRouter()

MAX_RECENT_LIMIT = 100
MAX_COST_DAYS = 365
MAX_STATS_DAYS = 90


# ========================================
# Request Schemas
# ========================================

class LogActivityRequest(BaseModel):
    """Request to log an AI activity entry."""
    type: Optional[str] = Field(None, description="Activity type")
    title: Optional[str] = Field(None, description="Short title")
    source: Optional[str] = Field(None, description="Agent or service that ran")
    description: Optional[str] = Field(None, description="Free-form description")
    model: Optional[str] = Field(None, description="Model used")
    tokens: Optional[Dict[str, Any]] = Field(None, description="Token counts, e.g. {'total': 1200}")
    cost: Optional[float] = Field(None, description="Cost in dollars")


def _capped(value: Optional[int], ceiling: int) -> Optional[int]:
    return min(value, ceiling) if value else value


# ========================================
# API Endpoints
# ========================================

@router.get("/recent")
async def get_recent_activity(
    limit: Optional[int] = None,
    source: Optional[str] = None,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    """Most recent activity entries, optionally for one source."""
    return await respond(
        calculator.get_recent_activity(_capped(limit, MAX_RECENT_LIMIT), source)
    )


@router.get("/costs")
async def get_cost_summary(
    days: Optional[int] = None,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_cost_summary(_capped(days, MAX_COST_DAYS)))


@router.get("/stats")
async def get_activity_stats(
    days: Optional[int] = None,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_activity_stats(_capped(days, MAX_STATS_DAYS)))


@router.post("/log")
async def log_activity(
    request: LogActivityRequest,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    """
    Log an AI activity entry.

    type, title and source are required; a missing one is rejected with 400.
    """
    try:
        event = await calculator.log_activity(**request.model_dump())
    except ValueError as e:
        logger.warning("Rejected activity entry", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return event.to_dict()
