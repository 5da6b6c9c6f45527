"""
Fitness analytics API endpoints.
"""
from typing import Any, Awaitable, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from fitmetrics.api.deps import get_calculator
from fitmetrics.core.logging import get_logger
from fitmetrics.services.analytics import AnalyticsCalculator, NotFound

logger = get_logger(__name__)
router = APIRouter()


async def respond(pending: Awaitable[Any]) -> Any:
    """Await a calculator result and map it onto an HTTP response."""
    try:
        result = await pending
    except ValueError as e:
        logger.warning("Rejected request parameters", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    if isinstance(result, NotFound):
        return JSONResponse(status_code=404, content=result.to_dict())
    return result.to_dict()


# ========================================
# Profile
# ========================================

@router.get("/profile/{username}")
async def get_profile(
    username: str,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    """Profile summary with workout and group counts."""
    return await respond(calculator.get_profile(username))


@router.get("/body/{username}")
async def get_body_stats(
    username: str,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_body_stats(username))


# ========================================
# Training
# ========================================

@router.get("/streak/{username}")
async def get_streak(
    username: str,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_streak(username))


@router.get("/consistency/{username}")
async def get_consistency(
    username: str,
    days: Optional[int] = None,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_consistency(username, days))


@router.get("/volume/{username}")
async def get_training_volume(
    username: str,
    days: Optional[int] = None,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_training_volume(username, days))


@router.get("/exercises/{username}")
async def get_top_exercises(
    username: str,
    limit: Optional[int] = None,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_top_exercises(username, limit))


@router.get("/workouts/{username}")
async def get_recent_workouts(
    username: str,
    limit: Optional[int] = None,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_recent_workouts(username, limit))


# ========================================
# Strength
# ========================================

@router.get("/prs/{username}")
async def get_pr_history(
    username: str,
    exercise: Optional[str] = None,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    """
    PR progression per exercise.

    Pass `exercise` to restrict the history to one lift (case-insensitive).
    """
    return await respond(calculator.get_pr_history(username, exercise))


@router.get("/maxes/{username}")
async def get_max_lifts(
    username: str,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_max_lifts(username))


@router.get("/goals/{username}")
async def get_goals(
    username: str,
    completed: bool = False,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_goals(username, include_completed=completed))


# ========================================
# Coaching
# ========================================

@router.get("/coach/{username}")
async def get_coach_summary(
    username: str,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    return await respond(calculator.get_coach_summary(username))


@router.get("/coach/{username}/athletes")
async def get_athlete_progress(
    username: str,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    """Completion rates for every athlete the coach runs."""
    return await respond(calculator.get_athlete_progress(username))
