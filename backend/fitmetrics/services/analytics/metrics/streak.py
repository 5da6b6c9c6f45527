"""
Streak and consistency calculations over activity days.

A streak is a run of activity days where adjacent days are at most
gap_days apart. "Today" is the UTC calendar day unless supplied.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from fitmetrics.models import Event
from fitmetrics.services.analytics.metrics.base import round_half_away, round_int


@dataclass(frozen=True)
class StreakResult:
    """Current and longest activity streaks for one subject."""
    current_streak: int = 0
    longest_streak: int = 0
    total_days: int = 0
    most_recent: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "totalDays": self.total_days,
            "lastWorkout": self.most_recent.isoformat() if self.most_recent else None,
        }


@dataclass(frozen=True)
class ConsistencyResult:
    """Training consistency over a fixed period."""
    period_days: int
    total_workouts: int
    unique_days: int
    workouts_per_week: float
    consistency_pct: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "periodDays": self.period_days,
            "totalWorkouts": self.total_workouts,
            "uniqueDays": self.unique_days,
            "workoutsPerWeek": self.workouts_per_week,
            "consistency": self.consistency_pct,
        }


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def activity_days(events: Iterable[Event]) -> List[date]:
    """Distinct UTC days with activity, most recent first. Undated events are skipped."""
    days = {event.day for event in events if event.day is not None}
    return sorted(days, reverse=True)


def _current_streak(days: Sequence[date], today: date, gap_days: int) -> int:
    if (today - days[0]).days > gap_days:
        return 0

    streak = 1
    for newer, older in zip(days, days[1:]):
        if (newer - older).days > gap_days:
            break
        streak += 1
    return streak


def _longest_streak(days: Sequence[date], gap_days: int) -> int:
    longest = running = 1
    for newer, older in zip(days, days[1:]):
        if (newer - older).days <= gap_days:
            running += 1
            longest = max(longest, running)
        else:
            running = 1
    return longest


def compute_streak(
    days: Iterable[date],
    today: Optional[date] = None,
    gap_days: int = 1,
) -> StreakResult:
    """
    Compute current and longest streaks over a set of activity days.

    Args:
        days: Activity days, in any order, duplicates allowed
        today: Reference day for the current streak (UTC today by default)
        gap_days: Largest gap between adjacent days that keeps a run alive

    Returns:
        StreakResult; all zeros when there are no days
    """
    ordered = sorted(set(days), reverse=True)
    if not ordered:
        return StreakResult()

    if today is None:
        today = utc_today()

    return StreakResult(
        current_streak=_current_streak(ordered, today, gap_days),
        longest_streak=_longest_streak(ordered, gap_days),
        total_days=len(ordered),
        most_recent=ordered[0],
    )


def compute_consistency(events: Sequence[Event], period_days: int) -> ConsistencyResult:
    """
    Summarize how regularly workouts happened over a period.

    Every event counts towards total workouts; only dated events count
    towards unique days.
    """
    if period_days <= 0:
        raise ValueError(f"period_days must be positive, got {period_days}")

    total = len(events)
    unique_days = len(activity_days(events))

    return ConsistencyResult(
        period_days=period_days,
        total_workouts=total,
        unique_days=unique_days,
        workouts_per_week=round_half_away(total / (period_days / 7), 1),
        consistency_pct=round_int(unique_days / period_days * 100),
    )
