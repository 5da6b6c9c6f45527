"""
Analytics Calculator - Main engine for computing workout and activity metrics.

Orchestrates:
- Fetching complete batches from the injected record source
- Normalization through the record adapters
- Pure metric computation
- Missing-subject handling
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from fitmetrics.core.config import Settings, settings as default_settings
from fitmetrics.core.logging import get_logger, track_computation
from fitmetrics.models import COST_LOG, WORKOUT, Event, Group, Subject
from fitmetrics.services.analytics.adapter import get_adapter
from fitmetrics.services.analytics.metrics import (
    activity_days,
    compute_activity_stats,
    compute_athlete_progress,
    compute_body_stats,
    compute_coach_summary,
    compute_consistency,
    compute_cost_summary,
    compute_goals,
    compute_max_lifts,
    compute_pr_history,
    compute_profile,
    compute_streak,
    compute_top_exercises,
    compute_training_volume,
    summarize_workouts,
)
from fitmetrics.services.analytics.metrics.profile import ProfileSummary
from fitmetrics.services.analytics.metrics.rollup import ActivityStats, CostSummary
from fitmetrics.services.analytics.metrics.strength import MaxLifts, PRHistory, check_rep_cap
from fitmetrics.services.analytics.source import RecordSource

logger = get_logger(__name__)

REQUIRED_ACTIVITY_FIELDS = ("type", "title", "source")


@dataclass(frozen=True)
class NotFound:
    """Sentinel result for a subject the record source cannot resolve."""
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


@dataclass(frozen=True)
class SubjectReport:
    """A metric result labelled with the subject it was computed for."""
    subject: Subject
    result: Any
    label: str = "user"
    include_username: bool = False

    def to_dict(self) -> Dict[str, Any]:
        report = {self.label: self.subject.display_name}
        if self.include_username:
            report["username"] = self.subject.username
        report.update(self.result.to_dict())
        return report


@dataclass(frozen=True)
class ActivityFeed:
    activities: List[Event]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": len(self.activities),
            "activities": [a.to_dict() for a in self.activities],
        }


Result = Union[SubjectReport, NotFound]


def _require_positive(name: str, value: int) -> int:
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


class AnalyticsCalculator:
    """
    Main analytics engine.

    The record source is passed in explicitly; nothing here holds a global
    store handle. The clock is injectable so "today" can be pinned in tests.

    Usage:
        calculator = AnalyticsCalculator(source)
        streak = await calculator.get_streak("alice")
    """

    def __init__(
        self,
        source: RecordSource,
        config: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.source = source
        self.config = config or default_settings
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        check_rep_cap(self.config.E1RM_FORMULA, self.config.E1RM_MAX_REPS)

        self._workouts = get_adapter(WORKOUT)
        self._cost_logs = get_adapter(COST_LOG)
        self._goals = get_adapter("goal")
        self._subjects = get_adapter("subject")
        self._groups = get_adapter("group")

    # ========================================
    # Fetch helpers
    # ========================================

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc)

    def _cutoff(self, days: int) -> datetime:
        return self._now() - timedelta(days=days)

    async def _find_subject(self, username: str) -> Optional[Subject]:
        record = await self.source.find_user(username)
        if record is None:
            logger.info("Subject not found", username=username)
            return None
        return self._subjects.normalize(record)

    async def _completed_workouts(
        self,
        subject: Subject,
        since: Optional[datetime] = None,
        newest_first: bool = True,
    ) -> List[Event]:
        """Personal and group workouts, fetched concurrently."""
        personal, group = await asyncio.gather(
            self.source.personal_workouts(subject.id, since=since, newest_first=newest_first),
            self.source.group_workouts(subject.id, since=since, newest_first=newest_first),
        )
        return self._workouts.normalize_all(personal) + self._workouts.normalize_all(group)

    # ========================================
    # Profile
    # ========================================

    async def get_profile(self, username: str) -> Union[ProfileSummary, NotFound]:
        """Profile summary with workout and group counts."""
        with track_computation(logger, "profile", username=username) as tracker:
            subject = await self._find_subject(username)
            if subject is None:
                tracker.set_not_found()
                return NotFound("User not found")

            workouts, member_of, coaching = await asyncio.gather(
                self._completed_workouts(subject),
                self.source.groups_for_member(subject.id),
                self.source.groups_for_admin(subject.id),
            )
            tracker.add_batch(workouts)

            return compute_profile(
                subject,
                total_workouts=len(workouts),
                groups_member=len(member_of),
                groups_coaching=len(coaching),
            )

    async def get_body_stats(self, username: str) -> Result:
        with track_computation(logger, "body_stats", username=username) as tracker:
            subject = await self._find_subject(username)
            if subject is None:
                tracker.set_not_found()
                return NotFound("User not found")
            return SubjectReport(subject, compute_body_stats(subject))

    # ========================================
    # Streaks & Consistency
    # ========================================

    async def get_streak(self, username: str) -> Result:
        """Current and longest streak over every completed workout."""
        with track_computation(logger, "streak", username=username) as tracker:
            subject = await self._find_subject(username)
            if subject is None:
                tracker.set_not_found()
                return NotFound("User not found")

            events = await self._completed_workouts(subject)
            tracker.add_batch(events)

            result = compute_streak(
                activity_days(events),
                today=self._now().date(),
                gap_days=self.config.STREAK_GAP_DAYS,
            )
            return SubjectReport(subject, result)

    async def get_consistency(self, username: str, days: Optional[int] = None) -> Result:
        days = _require_positive("days", days or self.config.CONSISTENCY_DAYS)

        with track_computation(logger, "consistency", username=username, days=days) as tracker:
            subject = await self._find_subject(username)
            if subject is None:
                tracker.set_not_found()
                return NotFound("User not found")

            events = await self._completed_workouts(subject, since=self._cutoff(days))
            tracker.add_batch(events)

            return SubjectReport(subject, compute_consistency(events, days))

    # ========================================
    # Volume & Exercises
    # ========================================

    async def get_training_volume(self, username: str, days: Optional[int] = None) -> Result:
        days = _require_positive("days", days or self.config.VOLUME_DAYS)

        with track_computation(logger, "training_volume", username=username, days=days) as tracker:
            subject = await self._find_subject(username)
            if subject is None:
                tracker.set_not_found()
                return NotFound("User not found")

            events = await self._completed_workouts(subject, since=self._cutoff(days))
            tracker.add_batch(events)

            return SubjectReport(subject, compute_training_volume(events, days))

    async def get_top_exercises(self, username: str, limit: Optional[int] = None) -> Result:
        limit = _require_positive("limit", limit or self.config.TOP_EXERCISES_LIMIT)

        with track_computation(logger, "top_exercises", username=username, limit=limit) as tracker:
            subject = await self._find_subject(username)
            if subject is None:
                tracker.set_not_found()
                return NotFound("User not found")

            events = await self._completed_workouts(subject)
            tracker.add_batch(events)

            return SubjectReport(subject, compute_top_exercises(events, limit))

    async def get_recent_workouts(self, username: str, limit: Optional[int] = None) -> Result:
        """Most recent completed personal workouts."""
        limit = _require_positive("limit", limit or self.config.RECENT_WORKOUTS_LIMIT)

        with track_computation(logger, "recent_workouts", username=username, limit=limit) as tracker:
            subject = await self._find_subject(username)
            if subject is None:
                tracker.set_not_found()
                return NotFound("User not found")

            records = await self.source.personal_workouts(subject.id, limit=limit)
            tracker.add_batch(records)

            return SubjectReport(
                subject,
                summarize_workouts(self._workouts.normalize_all(records)),
            )

    # ========================================
    # Strength
    # ========================================

    async def get_pr_history(self, username: str, exercise: Optional[str] = None) -> Result:
        with track_computation(logger, "pr_history", username=username, exercise=exercise) as tracker:
            subject = await self._find_subject(username)
            if subject is None:
                tracker.set_not_found()
                return NotFound("User not found")

            events = await self._completed_workouts(subject, newest_first=False)
            tracker.add_batch(events)

            records = compute_pr_history(
                events,
                exercise=exercise,
                formula=self.config.E1RM_FORMULA,
                max_reps=self.config.E1RM_MAX_REPS,
            )
            return SubjectReport(subject, PRHistory(exercises=records))

    async def get_max_lifts(self, username: str) -> Result:
        with track_computation(logger, "max_lifts", username=username) as tracker:
            subject = await self._find_subject(username)
            if subject is None:
                tracker.set_not_found()
                return NotFound("User not found")

            events = await self._completed_workouts(subject)
            tracker.add_batch(events)

            lifts = compute_max_lifts(
                events,
                formula=self.config.E1RM_FORMULA,
                max_reps=self.config.E1RM_MAX_REPS,
            )
            return SubjectReport(subject, MaxLifts(lifts=lifts))

    # ========================================
    # Goals
    # ========================================

    async def get_goals(self, username: str, include_completed: bool = False) -> Result:
        with track_computation(logger, "goals", username=username) as tracker:
            subject = await self._find_subject(username)
            if subject is None:
                tracker.set_not_found()
                return NotFound("User not found")

            records = await self.source.goals(subject.id, include_completed=include_completed)
            tracker.add_batch(records)

            return SubjectReport(subject, compute_goals(self._goals.normalize_all(records)))

    # ========================================
    # Coaching
    # ========================================

    async def _coached_groups(self, coach: Subject) -> List[Group]:
        records = await self.source.groups_for_admin(coach.id)
        return self._groups.normalize_all(records)

    async def get_coach_summary(self, username: str) -> Result:
        with track_computation(logger, "coach_summary", username=username) as tracker:
            coach = await self._find_subject(username)
            if coach is None:
                tracker.set_not_found()
                return NotFound("Coach not found")

            groups = await self._coached_groups(coach)
            tracker.add_batch(groups)

            return SubjectReport(
                coach,
                compute_coach_summary(coach.id, groups),
                label="coach",
                include_username=bool(groups),
            )

    async def get_athlete_progress(self, username: str) -> Result:
        """
        Completion rates for every athlete in every group the coach runs.

        Athlete lookups and assignment batches are independent and fetched
        concurrently; the rollup runs once all of them are in.
        """
        with track_computation(logger, "athlete_progress", username=username) as tracker:
            coach = await self._find_subject(username)
            if coach is None:
                tracker.set_not_found()
                return NotFound("Coach not found")

            groups = await self._coached_groups(coach)

            pairs: List[Tuple[Group, str]] = [
                (group, athlete_id)
                for group in groups
                for athlete_id in group.athletes(coach.id)
            ]
            athlete_ids = list(dict.fromkeys(athlete_id for _, athlete_id in pairs))

            users, batches = await asyncio.gather(
                asyncio.gather(*(self.source.get_user(a) for a in athlete_ids)),
                asyncio.gather(*(self.source.group_assignments(a, g.id) for g, a in pairs)),
            )

            athletes = {
                athlete_id: self._subjects.normalize(record) if record else None
                for athlete_id, record in zip(athlete_ids, users)
            }
            assignments = {}
            for (group, athlete_id), records in zip(pairs, batches):
                tracker.add_batch(records)
                assignments[(group.id, athlete_id)] = self._workouts.normalize_all(records)

            report = compute_athlete_progress(coach.id, groups, athletes, assignments)
            return SubjectReport(coach, report, label="coach")

    # ========================================
    # AI Activity
    # ========================================

    async def get_recent_activity(
        self,
        limit: Optional[int] = None,
        source: Optional[str] = None,
    ) -> ActivityFeed:
        limit = _require_positive("limit", limit or self.config.RECENT_ACTIVITY_LIMIT)

        with track_computation(logger, "recent_activity", limit=limit, source=source) as tracker:
            records = await self.source.activity(source=source, limit=limit)
            tracker.add_batch(records)
            return ActivityFeed(activities=self._cost_logs.normalize_all(records))

    async def get_cost_summary(self, days: Optional[int] = None) -> CostSummary:
        """AI cost breakdown by source, model and type."""
        days = _require_positive("days", days or self.config.COST_SUMMARY_DAYS)

        with track_computation(logger, "cost_summary", days=days) as tracker:
            records = await self.source.activity(since=self._cutoff(days))
            tracker.add_batch(records)

            return compute_cost_summary(
                self._cost_logs.normalize_all(records),
                period_days=days,
                decimals=self.config.COST_DECIMALS,
            )

    async def get_activity_stats(self, days: Optional[int] = None) -> ActivityStats:
        days = _require_positive("days", days or self.config.ACTIVITY_STATS_DAYS)

        with track_computation(logger, "activity_stats", days=days) as tracker:
            records = await self.source.activity(since=self._cutoff(days))
            tracker.add_batch(records)

            return compute_activity_stats(self._cost_logs.normalize_all(records), days)

    async def log_activity(
        self,
        type: Optional[str] = None,
        title: Optional[str] = None,
        source: Optional[str] = None,
        description: Optional[str] = None,
        model: Optional[str] = None,
        tokens: Optional[Dict[str, Any]] = None,
        cost: Optional[float] = None,
    ) -> Event:
        """
        Validate and store an AI activity entry.

        Raises:
            ValueError: If type, title or source is missing
        """
        fields = {"type": type, "title": title, "source": source}
        missing = [name for name in REQUIRED_ACTIVITY_FIELDS if not fields[name]]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        record = {
            "type": type,
            "title": title,
            "source": source,
            "description": description or "",
            "model": model or None,
            "tokens": tokens or None,
            "cost": cost,
            "timestamp": self._now(),
        }
        record["id"] = await self.source.add_activity(record)

        logger.info("Logged activity", activity_id=record["id"], type=type, source=source)

        return self._cost_logs.normalize(record)
