"""
Coach rollups - per-athlete completion rates across the groups a coach runs.

The lookups that feed these functions (group membership, athlete display
data, assignment batches) are done by the caller; everything here works on
fully materialized inputs.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from fitmetrics.models import Event, Group, Subject
from fitmetrics.services.analytics.metrics.base import percentage
from fitmetrics.services.analytics.metrics.rollup import rollup

NOT_APPLICABLE = "N/A"


@dataclass(frozen=True)
class AthleteProgress:
    """Assigned vs. completed workouts for one athlete in one group."""
    athlete_id: str
    name: str
    group: Optional[str]
    assigned: int
    completed: int

    @property
    def completion_rate(self) -> Optional[int]:
        """Completion percentage, or None when nothing was assigned."""
        return percentage(self.completed, self.assigned)

    def to_dict(self) -> Dict[str, Any]:
        rate = self.completion_rate
        return {
            "name": self.name,
            "group": self.group,
            "workoutsAssigned": self.assigned,
            "workoutsCompleted": self.completed,
            "completionRate": NOT_APPLICABLE if rate is None else rate,
        }


def athlete_progress(
    athlete_id: str,
    athlete: Optional[Subject],
    group: Group,
    assignments: Sequence[Event],
) -> AthleteProgress:
    """
    Completion rollup for one athlete's assignments in one group.

    Args:
        athlete_id: Athlete being summarized
        athlete: Resolved athlete account, or None if it no longer exists
        group: Group the assignments belong to
        assignments: Every workout assigned to the athlete in that group
    """
    by_status = rollup(assignments, key=lambda e: e.payload.status)
    completed = by_status.get("completed")

    return AthleteProgress(
        athlete_id=athlete_id,
        name=(athlete.display_name if athlete else None) or "Unknown",
        group=group.name,
        assigned=len(assignments),
        completed=completed.event_count if completed else 0,
    )


@dataclass(frozen=True)
class AthleteProgressReport:
    athletes: List[AthleteProgress]

    def to_dict(self) -> Dict[str, Any]:
        return {"athletes": [a.to_dict() for a in self.athletes]}


def compute_athlete_progress(
    coach_id: str,
    groups: Sequence[Group],
    athletes: Mapping[str, Optional[Subject]],
    assignments: Mapping[Tuple[str, str], Sequence[Event]],
) -> AthleteProgressReport:
    """
    Roll up completion per athlete for every group the coach administers.

    Args:
        coach_id: The coach, excluded from each group's athlete list
        groups: Groups the coach administers
        athletes: Athlete id -> resolved account (None when missing)
        assignments: (group id, athlete id) -> assigned workouts
    """
    report = []
    for group in groups:
        for athlete_id in group.athletes(coach_id):
            report.append(athlete_progress(
                athlete_id,
                athletes.get(athlete_id),
                group,
                assignments.get((group.id, athlete_id), ()),
            ))
    return AthleteProgressReport(athletes=report)


@dataclass(frozen=True)
class GroupSummary:
    name: Optional[str]
    athlete_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "athleteCount": self.athlete_count}


@dataclass(frozen=True)
class CoachSummary:
    groups: List[GroupSummary]

    @property
    def total_athletes(self) -> int:
        return sum(g.athlete_count for g in self.groups)

    def to_dict(self) -> Dict[str, Any]:
        if not self.groups:
            return {"message": "Not currently coaching any groups"}
        return {
            "totalGroups": len(self.groups),
            "totalAthletes": self.total_athletes,
            "groups": [g.to_dict() for g in self.groups],
        }


def compute_coach_summary(coach_id: str, groups: Sequence[Group]) -> CoachSummary:
    """Athlete counts per administered group, excluding the coach."""
    return CoachSummary(groups=[
        GroupSummary(name=group.name, athlete_count=len(group.athletes(coach_id)))
        for group in groups
    ])
