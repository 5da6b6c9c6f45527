"""
Strength Metric Engine - estimated maxes, PR histories and training volume.

Estimated one-rep max formulas:
- epley:   weight * (1 + reps / 30)
- brzycki: weight * 36 / (37 - reps)

Only sets with positive weight and 1..max_reps reps contribute to max
estimation; higher-rep sets are too unreliable for either formula.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from fitmetrics.models import Event, ExerciseSet
from fitmetrics.services.analytics.metrics.base import round_int
from fitmetrics.services.analytics.metrics.rollup import rollup

DEFAULT_MAX_REPS = 12
BRZYCKI_REP_LIMIT = 37


def _epley(weight: float, reps: int) -> float:
    return weight * (1 + reps / 30)


def _brzycki(weight: float, reps: int) -> float:
    return weight * 36 / (37 - reps)


E1RM_FORMULAS: Dict[str, Callable[[float, int], float]] = {
    "epley": _epley,
    "brzycki": _brzycki,
}


def estimate_one_rep_max(weight: float, reps: int, formula: str = "epley") -> int:
    """
    Estimate a one-rep max from a sub-maximal set.

    Raises:
        ValueError: If the formula is unknown
    """
    _check_formula(formula)
    return round_int(E1RM_FORMULAS[formula](weight, reps))


def qualifies_for_max(exercise_set: ExerciseSet, max_reps: int = DEFAULT_MAX_REPS) -> bool:
    return exercise_set.weight > 0 and 0 < exercise_set.reps <= max_reps


def _check_formula(formula: str) -> None:
    if formula not in E1RM_FORMULAS:
        raise ValueError(
            f"Unknown e1RM formula: {formula}. Expected one of {sorted(E1RM_FORMULAS)}"
        )


def check_rep_cap(formula: str, max_reps: int) -> None:
    """
    Validate the highest qualifying rep count for a formula.

    Brzycki divides by (37 - reps), so its cap must stay below 37.

    Raises:
        ValueError: If the formula is unknown or the cap is out of range
    """
    _check_formula(formula)
    if max_reps < 1:
        raise ValueError(f"max_reps must be positive, got {max_reps}")
    if formula == "brzycki" and max_reps >= BRZYCKI_REP_LIMIT:
        raise ValueError(
            f"max_reps must be below {BRZYCKI_REP_LIMIT} for brzycki, got {max_reps}"
        )


# ========================================
# Current Maxes
# ========================================

@dataclass(frozen=True)
class LiftMax:
    """Best set for one exercise by estimated 1RM."""
    exercise: str
    weight: float
    reps: int
    estimated_1rm: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exercise": self.exercise,
            "weight": self.weight,
            "reps": self.reps,
            "estimated1RM": self.estimated_1rm,
        }


def compute_max_lifts(
    events: Sequence[Event],
    formula: str = "epley",
    max_reps: int = DEFAULT_MAX_REPS,
) -> List[LiftMax]:
    """
    Best estimated 1RM per exercise across a batch.

    Ties keep the first set encountered. Output is sorted by estimated 1RM,
    highest first.
    """
    check_rep_cap(formula, max_reps)
    maxes: Dict[str, LiftMax] = {}

    for event in events:
        for exercise in event.exercises:
            for exercise_set in exercise.sets:
                if not qualifies_for_max(exercise_set, max_reps):
                    continue
                e1rm = estimate_one_rep_max(exercise_set.weight, exercise_set.reps, formula)
                best = maxes.get(exercise.name)
                if best is None or e1rm > best.estimated_1rm:
                    maxes[exercise.name] = LiftMax(
                        exercise=exercise.name,
                        weight=exercise_set.weight,
                        reps=exercise_set.reps,
                        estimated_1rm=e1rm,
                    )

    return sorted(maxes.values(), key=lambda m: m.estimated_1rm, reverse=True)


@dataclass(frozen=True)
class MaxLifts:
    lifts: List[LiftMax]

    def to_dict(self) -> Dict[str, Any]:
        return {"lifts": [lift.to_dict() for lift in self.lifts]}


# ========================================
# PR History
# ========================================

@dataclass(frozen=True)
class PREntry:
    """A strictly-improving estimated 1RM for one exercise."""
    day: date
    weight: float
    reps: int
    estimated_1rm: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "weight": self.weight,
            "reps": self.reps,
            "e1rm": self.estimated_1rm,
        }


@dataclass
class StrengthRecord:
    """PR progression for one exercise."""
    exercise: str
    history: List[PREntry] = field(default_factory=list)

    @property
    def current_pr(self) -> Optional[PREntry]:
        return self.history[-1] if self.history else None

    @property
    def best_weight(self) -> Optional[float]:
        return self.current_pr.weight if self.current_pr else None

    @property
    def best_reps(self) -> Optional[int]:
        return self.current_pr.reps if self.current_pr else None

    @property
    def estimated_1rm(self) -> int:
        return self.current_pr.estimated_1rm if self.current_pr else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentPR": self.current_pr.to_dict() if self.current_pr else None,
            "prCount": len(self.history),
            "history": [entry.to_dict() for entry in self.history],
        }


def compute_pr_history(
    events: Sequence[Event],
    exercise: Optional[str] = None,
    formula: str = "epley",
    max_reps: int = DEFAULT_MAX_REPS,
) -> Dict[str, StrengthRecord]:
    """
    Build per-exercise PR histories in chronological order.

    A set is recorded only when its estimated 1RM is strictly greater than
    every earlier entry for that exercise. Events are ordered by date
    (stable for same-instant events); undated events are skipped.

    Args:
        events: Workout events in any order
        exercise: Optional exercise name filter (case-insensitive)
        formula: e1RM formula name
        max_reps: Highest rep count that qualifies

    Returns:
        Mapping of exercise name to StrengthRecord; empty without qualifying sets
    """
    check_rep_cap(formula, max_reps)
    wanted = exercise.lower() if exercise else None
    records: Dict[str, StrengthRecord] = {}

    dated = sorted(
        (e for e in events if e.occurred_at is not None),
        key=lambda e: e.occurred_at,
    )

    for event in dated:
        for entry in event.exercises:
            if wanted is not None and entry.name.lower() != wanted:
                continue
            for exercise_set in entry.sets:
                if not qualifies_for_max(exercise_set, max_reps):
                    continue
                e1rm = estimate_one_rep_max(exercise_set.weight, exercise_set.reps, formula)
                record = records.get(entry.name)
                best = record.estimated_1rm if record else 0
                if e1rm <= best:
                    continue
                if record is None:
                    record = records[entry.name] = StrengthRecord(exercise=entry.name)
                record.history.append(PREntry(
                    day=event.day,
                    weight=exercise_set.weight,
                    reps=exercise_set.reps,
                    estimated_1rm=e1rm,
                ))

    return records


@dataclass(frozen=True)
class PRHistory:
    exercises: Dict[str, StrengthRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exercises": {name: record.to_dict() for name, record in self.exercises.items()},
        }


# ========================================
# Volume
# ========================================

@dataclass(frozen=True)
class VolumeResult:
    """Training volume (weight x reps) over a period."""
    period_days: int
    total_volume: float
    total_sets: int
    total_reps: int
    workout_count: int

    @property
    def avg_volume_per_workout(self) -> int:
        if not self.workout_count:
            return 0
        return round_int(self.total_volume / self.workout_count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "periodDays": self.period_days,
            "totalVolume": self.total_volume,
            "totalSets": self.total_sets,
            "totalReps": self.total_reps,
            "workoutCount": self.workout_count,
            "avgVolumePerWorkout": self.avg_volume_per_workout,
        }


def compute_training_volume(events: Sequence[Event], period_days: int) -> VolumeResult:
    """Sum volume, sets and reps over every loaded set in the batch."""
    loaded = [
        exercise_set
        for event in events
        for exercise in event.exercises
        for exercise_set in exercise.sets
        if exercise_set.has_load
    ]

    return VolumeResult(
        period_days=period_days,
        total_volume=sum(s.volume for s in loaded),
        total_sets=len(loaded),
        total_reps=sum(s.reps for s in loaded),
        workout_count=len(events),
    )


@dataclass(frozen=True)
class ExerciseFrequency:
    name: str
    sessions: int
    total_volume: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "sessions": self.sessions,
            "totalVolume": self.total_volume,
        }


@dataclass(frozen=True)
class TopExercises:
    total_exercises: int
    top_by_frequency: List[ExerciseFrequency]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalExercises": self.total_exercises,
            "topByFrequency": [e.to_dict() for e in self.top_by_frequency],
        }


def compute_top_exercises(events: Sequence[Event], limit: int = 10) -> TopExercises:
    """
    Rank exercises by the number of sessions they appear in.

    Each exercise entry in a workout counts as one session. Ties keep the
    order in which exercises were first seen.
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    entries = [exercise for event in events for exercise in event.exercises]
    buckets = rollup(
        entries,
        key=lambda ex: ex.name,
        measures={"volume": lambda ex: sum(s.volume for s in ex.sets)},
        sort_by_count=True,
    )

    ranked = [
        ExerciseFrequency(name=name, sessions=b.event_count, total_volume=b.totals["volume"])
        for name, b in buckets.items()
    ]
    return TopExercises(total_exercises=len(ranked), top_by_frequency=ranked[:limit])


# ========================================
# Recent Workouts
# ========================================

@dataclass(frozen=True)
class WorkoutSummary:
    name: Optional[str]
    day: Optional[date]
    exercises: Tuple[Tuple[str, int], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "date": self.day.isoformat() if self.day else None,
            "exercises": [{"name": name, "sets": sets} for name, sets in self.exercises],
        }


@dataclass(frozen=True)
class RecentWorkouts:
    workouts: List[WorkoutSummary]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workoutCount": len(self.workouts),
            "workouts": [w.to_dict() for w in self.workouts],
        }


def summarize_workouts(events: Sequence[Event]) -> RecentWorkouts:
    """Name, day and set counts per exercise, in the order given."""
    return RecentWorkouts(workouts=[
        WorkoutSummary(
            name=getattr(event.payload, "name", None),
            day=event.day,
            exercises=tuple((ex.name, len(ex.sets)) for ex in event.exercises),
        )
        for event in events
    ])
