"""
Event value objects.

An Event is one completed activity instance (a workout or a cost-log entry)
after normalization. Events are immutable and built fresh from each batch.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple, Union


WORKOUT = "workout"
COST_LOG = "cost-log"


@dataclass(frozen=True)
class ExerciseSet:
    """A single set: weight lifted for a number of reps."""
    weight: float = 0.0
    reps: int = 0

    @property
    def has_load(self) -> bool:
        """Whether the set counts towards volume (both weight and reps positive)."""
        return self.weight > 0 and self.reps > 0

    @property
    def volume(self) -> float:
        return self.weight * self.reps


@dataclass(frozen=True)
class Exercise:
    """One exercise entry within a workout."""
    name: str
    sets: Tuple[ExerciseSet, ...] = ()


@dataclass(frozen=True)
class WorkoutPayload:
    """Payload of a workout event."""
    name: Optional[str] = None
    status: Optional[str] = None
    group_id: Optional[str] = None
    exercises: Tuple[Exercise, ...] = ()


@dataclass(frozen=True)
class CostEntry:
    """Payload of a cost-log (AI activity) event."""
    type: Optional[str] = None
    title: Optional[str] = None
    source: str = "unknown"
    model: Optional[str] = None
    description: str = ""
    cost: Optional[float] = None
    tokens: Optional[Dict[str, Any]] = None

    @property
    def total_tokens(self) -> int:
        if not self.tokens:
            return 0
        total = self.tokens.get("total")
        if isinstance(total, bool) or not isinstance(total, (int, float)):
            return 0
        return int(total)

    @property
    def cost_amount(self) -> float:
        return self.cost if self.cost is not None else 0.0


@dataclass(frozen=True)
class Event:
    """
    Normalized activity record.

    occurred_at is a timezone-aware UTC instant, or None when the stored
    date could not be resolved.
    """
    owner_id: Optional[str]
    occurred_at: Optional[datetime]
    kind: str
    payload: Union[WorkoutPayload, CostEntry]
    source_id: Optional[str] = None

    @property
    def day(self) -> Optional[date]:
        """UTC calendar day of the event."""
        if self.occurred_at is None:
            return None
        return self.occurred_at.date()

    @property
    def is_workout(self) -> bool:
        return self.kind == WORKOUT

    @property
    def exercises(self) -> Tuple[Exercise, ...]:
        if isinstance(self.payload, WorkoutPayload):
            return self.payload.exercises
        return ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert a cost-log event to the activity feed shape."""
        entry = self.payload
        if not isinstance(entry, CostEntry):
            raise ValueError(f"Event of kind {self.kind!r} has no activity feed shape")
        return {
            "id": self.source_id,
            "type": entry.type,
            "title": entry.title,
            "description": entry.description,
            "source": entry.source,
            "model": entry.model,
            "tokens": entry.tokens,
            "cost": entry.cost,
            "timestamp": self.occurred_at.isoformat() if self.occurred_at else None,
        }
