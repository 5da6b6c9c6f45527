"""
Record Adapters - Normalize stored records into the canonical value objects.

Supported record kinds:
- workout (personal and group-assigned workouts)
- cost-log (AI activity feed entries)
- goal
- subject (user accounts)
- group

Adapters are the only place that knows about legacy field names and
provider-specific date types. Everything downstream is schema-strict.
"""
import math
import re
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from fitmetrics.core.logging import get_logger
from fitmetrics.models import (
    COST_LOG,
    WORKOUT,
    CostEntry,
    Event,
    Exercise,
    ExerciseSet,
    Goal,
    Group,
    Subject,
    WorkoutPayload,
)

logger = get_logger(__name__)

_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


# ========================================
# Field Parsing Helpers
# ========================================

def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(value: Any) -> Optional[datetime]:
    """
    Resolve a stored date to a timezone-aware UTC instant.

    Accepts datetimes (naive ones are taken as UTC), dates, ISO-8601 strings,
    epoch milliseconds, Firestore-style timestamp objects and
    {"seconds": ..., "nanoseconds": ...} mappings.

    Returns:
        UTC datetime, or None if the value cannot be resolved
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _as_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    # Provider timestamp types (Firestore Timestamp, protobuf Timestamp)
    for converter_name in ("to_datetime", "ToDatetime"):
        converter = getattr(value, converter_name, None)
        if callable(converter):
            try:
                converted = converter()
            except (TypeError, ValueError, OverflowError, OSError):
                return None
            if isinstance(converted, date):
                return parse_instant(converted)
            return None

    if isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            return None
        nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
        if isinstance(nanos, bool) or not isinstance(nanos, (int, float)):
            nanos = 0
        try:
            return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return _as_utc(datetime.fromisoformat(text))
        except ValueError:
            return None

    return None


def parse_day(value: Any) -> Optional[date]:
    """Resolve a stored date to its UTC calendar day."""
    instant = parse_instant(value)
    return instant.date() if instant else None


def parse_number(value: Any) -> Optional[float]:
    """Parse a float from a number or the leading numeric part of a string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if not match:
            return None
        number = float(match.group(0))
        return number if math.isfinite(number) else None
    return None


def parse_count(value: Any) -> Optional[int]:
    """Parse an integer from a number or the leading digits of a string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        return int(match.group(0)) if match else None
    return None


def _first_nonzero(*values: Optional[float]) -> Optional[float]:
    """First parsed value that is neither missing nor zero."""
    for value in values:
        if value:
            return value
    return None


# ========================================
# Adapters
# ========================================

class RecordAdapter(ABC):
    """Abstract base class for stored-record adapters."""

    kind: str = "unknown"

    @abstractmethod
    def normalize(self, record: Dict[str, Any]) -> Any:
        """
        Normalize a stored record to its canonical value object.

        Args:
            record: Raw record from the record source

        Returns:
            Canonical value object
        """
        pass

    def normalize_all(self, records: Iterable[Dict[str, Any]]) -> List[Any]:
        """Normalize a batch of records, preserving order."""
        return [self.normalize(record) for record in records]


class WorkoutAdapter(RecordAdapter):
    """
    Adapter for personal and group-assigned workouts.

    Set values are read from the actual fields first and fall back to the
    prescribed ones; a zero or unparseable actual value falls through.
    """

    kind = WORKOUT

    def normalize(self, record: Dict[str, Any]) -> Event:
        occurred_at = parse_instant(record.get("date"))
        if occurred_at is None and record.get("date") is not None:
            logger.debug(
                "Workout has unparseable date",
                record_id=record.get("id"),
            )

        payload = WorkoutPayload(
            name=record.get("name"),
            status=record.get("status"),
            group_id=record.get("groupId"),
            exercises=tuple(
                self._extract_exercise(exercise)
                for exercise in record.get("exercises") or []
            ),
        )

        return Event(
            owner_id=record.get("userId") or record.get("assignedTo"),
            occurred_at=occurred_at,
            kind=self.kind,
            payload=payload,
            source_id=record.get("id"),
        )

    def _extract_exercise(self, exercise: Dict[str, Any]) -> Exercise:
        return Exercise(
            name=exercise.get("name") or "",
            sets=tuple(self._extract_set(s) for s in exercise.get("sets") or []),
        )

    def _extract_set(self, raw_set: Dict[str, Any]) -> ExerciseSet:
        weight = _first_nonzero(
            parse_number(raw_set.get("actualWeight")),
            parse_number(raw_set.get("prescribedWeight")),
        )
        reps = _first_nonzero(
            parse_count(raw_set.get("actualReps")),
            parse_count(raw_set.get("prescribedReps")),
        )
        return ExerciseSet(weight=weight or 0.0, reps=int(reps or 0))


class CostLogAdapter(RecordAdapter):
    """Adapter for AI activity feed entries."""

    kind = COST_LOG

    def normalize(self, record: Dict[str, Any]) -> Event:
        tokens = record.get("tokens")
        entry = CostEntry(
            type=record.get("type"),
            title=record.get("title"),
            source=record.get("source") or "unknown",
            model=record.get("model") or None,
            description=record.get("description") or "",
            cost=parse_number(record.get("cost")),
            tokens=dict(tokens) if isinstance(tokens, Mapping) and tokens else None,
        )
        return Event(
            owner_id=entry.source,
            occurred_at=parse_instant(record.get("timestamp")),
            kind=self.kind,
            payload=entry,
            source_id=record.get("id"),
        )


class GoalAdapter(RecordAdapter):
    """
    Adapter for goals.

    Older goals store weights under startWeight/currentWeight/targetWeight;
    newer ones use the *Value fields. The current value falls back to the
    start value when absent.
    """

    kind = "goal"

    def normalize(self, record: Dict[str, Any]) -> Goal:
        start = _first_nonzero(
            parse_number(record.get("startValue")),
            parse_number(record.get("startWeight")),
        ) or 0.0
        current = _first_nonzero(
            parse_number(record.get("currentValue")),
            parse_number(record.get("currentWeight")),
        ) or start
        target = _first_nonzero(
            parse_number(record.get("targetValue")),
            parse_number(record.get("targetWeight")),
        ) or 0.0

        return Goal(
            lift=record.get("lift"),
            start_value=start,
            current_value=current,
            target_value=target,
            status=record.get("status"),
            metric_type=record.get("metricType") or "weight",
            target_date=parse_day(record.get("targetDate")),
        )


class SubjectAdapter(RecordAdapter):
    """Adapter for user accounts."""

    kind = "subject"

    def normalize(self, record: Dict[str, Any]) -> Subject:
        return Subject(
            id=str(record.get("id")),
            username=record.get("username"),
            display_name=record.get("displayName"),
            created_at=parse_instant(record.get("createdAt")),
            height_feet=parse_number(record.get("heightFeet")),
            height_inches=parse_number(record.get("heightInches")),
            weight=parse_number(record.get("weight")),
            age=parse_count(record.get("age")),
            activity_level=record.get("activityLevel") or None,
        )


class GroupAdapter(RecordAdapter):
    """Adapter for training groups."""

    kind = "group"

    def normalize(self, record: Dict[str, Any]) -> Group:
        return Group(
            id=str(record.get("id")),
            name=record.get("name"),
            members=tuple(record.get("members") or ()),
            admins=tuple(record.get("admins") or ()),
        )


# Adapter registry
_ADAPTERS = {
    WORKOUT: WorkoutAdapter,
    COST_LOG: CostLogAdapter,
    "goal": GoalAdapter,
    "subject": SubjectAdapter,
    "group": GroupAdapter,
}


def get_adapter(kind: str) -> RecordAdapter:
    """
    Get the adapter for a stored record kind.

    Args:
        kind: Record kind (workout, cost-log, goal, subject, group)

    Returns:
        Adapter instance

    Raises:
        ValueError: If the kind is not supported
    """
    adapter_class = _ADAPTERS.get(kind.lower())

    if not adapter_class:
        raise ValueError(f"Unsupported record kind: {kind}")

    return adapter_class()
