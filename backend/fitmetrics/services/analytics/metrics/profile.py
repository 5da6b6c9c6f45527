"""
Profile and body stats for a single subject.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fitmetrics.models import Subject
from fitmetrics.services.analytics.metrics.base import round_half_away, round_int

CM_PER_INCH = 2.54
BMI_IMPERIAL_FACTOR = 703


@dataclass(frozen=True)
class ProfileSummary:
    subject: Subject
    total_workouts: int
    groups_member: int
    groups_coaching: int

    @property
    def is_coach(self) -> bool:
        return self.groups_coaching > 0

    def to_dict(self) -> Dict[str, Any]:
        created = self.subject.created_at
        return {
            "displayName": self.subject.display_name,
            "username": self.subject.username,
            "memberSince": created.date().isoformat() if created else None,
            "totalWorkouts": self.total_workouts,
            "groupsMember": self.groups_member,
            "groupsCoaching": self.groups_coaching,
            "isCoach": self.is_coach,
        }


def compute_profile(
    subject: Subject,
    total_workouts: int,
    groups_member: int,
    groups_coaching: int,
) -> ProfileSummary:
    return ProfileSummary(
        subject=subject,
        total_workouts=total_workouts,
        groups_member=groups_member,
        groups_coaching=groups_coaching,
    )


@dataclass(frozen=True)
class BodyStats:
    weight_lbs: Optional[float]
    height_feet: Optional[float]
    height_inches: Optional[float]
    height_cm: Optional[int]
    bmi: Optional[float]
    age: Optional[int]
    activity_level: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weightLbs": self.weight_lbs,
            "heightFeet": self.height_feet,
            "heightInches": self.height_inches,
            "heightCm": self.height_cm,
            "bmi": self.bmi,
            "age": self.age,
            "activityLevel": self.activity_level,
        }


def total_height_inches(subject: Subject) -> Optional[float]:
    """Height in inches, or None when no feet value was recorded."""
    if not subject.height_feet:
        return None
    return subject.height_feet * 12 + (subject.height_inches or 0)


def compute_body_stats(subject: Subject) -> BodyStats:
    """Height conversion and BMI (imperial formula) for a subject."""
    inches = total_height_inches(subject)

    height_cm = round_int(inches * CM_PER_INCH) if inches else None

    bmi = None
    if subject.weight and inches:
        bmi = round_half_away(subject.weight / (inches * inches) * BMI_IMPERIAL_FACTOR, 1)

    return BodyStats(
        weight_lbs=subject.weight or None,
        height_feet=subject.height_feet or None,
        height_inches=(subject.height_inches or 0) if subject.height_feet else None,
        height_cm=height_cm,
        bmi=bmi,
        age=subject.age or None,
        activity_level=subject.activity_level,
    )
