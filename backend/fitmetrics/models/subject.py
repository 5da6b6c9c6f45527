"""
Subject and group value objects.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class Subject:
    """An athlete or coach account."""
    id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None

    # Body stats (imperial, as entered)
    height_feet: Optional[float] = None
    height_inches: Optional[float] = None
    weight: Optional[float] = None
    age: Optional[int] = None
    activity_level: Optional[str] = None


@dataclass(frozen=True)
class Group:
    """A training group administered by one or more coaches."""
    id: str
    name: Optional[str] = None
    members: Tuple[str, ...] = ()
    admins: Tuple[str, ...] = ()

    def athletes(self, coach_id: str) -> Tuple[str, ...]:
        """Members of the group, excluding the given coach."""
        return tuple(member for member in self.members if member != coach_id)
