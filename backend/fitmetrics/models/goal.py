"""
Goal value object.

Progress is derived by the goal calculator and never stored here.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Goal:
    """A fitness goal for a single metric."""
    lift: Optional[str]
    start_value: float = 0.0
    current_value: float = 0.0
    target_value: float = 0.0
    status: Optional[str] = None
    metric_type: str = "weight"
    target_date: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"
