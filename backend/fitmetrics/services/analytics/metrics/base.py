"""
Shared numeric helpers for metric calculations.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


def round_half_away(value: float, places: int = 0) -> float:
    """
    Round half away from zero at the given number of decimal places.

    The built-in round() uses banker's rounding, which would turn 2.5 into 2.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    """Round half away from zero to an integer."""
    return int(round_half_away(value, 0))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def percentage(part: float, whole: float) -> Optional[int]:
    """
    Integer percentage of part over whole, clamped to [0, 100].

    Returns:
        Percentage, or None when whole is zero
    """
    if not whole:
        return None
    return int(clamp(round_int(part / whole * 100), 0, 100))
