# src/wellcoach/domain/value_objects.py
"""
Value objects for the nutrition payload and the UTC day/week policy.

All day boundaries in the system are UTC midnights. Timestamps that come back
from SQLite are naive; they are treated as UTC.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

WEEK_WINDOW = timedelta(days=7)


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce a stored numeric value to float; None and garbage become `default`."""
    if value is None:
        return default
    try:
        d = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return default
    if not d.is_finite():
        return default
    return float(d)


@dataclass(frozen=True)
class Macros:
    """Macronutrients in grams. Missing fields count as zero."""
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0

    @classmethod
    def from_json(cls, raw: Optional[Mapping[str, Any]]) -> "Macros":
        if not raw:
            return cls()
        return cls(
            protein=max(to_number(raw.get("protein")), 0.0),
            carbs=max(to_number(raw.get("carbs")), 0.0),
            fat=max(to_number(raw.get("fat")), 0.0),
            fiber=max(to_number(raw.get("fiber")), 0.0),
        )

    def __add__(self, other: "Macros") -> "Macros":
        return Macros(
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
        )


# --- UTC time policy ---

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_utc_day(value: datetime) -> datetime:
    return as_utc(value).replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_utc_day(value: datetime) -> datetime:
    """Exclusive upper bound of the UTC day containing `value`."""
    return start_of_utc_day(value) + timedelta(days=1)


def week_start(now: datetime) -> datetime:
    """Inclusive lower bound of the trailing seven-day window."""
    return as_utc(now) - WEEK_WINDOW
