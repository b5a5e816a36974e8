"""Domain models for statistics."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class Granularity(str, Enum):
    """Calendar bucket size."""

    DAY = "day"
    WEEK = "week"


@dataclass(frozen=True)
class DatedRecord:
    """Dated snapshot of numeric fields (weight, distance, meal totals)."""

    recorded_at: datetime | date
    values: Mapping[str, float | None] = field(default_factory=dict)


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros."""

    day: date
    calories: float
    protein: float
    carbs: float
    fats: float
    meal_count: int = 0


@dataclass(frozen=True)
class NutritionAverages:
    """Average macros per logged day."""

    days_logged: int
    calories: float
    protein: float
    carbs: float
    fats: float
