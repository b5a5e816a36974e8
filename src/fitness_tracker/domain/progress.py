"""Domain models for body progress and workouts."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

MEASUREMENT_SITES = (
    "neck",
    "chest",
    "waist",
    "hips",
    "bicep_left",
    "bicep_right",
    "thigh_left",
    "thigh_right",
    "calf_left",
    "calf_right",
)


@dataclass(frozen=True)
class WeightLog:
    """Weigh-in entry."""

    id: UUID
    user_id: UUID
    weight_kg: float
    logged_at: datetime
    notes: str | None = None


@dataclass(frozen=True)
class StepLog:
    """Step count entry."""

    id: UUID
    user_id: UUID
    steps: int
    logged_at: datetime


@dataclass(frozen=True)
class BodyMeasurement:
    """Body circumferences in centimetres; unmeasured sites are None."""

    id: UUID
    user_id: UUID
    measured_at: datetime
    sites: dict[str, float | None] = field(default_factory=dict)
    notes: str | None = None


class ExerciseType(str, Enum):
    """Kind of exercise within a workout."""

    STRENGTH = "strength"
    CARDIO = "cardio"
    FLEXIBILITY = "flexibility"


@dataclass(frozen=True)
class Exercise:
    """Exercise performed as part of a workout."""

    exercise_name: str
    exercise_type: ExerciseType
    sets: int | None = None
    reps: int | None = None
    weight_kg: float | None = None
    duration_minutes: float | None = None
    distance_km: float | None = None
    rest_seconds: int | None = None
    notes: str | None = None
    order_index: int = 0
    workout_id: UUID | None = None
    id: UUID | None = None


@dataclass(frozen=True)
class WorkoutRecord:
    """Logged workout session."""

    id: UUID
    user_id: UUID
    name: str
    performed_at: datetime
    duration_minutes: int | None = None
    calories_burned: float | None = None
    notes: str | None = None
    exercises: list[Exercise] = field(default_factory=list)
