"""Domain models for the fitness tracker."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

DEFAULT_CALORIE_GOAL = 2000.0
DEFAULT_PROTEIN_GOAL = 150.0

SETTINGS_FIELDS = (
    "name",
    "date_of_birth",
    "gender",
    "height_cm",
    "current_weight",
    "goal_weight",
    "activity_level",
    "calorie_goal",
    "protein_goal",
    "carb_goal",
    "fat_goal",
    "dietary_preference",
    "measurement_system",
)


@dataclass(frozen=True)
class UserGoals:
    """Profile settings and nutrition goals for a user."""

    user_id: UUID
    calorie_goal: float = DEFAULT_CALORIE_GOAL
    protein_goal: float = DEFAULT_PROTEIN_GOAL
    goal_weight: float | None = None
    current_weight: float | None = None
    name: str | None = None
    carb_goal: float | None = None
    fat_goal: float | None = None
    height_cm: float | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    activity_level: str | None = None
    dietary_preference: str | None = None
    measurement_system: str = "metric"
