"""Supabase-backed user repository."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.models import (
    DEFAULT_CALORIE_GOAL,
    DEFAULT_PROTEIN_GOAL,
    UserGoals,
)
from fitness_tracker.services.users import UserRepository

_COLUMNS = (
    "id, name, calorie_goal, protein_goal, carb_goal, fat_goal, goal_weight, "
    "current_weight, height_cm, date_of_birth, gender, activity_level, "
    "dietary_preference, measurement_system"
)


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_goals(self, user_id: UUID) -> UserGoals | None:
        """Return the user's goals, if a profile exists."""
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def update_settings(
        self, user_id: UUID, changes: Mapping[str, object]
    ) -> UserGoals | None:
        """Apply changes to the profile and return it, if it exists."""
        payload = {
            key: value.isoformat() if isinstance(value, date) else value
            for key, value in changes.items()
        }
        response = (
            self.client.table("users").update(payload).eq("id", str(user_id)).execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> UserGoals:
    birth = row.get("date_of_birth")
    system = row.get("measurement_system")
    return UserGoals(
        user_id=UUID(str(row["id"])),
        name=_str_or_none(row.get("name")),
        calorie_goal=_float_or(row.get("calorie_goal"), DEFAULT_CALORIE_GOAL),
        protein_goal=_float_or(row.get("protein_goal"), DEFAULT_PROTEIN_GOAL),
        carb_goal=_float_or(row.get("carb_goal"), None),
        fat_goal=_float_or(row.get("fat_goal"), None),
        goal_weight=_float_or(row.get("goal_weight"), None),
        current_weight=_float_or(row.get("current_weight"), None),
        height_cm=_float_or(row.get("height_cm"), None),
        date_of_birth=(
            date.fromisoformat(birth[:10]) if isinstance(birth, str) and birth else None
        ),
        gender=_str_or_none(row.get("gender")),
        activity_level=_str_or_none(row.get("activity_level")),
        dietary_preference=_str_or_none(row.get("dietary_preference")),
        measurement_system=system if isinstance(system, str) else "metric",
    )


def _float_or(value: object, default: float | None) -> float | None:
    if isinstance(value, (int, float)):
        return float(value)
    return default


def _str_or_none(value: object) -> str | None:
    return value if isinstance(value, str) else None
