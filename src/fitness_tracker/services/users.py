"""User profile settings and goals."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.errors import InvalidInputError, NotFoundError
from fitness_tracker.domain.models import SETTINGS_FIELDS, UserGoals

MEASUREMENT_SYSTEMS = ("metric", "imperial")

_POSITIVE_FIELDS = (
    "height_cm",
    "current_weight",
    "goal_weight",
    "calorie_goal",
    "protein_goal",
    "carb_goal",
    "fat_goal",
)

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user profile data."""

    def get_goals(self, user_id: UUID) -> UserGoals | None:
        """Return the user's goals, if a profile exists."""

    def update_settings(
        self, user_id: UUID, changes: Mapping[str, object]
    ) -> UserGoals | None:
        """Apply changes to the profile and return it, if it exists."""


@dataclass
class UserService:
    """Application service for user profile data."""

    repository: UserRepository

    def get_goals(self, user_id: UUID) -> UserGoals:
        """Return stored goals, falling back to defaults."""
        return self.repository.get_goals(user_id) or UserGoals(user_id=user_id)

    def update_settings(
        self, user_id: UUID, changes: Mapping[str, object]
    ) -> UserGoals:
        """Update the given profile fields.

        Only keys present in ``changes`` are written. A ``None`` clears the
        field; cleared calorie and protein goals read back as the defaults.
        """
        _validate_settings(changes)
        if not changes:
            return self.get_goals(user_id)
        updated = self.repository.update_settings(user_id, dict(changes))
        if updated is None:
            raise NotFoundError("User not found")
        _logger.info(
            "User settings updated",
            extra={"user_id": str(user_id), "fields": sorted(changes)},
        )
        return updated


def _validate_settings(changes: Mapping[str, object]) -> None:
    unknown = set(changes) - set(SETTINGS_FIELDS)
    if unknown:
        raise InvalidInputError(f"Unknown settings: {', '.join(sorted(unknown))}")
    if "name" in changes:
        name = changes["name"]
        if not isinstance(name, str) or not name.strip():
            raise InvalidInputError("Name is required")
    for key in _POSITIVE_FIELDS:
        value = changes.get(key)
        if value is not None and (not isinstance(value, int | float) or value <= 0):
            raise InvalidInputError(f"{key} must be positive")
    system = changes.get("measurement_system", "metric")
    if system not in MEASUREMENT_SYSTEMS:
        raise InvalidInputError("Measurement system must be metric or imperial")
