"""Tests for profile settings."""

from datetime import date
from uuid import uuid4

import pytest

from fitness_tracker.domain.errors import InvalidInputError, NotFoundError
from fitness_tracker.domain.models import (
    DEFAULT_CALORIE_GOAL,
    DEFAULT_PROTEIN_GOAL,
    UserGoals,
)
from fitness_tracker.services.users import UserService
from tests.conftest import InMemoryUserRepository


def test_missing_profile_reads_as_defaults() -> None:
    user_id = uuid4()

    goals = UserService(InMemoryUserRepository()).get_goals(user_id)

    assert goals == UserGoals(user_id=user_id)
    assert goals.calorie_goal == DEFAULT_CALORIE_GOAL


def test_update_settings_writes_only_given_fields() -> None:
    user_id = uuid4()
    repo = InMemoryUserRepository(
        goals={user_id: UserGoals(user_id=user_id, name="Sam", calorie_goal=2400)}
    )
    service = UserService(repo)

    updated = service.update_settings(
        user_id,
        {
            "height_cm": 178.0,
            "date_of_birth": date(1990, 4, 2),
            "measurement_system": "imperial",
        },
    )

    assert updated.name == "Sam"
    assert updated.calorie_goal == 2400
    assert updated.height_cm == 178.0
    assert updated.date_of_birth == date(1990, 4, 2)
    assert service.get_goals(user_id) == updated


def test_cleared_goals_read_back_as_defaults() -> None:
    user_id = uuid4()
    repo = InMemoryUserRepository(
        goals={user_id: UserGoals(user_id=user_id, calorie_goal=1800, fat_goal=60)}
    )

    updated = UserService(repo).update_settings(
        user_id, {"calorie_goal": None, "fat_goal": None}
    )

    assert updated.calorie_goal == DEFAULT_CALORIE_GOAL
    assert updated.protein_goal == DEFAULT_PROTEIN_GOAL
    assert updated.fat_goal is None


def test_empty_update_returns_current_settings() -> None:
    user_id = uuid4()

    goals = UserService(InMemoryUserRepository()).update_settings(user_id, {})

    assert goals == UserGoals(user_id=user_id)


def test_update_for_unknown_user_is_not_found() -> None:
    with pytest.raises(NotFoundError):
        UserService(InMemoryUserRepository()).update_settings(
            uuid4(), {"name": "Kai"}
        )


@pytest.mark.parametrize(
    "changes",
    [
        {"name": "  "},
        {"name": None},
        {"calorie_goal": 0},
        {"goal_weight": -70.0},
        {"measurement_system": "furlongs"},
        {"password": "hunter2"},
    ],
)
def test_invalid_settings_are_rejected(changes: dict[str, object]) -> None:
    user_id = uuid4()
    repo = InMemoryUserRepository(goals={user_id: UserGoals(user_id=user_id)})

    with pytest.raises(InvalidInputError):
        UserService(repo).update_settings(user_id, changes)
