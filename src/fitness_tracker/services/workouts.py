"""Workout logging service."""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from fitness_tracker.domain.progress import Exercise, ExerciseType, WorkoutRecord

_NON_NEGATIVE_FIELDS = (
    "sets",
    "reps",
    "weight_kg",
    "duration_minutes",
    "distance_km",
    "rest_seconds",
)


class WorkoutRepository(Protocol):
    """Persistence interface for workouts and their exercises."""

    def create_workout(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        performed_at: datetime,
        duration_minutes: int | None,
        calories_burned: float | None,
        notes: str | None,
    ) -> WorkoutRecord:
        """Create a workout row and return it."""

    def get_workout(self, workout_id: UUID) -> WorkoutRecord | None:
        """Return a workout by id."""

    def delete_workout(self, workout_id: UUID) -> None:
        """Delete a workout row."""

    def list_recent_workouts(self, user_id: UUID, limit: int) -> list[WorkoutRecord]:
        """Return a user's workouts, newest first."""

    def list_workouts_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WorkoutRecord]:
        """Return a user's workouts within a time range."""

    def list_workouts_for_users(
        self, user_ids: Sequence[UUID], limit: int
    ) -> list[WorkoutRecord]:
        """Return workouts of any of the users, newest first."""

    def create_exercise(
        self, workout_id: UUID, exercise: Exercise, order_index: int
    ) -> Exercise:
        """Create an exercise row and return it with its id."""

    def get_exercise(self, exercise_id: UUID) -> Exercise | None:
        """Return an exercise by id."""

    def delete_exercise(self, exercise_id: UUID) -> None:
        """Delete an exercise row."""

    def list_exercises(self, workout_id: UUID) -> list[Exercise]:
        """Return a workout's exercises in order."""


@dataclass
class WorkoutService:
    """Service for workout sessions."""

    repository: WorkoutRepository

    def create_workout(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        performed_at: datetime | None = None,
        duration_minutes: int | None = None,
        calories_burned: float | None = None,
        notes: str | None = None,
    ) -> WorkoutRecord:
        """Log a workout."""
        return self.repository.create_workout(
            user_id=user_id,
            name=name,
            performed_at=performed_at or datetime.now(tz=UTC),
            duration_minutes=duration_minutes,
            calories_burned=calories_burned,
            notes=notes,
        )

    def list_workouts(self, user_id: UUID, limit: int = 10) -> list[WorkoutRecord]:
        """Return recent workouts."""
        return self.repository.list_recent_workouts(user_id, limit)

    def get_workout(self, user_id: UUID, workout_id: UUID) -> WorkoutRecord:
        """Return one of the user's workouts with its exercises."""
        workout = self._owned_workout(user_id, workout_id)
        return replace(workout, exercises=self.repository.list_exercises(workout_id))

    def delete_workout(self, user_id: UUID, workout_id: UUID) -> None:
        """Delete one of the user's workouts."""
        self._owned_workout(user_id, workout_id)
        self.repository.delete_workout(workout_id)

    def add_exercise(
        self, user_id: UUID, workout_id: UUID, exercise: Exercise
    ) -> tuple[WorkoutRecord, Exercise]:
        """Append an exercise to the workout."""
        self._owned_workout(user_id, workout_id)
        _validate_exercise(exercise)
        existing = self.repository.list_exercises(workout_id)
        created = self.repository.create_exercise(
            workout_id, exercise, order_index=len(existing)
        )
        return self.get_workout(user_id, workout_id), created

    def remove_exercise(
        self, user_id: UUID, workout_id: UUID, exercise_id: UUID
    ) -> WorkoutRecord:
        """Remove an exercise from the workout."""
        self._owned_workout(user_id, workout_id)
        exercise = self.repository.get_exercise(exercise_id)
        if exercise is None or exercise.workout_id != workout_id:
            raise NotFoundError("Exercise not found")
        self.repository.delete_exercise(exercise_id)
        return self.get_workout(user_id, workout_id)

    def _owned_workout(self, user_id: UUID, workout_id: UUID) -> WorkoutRecord:
        workout = self.repository.get_workout(workout_id)
        if workout is None:
            raise NotFoundError("Workout not found")
        if workout.user_id != user_id:
            raise ForbiddenError("Workout belongs to another user")
        return workout


def _validate_exercise(exercise: Exercise) -> None:
    if not exercise.exercise_name.strip():
        raise InvalidInputError("Exercise name is required")
    try:
        ExerciseType(exercise.exercise_type)
    except ValueError as exc:
        raise InvalidInputError(
            f"Unknown exercise type: {exercise.exercise_type!r}"
        ) from exc
    for name in _NON_NEGATIVE_FIELDS:
        value = getattr(exercise, name)
        if value is not None and value < 0:
            raise InvalidInputError(f"{name} must not be negative")
