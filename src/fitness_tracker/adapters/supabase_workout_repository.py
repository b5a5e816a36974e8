"""Supabase repository for workouts and their exercises."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.progress import Exercise, ExerciseType, WorkoutRecord
from fitness_tracker.services.workouts import WorkoutRepository

_COLUMNS = "id, user_id, name, performed_at, duration_minutes, calories_burned, notes"
_EXERCISE_COLUMNS = (
    "id, workout_id, exercise_name, exercise_type, sets, reps, weight_kg, "
    "duration_minutes, distance_km, rest_seconds, notes, order_index"
)


@dataclass
class SupabaseWorkoutRepository(WorkoutRepository):
    """Supabase implementation for workouts."""

    client: Client

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
        response = (
            self.client.table("workouts")
            .insert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "performed_at": performed_at.isoformat(),
                    "duration_minutes": duration_minutes,
                    "calories_burned": calories_burned,
                    "notes": notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create workout")
        return _parse_row(response.data[0])

    def get_workout(self, workout_id: UUID) -> WorkoutRecord | None:
        """Return a workout by id."""
        response = (
            self.client.table("workouts")
            .select(_COLUMNS)
            .eq("id", str(workout_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_workout(self, workout_id: UUID) -> None:
        """Delete a workout row."""
        self.client.table("workouts").delete().eq("id", str(workout_id)).execute()

    def list_recent_workouts(self, user_id: UUID, limit: int) -> list[WorkoutRecord]:
        """Return a user's workouts, newest first."""
        response = (
            self.client.table("workouts")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("performed_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_workouts_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WorkoutRecord]:
        """Return a user's workouts within a time range."""
        response = (
            self.client.table("workouts")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("performed_at", start.isoformat())
            .lt("performed_at", end.isoformat())
            .order("performed_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_workouts_for_users(
        self, user_ids: Sequence[UUID], limit: int
    ) -> list[WorkoutRecord]:
        """Return workouts of any of the users, newest first."""
        if not user_ids:
            return []
        response = (
            self.client.table("workouts")
            .select(_COLUMNS)
            .in_("user_id", [str(user_id) for user_id in user_ids])
            .order("performed_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def create_exercise(
        self, workout_id: UUID, exercise: Exercise, order_index: int
    ) -> Exercise:
        """Create an exercise row and return it with its id."""
        response = (
            self.client.table("workout_exercises")
            .insert(
                {
                    "workout_id": str(workout_id),
                    "exercise_name": exercise.exercise_name,
                    "exercise_type": ExerciseType(exercise.exercise_type).value,
                    "sets": exercise.sets,
                    "reps": exercise.reps,
                    "weight_kg": exercise.weight_kg,
                    "duration_minutes": exercise.duration_minutes,
                    "distance_km": exercise.distance_km,
                    "rest_seconds": exercise.rest_seconds,
                    "notes": exercise.notes,
                    "order_index": order_index,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create exercise")
        return _parse_exercise(response.data[0])

    def get_exercise(self, exercise_id: UUID) -> Exercise | None:
        """Return an exercise by id."""
        response = (
            self.client.table("workout_exercises")
            .select(_EXERCISE_COLUMNS)
            .eq("id", str(exercise_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_exercise(response.data[0])

    def delete_exercise(self, exercise_id: UUID) -> None:
        """Delete an exercise row."""
        (
            self.client.table("workout_exercises")
            .delete()
            .eq("id", str(exercise_id))
            .execute()
        )

    def list_exercises(self, workout_id: UUID) -> list[Exercise]:
        """Return a workout's exercises in order."""
        response = (
            self.client.table("workout_exercises")
            .select(_EXERCISE_COLUMNS)
            .eq("workout_id", str(workout_id))
            .order("order_index", desc=False)
            .execute()
        )
        return [_parse_exercise(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> WorkoutRecord:
    duration = row.get("duration_minutes")
    calories = row.get("calories_burned")
    notes = row.get("notes")
    return WorkoutRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name") or ""),
        performed_at=datetime.fromisoformat(str(row["performed_at"])),
        duration_minutes=int(duration) if isinstance(duration, (int, float)) else None,
        calories_burned=(
            float(calories) if isinstance(calories, (int, float)) else None
        ),
        notes=notes if isinstance(notes, str) else None,
    )


def _parse_exercise(row: dict[str, object]) -> Exercise:
    notes = row.get("notes")
    return Exercise(
        id=UUID(str(row["id"])),
        workout_id=UUID(str(row["workout_id"])),
        exercise_name=str(row.get("exercise_name") or ""),
        exercise_type=ExerciseType(row["exercise_type"]),
        sets=_int_or_none(row.get("sets")),
        reps=_int_or_none(row.get("reps")),
        weight_kg=_float_or_none(row.get("weight_kg")),
        duration_minutes=_float_or_none(row.get("duration_minutes")),
        distance_km=_float_or_none(row.get("distance_km")),
        rest_seconds=_int_or_none(row.get("rest_seconds")),
        notes=notes if isinstance(notes, str) else None,
        order_index=int(row.get("order_index") or 0),
    )


def _int_or_none(value: object) -> int | None:
    return int(value) if isinstance(value, (int, float)) else None


def _float_or_none(value: object) -> float | None:
    return float(value) if isinstance(value, (int, float)) else None
