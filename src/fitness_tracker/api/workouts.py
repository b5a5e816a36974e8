"""Workout endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from fitness_tracker.api.dependencies import require_user
from fitness_tracker.api.schemas import (
    ExerciseCreate,
    WorkoutCreate,
    exercise_to_dict,
    workout_to_dict,
)

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("")
async def list_workouts(
    request: Request,
    user_id: UUID = Depends(require_user),
    limit: int = Query(default=10, ge=1, le=100),
) -> dict[str, object]:
    """Return recent workouts."""
    container: AppContainer = request.app.state.container
    workouts = container.workout_service.list_workouts(user_id, limit)
    return {"workouts": [workout_to_dict(workout) for workout in workouts]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_workout(
    body: WorkoutCreate, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Log a workout."""
    container: AppContainer = request.app.state.container
    workout = container.workout_service.create_workout(
        user_id=user_id,
        name=body.name,
        performed_at=body.performed_at,
        duration_minutes=body.duration_minutes,
        calories_burned=body.calories_burned,
        notes=body.notes,
    )
    return {"workout": workout_to_dict(workout)}


@router.get("/{workout_id}")
async def get_workout(
    workout_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return one workout."""
    container: AppContainer = request.app.state.container
    workout = container.workout_service.get_workout(user_id, workout_id)
    return {"workout": workout_to_dict(workout)}


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    """Delete one workout."""
    container: AppContainer = request.app.state.container
    container.workout_service.delete_workout(user_id, workout_id)
    return {"status": "deleted"}


@router.post("/{workout_id}/exercises", status_code=status.HTTP_201_CREATED)
async def add_exercise(
    workout_id: UUID,
    body: ExerciseCreate,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Append an exercise to a workout."""
    container: AppContainer = request.app.state.container
    workout, exercise = container.workout_service.add_exercise(
        user_id, workout_id, body.to_domain()
    )
    return {"workout": workout_to_dict(workout), "exercise": exercise_to_dict(exercise)}


@router.delete("/{workout_id}/exercises/{exercise_id}")
async def remove_exercise(
    workout_id: UUID,
    exercise_id: UUID,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Remove an exercise from a workout."""
    container: AppContainer = request.app.state.container
    workout = container.workout_service.remove_exercise(
        user_id, workout_id, exercise_id
    )
    return {"workout": workout_to_dict(workout)}
