"""Weight, step and body measurement endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from fitness_tracker.api.dependencies import require_user
from fitness_tracker.api.schemas import (
    MeasurementCreate,
    StepsCreate,
    WeightCreate,
    measurement_to_dict,
    steps_to_dict,
    weight_to_dict,
)

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("/weight")
async def list_weights(
    request: Request,
    user_id: UUID = Depends(require_user),
    limit: int = Query(default=30, ge=1, le=365),
) -> dict[str, object]:
    """Return recent weigh-ins."""
    container: AppContainer = request.app.state.container
    logs = container.progress_service.list_weights(user_id, limit)
    return {"weight_logs": [weight_to_dict(log) for log in logs]}


@router.post("/weight", status_code=status.HTTP_201_CREATED)
async def log_weight(
    body: WeightCreate, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Record a weigh-in."""
    container: AppContainer = request.app.state.container
    log = container.progress_service.log_weight(
        user_id, body.weight_kg, body.logged_at, body.notes
    )
    return {"weight_log": weight_to_dict(log)}


@router.delete("/weight/{log_id}")
async def delete_weight(
    log_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    """Delete a weigh-in."""
    container: AppContainer = request.app.state.container
    container.progress_service.delete_weight(user_id, log_id)
    return {"status": "deleted"}


@router.get("/steps")
async def list_steps(
    request: Request,
    user_id: UUID = Depends(require_user),
    limit: int = Query(default=30, ge=1, le=365),
) -> dict[str, object]:
    """Return recent step counts."""
    container: AppContainer = request.app.state.container
    logs = container.progress_service.list_steps(user_id, limit)
    return {"step_logs": [steps_to_dict(log) for log in logs]}


@router.post("/steps", status_code=status.HTTP_201_CREATED)
async def log_steps(
    body: StepsCreate, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Record a step count."""
    container: AppContainer = request.app.state.container
    log = container.progress_service.log_steps(user_id, body.steps, body.logged_at)
    return {"step_log": steps_to_dict(log)}


@router.get("/measurements")
async def list_measurements(
    request: Request,
    user_id: UUID = Depends(require_user),
    limit: int = Query(default=10, ge=1, le=100),
) -> dict[str, object]:
    """Return recent body measurements."""
    container: AppContainer = request.app.state.container
    items = container.progress_service.list_measurements(user_id, limit)
    return {"measurements": [measurement_to_dict(item) for item in items]}


@router.post("/measurements", status_code=status.HTTP_201_CREATED)
async def log_measurement(
    body: MeasurementCreate, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Record body measurements."""
    container: AppContainer = request.app.state.container
    measurement = container.progress_service.log_measurement(
        user_id, body.sites(), body.measured_at, body.notes
    )
    return {"measurement": measurement_to_dict(measurement)}


@router.delete("/measurements/{measurement_id}")
async def delete_measurement(
    measurement_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    """Delete a body measurement."""
    container: AppContainer = request.app.state.container
    container.progress_service.delete_measurement(user_id, measurement_id)
    return {"status": "deleted"}
