"""GPS activity endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from fitness_tracker.api.dependencies import require_user
from fitness_tracker.api.schemas import ActivityCreate, activity_to_dict

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("")
async def list_activities(
    request: Request,
    user_id: UUID = Depends(require_user),
    limit: int = Query(default=20, ge=1, le=100),
) -> dict[str, object]:
    """Return recent activities."""
    container: AppContainer = request.app.state.container
    activities = container.activity_service.list_activities(user_id, limit)
    return {"activities": [activity_to_dict(item) for item in activities]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def record_activity(
    body: ActivityCreate, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Compute metrics for a GPS recording and save it."""
    container: AppContainer = request.app.state.container
    activity = container.activity_service.record_activity(
        user_id=user_id,
        activity_type=body.activity_type,
        fixes=body.domain_fixes(),
        started_at=body.started_at,
        stopped_at=body.stopped_at,
        pauses=body.domain_pauses(),
        name=body.name,
        is_public=body.is_public,
    )
    return {"activity": activity_to_dict(activity)}


@router.get("/{activity_id}")
async def get_activity(
    activity_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return an activity owned by the user or shared publicly."""
    container: AppContainer = request.app.state.container
    activity = container.activity_service.get_activity(user_id, activity_id)
    return {"activity": activity_to_dict(activity)}


@router.delete("/{activity_id}")
async def delete_activity(
    activity_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    """Delete one of the user's activities."""
    container: AppContainer = request.app.state.container
    container.activity_service.delete_activity(user_id, activity_id)
    return {"status": "deleted"}
