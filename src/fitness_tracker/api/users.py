"""Profile settings endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from fitness_tracker.api.dependencies import require_user
from fitness_tracker.api.schemas import SettingsUpdate, settings_to_dict

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/settings")
async def get_settings(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return the user's profile settings and goals."""
    container: AppContainer = request.app.state.container
    return {"user": settings_to_dict(container.user_service.get_goals(user_id))}


@router.put("/settings")
async def update_settings(
    body: SettingsUpdate, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Update the fields present in the body."""
    container: AppContainer = request.app.state.container
    goals = container.user_service.update_settings(
        user_id, body.model_dump(exclude_unset=True)
    )
    return {"user": settings_to_dict(goals)}
