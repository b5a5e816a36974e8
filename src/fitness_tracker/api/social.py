"""Follow, user search and feed endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from fitness_tracker.api.dependencies import require_user
from fitness_tracker.api.schemas import (
    FollowCreate,
    feed_item_to_dict,
    user_summary_to_dict,
)

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/social", tags=["social"])


@router.post("/follow", status_code=status.HTTP_201_CREATED)
async def follow(
    body: FollowCreate, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Follow another user."""
    container: AppContainer = request.app.state.container
    created = container.social_service.follow(user_id, body.user_id)
    return {
        "follower_id": str(created.follower_id),
        "following_id": str(created.following_id),
        "created_at": created.created_at.isoformat(),
    }


@router.delete("/follow/{target_id}")
async def unfollow(
    target_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    """Stop following a user."""
    container: AppContainer = request.app.state.container
    container.social_service.unfollow(user_id, target_id)
    return {"status": "unfollowed"}


@router.get("/feed")
async def feed(
    request: Request,
    user_id: UUID = Depends(require_user),
    limit: int = Query(default=20, ge=1, le=100),
) -> dict[str, object]:
    """Return recent activities and workouts from followed users."""
    container: AppContainer = request.app.state.container
    items = container.social_service.get_feed(user_id, limit)
    return {"feed_items": [feed_item_to_dict(item) for item in items]}


@router.get("/users")
async def search_users(
    request: Request,
    user_id: UUID = Depends(require_user),
    query: str | None = Query(default=None, max_length=100),
    limit: int = Query(default=10, ge=1, le=50),
) -> dict[str, object]:
    """Find other users by name or email."""
    container: AppContainer = request.app.state.container
    users = container.social_service.search_users(user_id, query, limit)
    return {"users": [user_summary_to_dict(item) for item in users]}
