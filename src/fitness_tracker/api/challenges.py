"""Challenge and leaderboard endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from fitness_tracker.api.dependencies import require_user
from fitness_tracker.api.schemas import (
    ChallengeCreate,
    challenge_to_dict,
    leaderboard_entry_to_dict,
    participation_to_dict,
)

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/challenges", tags=["challenges"])


@router.get("")
async def list_challenges(
    request: Request,
    user_id: UUID = Depends(require_user),
    kind: str = Query(default="mine"),
) -> dict[str, object]:
    """Return the user's challenges or the joinable public ones."""
    container: AppContainer = request.app.state.container
    challenges = container.challenge_service.list_challenges(user_id, kind)
    return {"challenges": [challenge_to_dict(item) for item in challenges]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_challenge(
    body: ChallengeCreate, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Create a challenge and join it."""
    container: AppContainer = request.app.state.container
    challenge = container.challenge_service.create_challenge(
        creator_id=user_id,
        name=body.name,
        challenge_type=body.challenge_type,
        goal_value=body.goal_value,
        start_date=body.start_date,
        end_date=body.end_date,
        description=body.description,
        is_public=body.is_public,
    )
    return {"challenge": challenge_to_dict(challenge)}


@router.post("/{challenge_id}/participation", status_code=status.HTTP_201_CREATED)
async def join_challenge(
    challenge_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Join a challenge."""
    container: AppContainer = request.app.state.container
    participation = container.challenge_service.join(challenge_id, user_id)
    return {"participation": participation_to_dict(participation)}


@router.delete("/{challenge_id}/participation")
async def leave_challenge(
    challenge_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    """Leave a challenge."""
    container: AppContainer = request.app.state.container
    container.challenge_service.leave(challenge_id, user_id)
    return {"status": "left"}


@router.get("/{challenge_id}/leaderboard", dependencies=[Depends(require_user)])
async def leaderboard(challenge_id: UUID, request: Request) -> dict[str, object]:
    """Return participants ranked by progress."""
    container: AppContainer = request.app.state.container
    challenge, entries = container.challenge_service.get_leaderboard(challenge_id)
    return {
        "challenge": challenge_to_dict(challenge),
        "leaderboard": [leaderboard_entry_to_dict(entry) for entry in entries],
    }
