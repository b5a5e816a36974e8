"""Following other users, user discovery and the activity feed."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
)
from fitness_tracker.domain.social import (
    FeedItem,
    FeedItemKind,
    Follow,
    UserProfileRow,
    UserSummary,
)
from fitness_tracker.services.activities import ActivityRepository
from fitness_tracker.services.bucketing import as_utc
from fitness_tracker.services.users import UserRepository
from fitness_tracker.services.workouts import WorkoutRepository

_logger = logging.getLogger(__name__)


class SocialRepository(Protocol):
    """Persistence interface for follows and user lookup."""

    def get_follow(self, follower_id: UUID, following_id: UUID) -> Follow | None:
        """Return the follow relationship, if any."""

    def create_follow(
        self, follower_id: UUID, following_id: UUID, created_at: datetime
    ) -> Follow:
        """Create a follow relationship and return it."""

    def delete_follow(self, follower_id: UUID, following_id: UUID) -> None:
        """Delete a follow relationship."""

    def list_following_ids(self, follower_id: UUID) -> list[UUID]:
        """Return ids of the users the follower follows."""

    def count_followers(self, user_id: UUID) -> int:
        """Return how many users follow the user."""

    def count_following(self, user_id: UUID) -> int:
        """Return how many users the user follows."""

    def search_users(
        self, query: str | None, exclude_user_id: UUID, limit: int
    ) -> list[UserProfileRow]:
        """Return users matching name or email, newest first without a query."""


@dataclass
class SocialService:
    """Service for follows, user search and the feed."""

    repository: SocialRepository
    user_repository: UserRepository
    activity_repository: ActivityRepository
    workout_repository: WorkoutRepository

    def follow(self, user_id: UUID, target_id: UUID) -> Follow:
        """Follow another user."""
        if user_id == target_id:
            raise InvalidInputError("Cannot follow yourself")
        if self.user_repository.get_goals(target_id) is None:
            raise NotFoundError("User not found")
        if self.repository.get_follow(user_id, target_id) is not None:
            raise ConflictError("Already following this user")
        follow = self.repository.create_follow(
            user_id, target_id, datetime.now(tz=UTC)
        )
        _logger.info(
            "User followed",
            extra={"follower_id": str(user_id), "following_id": str(target_id)},
        )
        return follow

    def unfollow(self, user_id: UUID, target_id: UUID) -> None:
        """Stop following a user."""
        if self.repository.get_follow(user_id, target_id) is None:
            raise NotFoundError("Not following this user")
        self.repository.delete_follow(user_id, target_id)

    def search_users(
        self, user_id: UUID, query: str | None = None, limit: int = 10
    ) -> list[UserSummary]:
        """Find other users with their follow counts."""
        cleaned = query.strip() if query else None
        rows = self.repository.search_users(cleaned or None, user_id, limit)
        following = set(self.repository.list_following_ids(user_id))
        return [
            UserSummary(
                user_id=row.user_id,
                name=row.name,
                email=row.email,
                follower_count=self.repository.count_followers(row.user_id),
                following_count=self.repository.count_following(row.user_id),
                is_following=row.user_id in following,
            )
            for row in rows
        ]

    def get_feed(self, user_id: UUID, limit: int = 20) -> list[FeedItem]:
        """Return recent public activities and workouts of followed users.

        The user's own records are included. Items are newest first.
        """
        user_ids = [*self.repository.list_following_ids(user_id), user_id]
        items = [
            FeedItem(
                kind=FeedItemKind.ACTIVITY,
                user_id=activity.user_id,
                occurred_at=as_utc(activity.started_at),
                activity=activity,
            )
            for activity in self.activity_repository.list_public_activities_for_users(
                user_ids, limit
            )
        ]
        items += [
            FeedItem(
                kind=FeedItemKind.WORKOUT,
                user_id=workout.user_id,
                occurred_at=as_utc(workout.performed_at),
                workout=workout,
            )
            for workout in self.workout_repository.list_workouts_for_users(
                user_ids, limit
            )
        ]
        items.sort(key=lambda item: item.occurred_at, reverse=True)
        return items[:limit]
