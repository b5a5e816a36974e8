"""Domain models for following users and the activity feed."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from fitness_tracker.domain.activities import ActivityRecord
from fitness_tracker.domain.progress import WorkoutRecord


@dataclass(frozen=True)
class Follow:
    """Directed follow relationship."""

    follower_id: UUID
    following_id: UUID
    created_at: datetime


@dataclass(frozen=True)
class UserProfileRow:
    """Public identity of a user as stored."""

    user_id: UUID
    name: str | None
    email: str | None


@dataclass(frozen=True)
class UserSummary:
    """Search result with follow counts relative to the viewer."""

    user_id: UUID
    name: str | None
    email: str | None
    follower_count: int
    following_count: int
    is_following: bool


class FeedItemKind(str, Enum):
    """Kind of record shown in the feed."""

    ACTIVITY = "activity"
    WORKOUT = "workout"


@dataclass(frozen=True)
class FeedItem:
    """Feed entry wrapping an activity or a workout."""

    kind: FeedItemKind
    user_id: UUID
    occurred_at: datetime
    activity: ActivityRecord | None = None
    workout: WorkoutRecord | None = None
