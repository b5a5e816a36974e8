"""Domain models for challenges and leaderboards."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class ChallengeType(str, Enum):
    """Metric a challenge is measured by."""

    DISTANCE = "distance"
    WORKOUT_COUNT = "workout_count"
    WEIGHT_LOSS = "weight_loss"
    STEPS = "steps"


@dataclass(frozen=True)
class ChallengeDefinition:
    """Challenge with a goal and a date window."""

    id: UUID
    name: str
    challenge_type: ChallengeType
    goal_value: float
    start_date: date
    end_date: date
    creator_id: UUID | None = None
    description: str | None = None
    is_public: bool = True


@dataclass(frozen=True)
class Participation:
    """User membership in a challenge."""

    user_id: UUID
    challenge_id: UUID
    joined_at: datetime


@dataclass(frozen=True)
class ParticipantProgress:
    """Raw progress value for one participant."""

    user_id: UUID
    joined_at: datetime
    progress: float


@dataclass(frozen=True)
class LeaderboardEntry:
    """Ranked participant standing."""

    user_id: UUID
    progress: float
    progress_percentage: float
    rank: int
    is_completed: bool
    joined_at: datetime
