"""Challenge progress, leaderboard ranking and participation."""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from fitness_tracker.domain.challenges import (
    ChallengeDefinition,
    ChallengeType,
    LeaderboardEntry,
    ParticipantProgress,
    Participation,
)
from fitness_tracker.domain.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
)
from fitness_tracker.domain.stats import DatedRecord
from fitness_tracker.services.activities import ActivityRepository
from fitness_tracker.services.bucketing import record_day
from fitness_tracker.services.progress import ProgressRepository
from fitness_tracker.services.workouts import WorkoutRepository

_logger = logging.getLogger(__name__)

CHALLENGE_LIST_KINDS = ("mine", "active", "completed", "public")


def validate_challenge(challenge: ChallengeDefinition) -> None:
    """Reject challenges with a non-positive goal or an inverted window."""
    if not math.isfinite(challenge.goal_value) or challenge.goal_value <= 0:
        raise InvalidInputError("Goal value must be positive")
    if challenge.end_date < challenge.start_date:
        raise InvalidInputError("End date must not be before start date")


def compute_progress(
    challenge: ChallengeDefinition, records: Iterable[DatedRecord], tz: ZoneInfo
) -> float:
    """Compute a participant's progress from records of the challenge's metric.

    Records are ``distance_km`` for distance, ``steps`` for steps, ``weight``
    for weight loss and any record for workout counts.
    """
    if challenge.challenge_type is ChallengeType.WEIGHT_LOSS:
        return _weight_loss_progress(challenge, records, tz)
    in_window = [
        record for record in records if _in_window(challenge, record, tz)
    ]
    if challenge.challenge_type is ChallengeType.WORKOUT_COUNT:
        return float(len(in_window))
    field_name = (
        "distance_km"
        if challenge.challenge_type is ChallengeType.DISTANCE
        else "steps"
    )
    return sum(_value(record, field_name) for record in in_window)


def rank_leaderboard(
    challenge: ChallengeDefinition, standings: Sequence[ParticipantProgress]
) -> list[LeaderboardEntry]:
    """Rank participants by progress, earlier joiners first on ties."""
    validate_challenge(challenge)
    for standing in standings:
        if not math.isfinite(standing.progress) or standing.progress < 0:
            raise InvalidInputError(
                f"Progress must be a non-negative number, got {standing.progress!r}"
            )
    ordered = sorted(
        standings,
        key=lambda item: (-item.progress, item.joined_at, str(item.user_id)),
    )
    return [
        LeaderboardEntry(
            user_id=standing.user_id,
            progress=standing.progress,
            progress_percentage=_percentage(standing.progress, challenge.goal_value),
            rank=position,
            is_completed=standing.progress >= challenge.goal_value,
            joined_at=standing.joined_at,
        )
        for position, standing in enumerate(ordered, start=1)
    ]


class ChallengeRepository(Protocol):
    """Persistence interface for challenges and participations."""

    def create_challenge(  # noqa: PLR0913
        self,
        creator_id: UUID,
        name: str,
        description: str | None,
        challenge_type: ChallengeType,
        goal_value: float,
        start_date: date,
        end_date: date,
        is_public: bool,
    ) -> ChallengeDefinition:
        """Create a challenge row and return it."""

    def get_challenge(self, challenge_id: UUID) -> ChallengeDefinition | None:
        """Return a challenge by id."""

    def list_public_challenges(self, as_of: date) -> list[ChallengeDefinition]:
        """Return public challenges ending on or after the given date."""

    def list_user_challenges(self, user_id: UUID) -> list[ChallengeDefinition]:
        """Return challenges the user created or participates in."""

    def get_participation(
        self, challenge_id: UUID, user_id: UUID
    ) -> Participation | None:
        """Return the user's participation, if any."""

    def create_participation(
        self, challenge_id: UUID, user_id: UUID, joined_at: datetime
    ) -> Participation:
        """Create a participation row."""

    def delete_participation(self, challenge_id: UUID, user_id: UUID) -> None:
        """Delete a participation row."""

    def list_participations(self, challenge_id: UUID) -> list[Participation]:
        """Return all participations for a challenge."""


@dataclass
class ChallengeService:
    """Service for challenges, participation and leaderboards."""

    repository: ChallengeRepository
    activity_repository: ActivityRepository
    workout_repository: WorkoutRepository
    progress_repository: ProgressRepository
    timezone_name: str = "UTC"

    def create_challenge(  # noqa: PLR0913
        self,
        creator_id: UUID,
        name: str,
        challenge_type: ChallengeType,
        goal_value: float,
        start_date: date,
        end_date: date,
        description: str | None = None,
        is_public: bool = True,
        now: datetime | None = None,
    ) -> ChallengeDefinition:
        """Create a challenge and join its creator to it."""
        draft = ChallengeDefinition(
            id=UUID(int=0),
            name=name,
            challenge_type=ChallengeType(challenge_type),
            goal_value=goal_value,
            start_date=start_date,
            end_date=end_date,
        )
        validate_challenge(draft)
        challenge = self.repository.create_challenge(
            creator_id=creator_id,
            name=name,
            description=description,
            challenge_type=draft.challenge_type,
            goal_value=goal_value,
            start_date=start_date,
            end_date=end_date,
            is_public=is_public,
        )
        self.repository.create_participation(
            challenge.id, creator_id, now or datetime.now(tz=UTC)
        )
        _logger.info(
            "Challenge created: id=%s type=%s",
            challenge.id,
            draft.challenge_type.value,
        )
        return challenge

    def list_challenges(
        self, user_id: UUID, kind: str = "mine", now: datetime | None = None
    ) -> list[ChallengeDefinition]:
        """Return the user's challenges or the joinable public ones."""
        if kind not in CHALLENGE_LIST_KINDS:
            raise InvalidInputError(f"Unknown challenge list kind: {kind!r}")
        today = self._today(now)
        if kind == "public":
            return self.repository.list_public_challenges(today)
        challenges = self.repository.list_user_challenges(user_id)
        if kind == "active":
            return [item for item in challenges if item.end_date >= today]
        if kind == "completed":
            return [item for item in challenges if item.end_date < today]
        return challenges

    def get_challenge(self, challenge_id: UUID) -> ChallengeDefinition:
        """Return a challenge or raise when it does not exist."""
        challenge = self.repository.get_challenge(challenge_id)
        if challenge is None:
            raise NotFoundError("Challenge not found")
        return challenge

    def join(
        self, challenge_id: UUID, user_id: UUID, now: datetime | None = None
    ) -> Participation:
        """Join a challenge that has not expired."""
        challenge = self.get_challenge(challenge_id)
        if challenge.end_date < self._today(now):
            raise InvalidInputError("Challenge has expired")
        if self.repository.get_participation(challenge_id, user_id):
            raise ConflictError("Already participating in this challenge")
        return self.repository.create_participation(
            challenge_id, user_id, now or datetime.now(tz=UTC)
        )

    def leave(self, challenge_id: UUID, user_id: UUID) -> None:
        """Leave a challenge the user participates in."""
        if self.repository.get_participation(challenge_id, user_id) is None:
            raise NotFoundError("Not participating in this challenge")
        self.repository.delete_participation(challenge_id, user_id)

    def get_leaderboard(
        self, challenge_id: UUID
    ) -> tuple[ChallengeDefinition, list[LeaderboardEntry]]:
        """Recompute every participant's progress and rank them."""
        challenge = self.get_challenge(challenge_id)
        tz = ZoneInfo(self.timezone_name)
        standings = [
            ParticipantProgress(
                user_id=participation.user_id,
                joined_at=participation.joined_at,
                progress=compute_progress(
                    challenge,
                    self._history(challenge, participation.user_id, tz),
                    tz,
                ),
            )
            for participation in self.repository.list_participations(challenge_id)
        ]
        return challenge, rank_leaderboard(challenge, standings)

    def _history(
        self, challenge: ChallengeDefinition, user_id: UUID, tz: ZoneInfo
    ) -> list[DatedRecord]:
        start = datetime.combine(challenge.start_date, time.min, tzinfo=tz)
        end = datetime.combine(
            challenge.end_date + timedelta(days=1), time.min, tzinfo=tz
        )
        start_utc, end_utc = start.astimezone(UTC), end.astimezone(UTC)
        challenge_type = challenge.challenge_type
        if challenge_type is ChallengeType.DISTANCE:
            activities = self.activity_repository.list_activities_between(
                user_id, start_utc, end_utc
            )
            return [
                DatedRecord(
                    recorded_at=activity.started_at,
                    values={"distance_km": activity.metrics.distance_km},
                )
                for activity in activities
            ]
        if challenge_type is ChallengeType.WORKOUT_COUNT:
            workouts = self.workout_repository.list_workouts_between(
                user_id, start_utc, end_utc
            )
            return [
                DatedRecord(recorded_at=workout.performed_at) for workout in workouts
            ]
        if challenge_type is ChallengeType.STEPS:
            step_logs = self.progress_repository.list_step_logs_between(
                user_id, start_utc, end_utc
            )
            return [
                DatedRecord(recorded_at=log.logged_at, values={"steps": log.steps})
                for log in step_logs
            ]
        weight_logs = self.progress_repository.list_weight_logs_until(user_id, end_utc)
        return [
            DatedRecord(recorded_at=log.logged_at, values={"weight": log.weight_kg})
            for log in weight_logs
        ]

    def _today(self, now: datetime | None) -> date:
        current = now or datetime.now(tz=UTC)
        return record_day(current, ZoneInfo(self.timezone_name))


def _in_window(
    challenge: ChallengeDefinition, record: DatedRecord, tz: ZoneInfo
) -> bool:
    day = record_day(record.recorded_at, tz)
    return challenge.start_date <= day <= challenge.end_date


def _weight_loss_progress(
    challenge: ChallengeDefinition, records: Iterable[DatedRecord], tz: ZoneInfo
) -> float:
    weigh_ins = sorted(
        (
            (record_day(record.recorded_at, tz), _sort_key(record), record)
            for record in records
            if record.values.get("weight") is not None
        ),
        key=lambda item: (item[0], item[1]),
    )
    before = [item for item in weigh_ins if item[0] < challenge.start_date]
    within = [
        item
        for item in weigh_ins
        if challenge.start_date <= item[0] <= challenge.end_date
    ]
    if not within:
        return 0.0
    baseline = before[-1] if before else within[0]
    latest = within[-1]
    loss = _value(baseline[2], "weight") - _value(latest[2], "weight")
    return max(loss, 0.0)


def _sort_key(record: DatedRecord) -> float:
    recorded_at = record.recorded_at
    if isinstance(recorded_at, datetime):
        if recorded_at.tzinfo is None:
            recorded_at = recorded_at.replace(tzinfo=UTC)
        return recorded_at.timestamp()
    return 0.0


def _value(record: DatedRecord, field_name: str) -> float:
    value = record.values.get(field_name)
    return float(value) if value is not None else 0.0


def _percentage(progress: float, goal_value: float) -> float:
    return min(100.0, max(0.0, progress / goal_value * 100))
