"""Tests for activity service."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from fitness_tracker.domain.activities import ActivityType, GpsFix, PauseInterval
from fitness_tracker.domain.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from fitness_tracker.services.activities import ActivityService
from tests.conftest import InMemoryActivityRepository

START = datetime(2024, 5, 1, 7, tzinfo=UTC)


def _fixes() -> list[GpsFix]:
    return [
        GpsFix(0.0, 0.0, 0, altitude=10.0),
        GpsFix(0.0009, 0.0, 60_000, altitude=14.0),
        GpsFix(0.0018, 0.0, 120_000, altitude=12.0),
    ]


def test_record_activity_persists_metrics_and_route() -> None:
    repo = InMemoryActivityRepository()
    service = ActivityService(repo)
    user_id = uuid4()
    pause = PauseInterval(START + timedelta(minutes=1), START + timedelta(minutes=2))

    activity = service.record_activity(
        user_id=user_id,
        activity_type=ActivityType.CYCLING,
        fixes=_fixes(),
        started_at=START,
        stopped_at=START + timedelta(minutes=5),
        pauses=[pause],
        name="Morning ride",
    )

    assert repo.activities[activity.id] == activity
    assert activity.metrics.duration_seconds == 240
    assert activity.metrics.distance_km == pytest.approx(0.2, abs=0.005)
    assert activity.metrics.elevation_gain_m == 4
    assert activity.metrics.estimated_calories == pytest.approx(
        activity.metrics.distance_km * 30
    )
    assert activity.route.coordinates[1] == [0.0, 0.0009]
    assert activity.ended_at == START + timedelta(minutes=5)


def test_record_activity_without_fixes_is_rejected() -> None:
    service = ActivityService(InMemoryActivityRepository())

    with pytest.raises(InvalidInputError):
        service.record_activity(
            user_id=uuid4(),
            activity_type=ActivityType.RUNNING,
            fixes=[],
            started_at=START,
            stopped_at=START + timedelta(minutes=1),
        )


def test_get_activity_visibility() -> None:
    service = ActivityService(InMemoryActivityRepository())
    owner = uuid4()
    private = service.record_activity(
        owner, ActivityType.RUNNING, _fixes(), START, START + timedelta(minutes=3)
    )
    shared = service.record_activity(
        owner,
        ActivityType.WALKING,
        _fixes(),
        START,
        START + timedelta(minutes=3),
        is_public=True,
    )
    stranger = uuid4()

    assert service.get_activity(owner, private.id) == private
    assert service.get_activity(stranger, shared.id) == shared
    with pytest.raises(ForbiddenError):
        service.get_activity(stranger, private.id)
    with pytest.raises(NotFoundError):
        service.get_activity(owner, uuid4())


def test_list_activities_newest_first() -> None:
    service = ActivityService(InMemoryActivityRepository())
    user_id = uuid4()
    older = service.record_activity(
        user_id, ActivityType.HIKING, _fixes(), START, START + timedelta(hours=1)
    )
    newer_start = START + timedelta(days=1)
    newer = service.record_activity(
        user_id,
        ActivityType.HIKING,
        _fixes(),
        newer_start,
        newer_start + timedelta(hours=1),
    )

    assert [item.id for item in service.list_activities(user_id)] == [
        newer.id,
        older.id,
    ]
    assert len(service.list_activities(user_id, limit=1)) == 1


def test_naive_and_aware_timestamps_are_compared_as_utc() -> None:
    service = ActivityService(InMemoryActivityRepository())
    naive_start = START.replace(tzinfo=None)
    pause = PauseInterval(
        (START + timedelta(minutes=1)).replace(tzinfo=None),
        START + timedelta(minutes=2),
    )

    activity = service.record_activity(
        user_id=uuid4(),
        activity_type=ActivityType.RUNNING,
        fixes=_fixes(),
        started_at=naive_start,
        stopped_at=START + timedelta(minutes=5),
        pauses=[pause],
    )

    assert activity.metrics.duration_seconds == 240
    assert activity.started_at == START
    assert activity.started_at.tzinfo is not None


def test_delete_activity_checks_ownership() -> None:
    repo = InMemoryActivityRepository()
    service = ActivityService(repo)
    owner = uuid4()
    activity = service.record_activity(
        owner,
        ActivityType.RUNNING,
        _fixes(),
        START,
        START + timedelta(minutes=3),
        is_public=True,
    )

    with pytest.raises(ForbiddenError):
        service.delete_activity(uuid4(), activity.id)
    with pytest.raises(NotFoundError):
        service.delete_activity(owner, uuid4())

    service.delete_activity(owner, activity.id)

    assert repo.activities == {}
