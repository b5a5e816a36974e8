"""GPS activity metrics and activity logging."""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.activities import (
    CALORIES_PER_KM,
    ActivityMetrics,
    ActivityRecord,
    ActivityType,
    GpsFix,
    PauseInterval,
    RouteData,
)
from fitness_tracker.domain.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from fitness_tracker.services.bucketing import as_utc

EARTH_RADIUS_KM = 6371.0
NOISE_THRESHOLD_KM = 0.005

_logger = logging.getLogger(__name__)


def haversine_km(start: GpsFix, end: GpsFix) -> float:
    """Return the great-circle distance between two fixes in kilometres."""
    d_lat = math.radians(end.latitude - start.latitude)
    d_lon = math.radians(end.longitude - start.longitude)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(start.latitude))
        * math.cos(math.radians(end.latitude))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def accumulate_distance_km(
    fixes: Sequence[GpsFix], noise_threshold_km: float = NOISE_THRESHOLD_KM
) -> float:
    """Sum step distances, skipping steps within the noise threshold.

    Steps are measured from the last counted fix, not from the previous fix,
    so jitter around a point never adds distance. A track sampled densely
    (every fix under the threshold from its predecessor) still accumulates
    once the fixes drift past the threshold from the anchor, where per-pair
    filtering would report zero.
    """
    if len(fixes) < 2:  # noqa: PLR2004
        return 0.0
    total = 0.0
    anchor = fixes[0]
    for fix in fixes[1:]:
        step = haversine_km(anchor, fix)
        if step > noise_threshold_km:
            total += step
            anchor = fix
    return total


def elevation_gain_m(fixes: Sequence[GpsFix]) -> float:
    """Sum positive altitude deltas between consecutive fixes."""
    gain = 0.0
    for previous, current in zip(fixes, fixes[1:], strict=False):
        if previous.altitude is None or current.altitude is None:
            continue
        delta = current.altitude - previous.altitude
        if delta > 0:
            gain += delta
    return gain


def active_duration_seconds(
    started_at: datetime,
    stopped_at: datetime,
    pauses: Sequence[PauseInterval] = (),
) -> int:
    """Return whole seconds recorded between start and stop, minus pauses.

    Naive datetimes are treated as UTC.
    """
    started_at = as_utc(started_at)
    stopped_at = as_utc(stopped_at)
    if stopped_at < started_at:
        raise InvalidInputError("Recording stop time is before its start time")
    paused = 0.0
    cursor = started_at
    for paused_at, resumed_at in sorted(
        (as_utc(pause.paused_at), as_utc(pause.resumed_at)) for pause in pauses
    ):
        if resumed_at < paused_at:
            raise InvalidInputError("Pause resumes before it starts")
        begin = max(paused_at, cursor)
        end = min(resumed_at, stopped_at)
        if end > begin:
            paused += (end - begin).total_seconds()
            cursor = end
    elapsed = (stopped_at - started_at).total_seconds() - paused
    return max(int(elapsed), 0)


def compute_activity_metrics(
    fixes: Sequence[GpsFix],
    activity_type: ActivityType | str,
    duration_seconds: int,
) -> ActivityMetrics:
    """Derive distance, pace, elevation gain and calories for a recording."""
    if duration_seconds < 0:
        raise InvalidInputError("Duration must not be negative")
    try:
        resolved_type = ActivityType(activity_type)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown activity type: {activity_type!r}") from exc
    distance = accumulate_distance_km(fixes)
    pace = None
    if distance > 0 and duration_seconds > 0:
        pace = (duration_seconds / 60) / distance
    return ActivityMetrics(
        distance_km=distance,
        duration_seconds=duration_seconds,
        avg_pace_min_per_km=pace,
        elevation_gain_m=elevation_gain_m(fixes),
        estimated_calories=distance * CALORIES_PER_KM[resolved_type],
    )


def build_route(fixes: Sequence[GpsFix]) -> RouteData:
    """Build a GeoJSON LineString from the recorded fixes."""
    return RouteData(coordinates=[[fix.longitude, fix.latitude] for fix in fixes])


class ActivityRepository(Protocol):
    """Persistence interface for activities."""

    def create_activity(  # noqa: PLR0913
        self,
        user_id: UUID,
        activity_type: ActivityType,
        started_at: datetime,
        ended_at: datetime | None,
        metrics: ActivityMetrics,
        route: RouteData,
        name: str | None,
        is_public: bool,
    ) -> ActivityRecord:
        """Create an activity row and return it."""

    def get_activity(self, activity_id: UUID) -> ActivityRecord | None:
        """Return an activity by id."""

    def list_activities(self, user_id: UUID, limit: int) -> list[ActivityRecord]:
        """Return a user's activities, newest first."""

    def list_activities_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[ActivityRecord]:
        """Return a user's activities started within a time range."""

    def delete_activity(self, activity_id: UUID) -> None:
        """Delete an activity row."""

    def list_public_activities_for_users(
        self, user_ids: Sequence[UUID], limit: int
    ) -> list[ActivityRecord]:
        """Return public activities of any of the users, newest first."""


@dataclass
class ActivityService:
    """Service that derives activity metrics and persists recordings."""

    repository: ActivityRepository

    def record_activity(  # noqa: PLR0913
        self,
        user_id: UUID,
        activity_type: ActivityType,
        fixes: Sequence[GpsFix],
        started_at: datetime,
        stopped_at: datetime,
        pauses: Sequence[PauseInterval] = (),
        name: str | None = None,
        is_public: bool = False,
    ) -> ActivityRecord:
        """Compute metrics from GPS fixes and persist the activity."""
        if not fixes:
            raise InvalidInputError("No GPS data recorded")
        duration = active_duration_seconds(started_at, stopped_at, pauses)
        metrics = compute_activity_metrics(fixes, activity_type, duration)
        activity = self.repository.create_activity(
            user_id=user_id,
            activity_type=ActivityType(activity_type),
            started_at=as_utc(started_at),
            ended_at=as_utc(stopped_at),
            metrics=metrics,
            route=build_route(fixes),
            name=name,
            is_public=is_public,
        )
        _logger.info(
            "Activity recorded: id=%s distance_km=%.3f duration_s=%s",
            activity.id,
            metrics.distance_km,
            metrics.duration_seconds,
        )
        return activity

    def get_activity(self, user_id: UUID, activity_id: UUID) -> ActivityRecord:
        """Return an activity visible to the user."""
        activity = self.repository.get_activity(activity_id)
        if activity is None:
            raise NotFoundError("Activity not found")
        if activity.user_id != user_id and not activity.is_public:
            raise ForbiddenError("Activity belongs to another user")
        return activity

    def list_activities(self, user_id: UUID, limit: int = 20) -> list[ActivityRecord]:
        """Return the user's recent activities."""
        return self.repository.list_activities(user_id, limit)

    def delete_activity(self, user_id: UUID, activity_id: UUID) -> None:
        """Delete one of the user's activities."""
        activity = self.repository.get_activity(activity_id)
        if activity is None:
            raise NotFoundError("Activity not found")
        if activity.user_id != user_id:
            raise ForbiddenError("Activity belongs to another user")
        self.repository.delete_activity(activity_id)
        _logger.info("Activity deleted: id=%s", activity_id)
