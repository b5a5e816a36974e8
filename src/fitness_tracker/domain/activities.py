"""Domain models for GPS activities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class ActivityType(str, Enum):
    """Supported GPS activity types."""

    RUNNING = "running"
    CYCLING = "cycling"
    WALKING = "walking"
    HIKING = "hiking"


CALORIES_PER_KM: dict[ActivityType, float] = {
    ActivityType.RUNNING: 60.0,
    ActivityType.CYCLING: 30.0,
    ActivityType.WALKING: 50.0,
    ActivityType.HIKING: 55.0,
}


@dataclass(frozen=True)
class GpsFix:
    """Single GPS position captured during a recording."""

    latitude: float
    longitude: float
    timestamp_ms: int
    altitude: float | None = None


@dataclass(frozen=True)
class PauseInterval:
    """Interval during which the recording timer was paused."""

    paused_at: datetime
    resumed_at: datetime


@dataclass(frozen=True)
class ActivityMetrics:
    """Metrics derived from an ordered GPS fix sequence."""

    distance_km: float
    duration_seconds: int
    avg_pace_min_per_km: float | None
    elevation_gain_m: float
    estimated_calories: float


@dataclass(frozen=True)
class RouteData:
    """GeoJSON LineString of [longitude, latitude] pairs."""

    coordinates: list[list[float]] = field(default_factory=list)
    type: str = "LineString"


@dataclass(frozen=True)
class ActivityRecord:
    """Persisted activity with its metrics and route."""

    id: UUID
    user_id: UUID
    activity_type: ActivityType
    started_at: datetime
    ended_at: datetime | None
    metrics: ActivityMetrics
    route: RouteData
    name: str | None = None
    is_public: bool = False
