"""Supabase repository for GPS activities."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.activities import (
    ActivityMetrics,
    ActivityRecord,
    ActivityType,
    RouteData,
)
from fitness_tracker.services.activities import ActivityRepository

_COLUMNS = (
    "id, user_id, activity_type, name, started_at, ended_at, distance_km, "
    "duration_seconds, avg_pace, elevation_gain, calories, route_data, is_public"
)


@dataclass
class SupabaseActivityRepository(ActivityRepository):
    """Supabase implementation for activities."""

    client: Client

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
        response = (
            self.client.table("activities")
            .insert(
                {
                    "user_id": str(user_id),
                    "activity_type": ActivityType(activity_type).value,
                    "name": name,
                    "started_at": started_at.isoformat(),
                    "ended_at": ended_at.isoformat() if ended_at else None,
                    "distance_km": metrics.distance_km,
                    "duration_seconds": metrics.duration_seconds,
                    "avg_pace": metrics.avg_pace_min_per_km,
                    "elevation_gain": metrics.elevation_gain_m,
                    "calories": metrics.estimated_calories,
                    "route_data": {
                        "type": route.type,
                        "coordinates": route.coordinates,
                    },
                    "is_public": is_public,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create activity")
        return _parse_row(response.data[0])

    def get_activity(self, activity_id: UUID) -> ActivityRecord | None:
        """Return an activity by id."""
        response = (
            self.client.table("activities")
            .select(_COLUMNS)
            .eq("id", str(activity_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_activity(self, activity_id: UUID) -> None:
        """Delete an activity row."""
        self.client.table("activities").delete().eq("id", str(activity_id)).execute()

    def list_activities(self, user_id: UUID, limit: int) -> list[ActivityRecord]:
        """Return a user's activities, newest first."""
        response = (
            self.client.table("activities")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("started_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_activities_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[ActivityRecord]:
        """Return a user's activities started within a time range."""
        response = (
            self.client.table("activities")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("started_at", start.isoformat())
            .lt("started_at", end.isoformat())
            .order("started_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_public_activities_for_users(
        self, user_ids: Sequence[UUID], limit: int
    ) -> list[ActivityRecord]:
        """Return public activities of any of the users, newest first."""
        if not user_ids:
            return []
        response = (
            self.client.table("activities")
            .select(_COLUMNS)
            .in_("user_id", [str(user_id) for user_id in user_ids])
            .eq("is_public", True)
            .order("started_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> ActivityRecord:
    ended_raw = row.get("ended_at")
    pace_raw = row.get("avg_pace")
    return ActivityRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        activity_type=ActivityType(row["activity_type"]),
        name=row.get("name") if isinstance(row.get("name"), str) else None,
        started_at=datetime.fromisoformat(str(row["started_at"])),
        ended_at=(
            datetime.fromisoformat(ended_raw)
            if isinstance(ended_raw, str) and ended_raw
            else None
        ),
        metrics=ActivityMetrics(
            distance_km=float(row.get("distance_km") or 0.0),
            duration_seconds=int(row.get("duration_seconds") or 0),
            avg_pace_min_per_km=(
                float(pace_raw) if isinstance(pace_raw, (int, float)) else None
            ),
            elevation_gain_m=float(row.get("elevation_gain") or 0.0),
            estimated_calories=float(row.get("calories") or 0.0),
        ),
        route=_parse_route(row.get("route_data")),
        is_public=bool(row.get("is_public", False)),
    )


def _parse_route(raw: object) -> RouteData:
    if not isinstance(raw, dict):
        return RouteData()
    coordinates = raw.get("coordinates")
    if not isinstance(coordinates, list):
        return RouteData()
    return RouteData(
        coordinates=[
            [float(value) for value in point]
            for point in coordinates
            if isinstance(point, list)
        ]
    )
