"""Supabase repository for weight, step and body measurement logs."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.progress import (
    MEASUREMENT_SITES,
    BodyMeasurement,
    StepLog,
    WeightLog,
)
from fitness_tracker.services.progress import ProgressRepository

_WEIGHT_COLUMNS = "id, user_id, weight_kg, logged_at, notes"
_STEP_COLUMNS = "id, user_id, steps, logged_at"
_MEASUREMENT_COLUMNS = ", ".join(
    ("id", "user_id", "measured_at", *MEASUREMENT_SITES, "notes")
)


@dataclass
class SupabaseProgressRepository(ProgressRepository):
    """Supabase implementation for body progress logs."""

    client: Client

    def create_weight_log(
        self, user_id: UUID, weight_kg: float, logged_at: datetime, notes: str | None
    ) -> WeightLog:
        """Create a weight log row and return it."""
        response = (
            self.client.table("weight_logs")
            .insert(
                {
                    "user_id": str(user_id),
                    "weight_kg": weight_kg,
                    "logged_at": logged_at.isoformat(),
                    "notes": notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create weight log")
        return _parse_weight(response.data[0])

    def get_weight_log(self, log_id: UUID) -> WeightLog | None:
        """Return a weight log by id."""
        response = (
            self.client.table("weight_logs")
            .select(_WEIGHT_COLUMNS)
            .eq("id", str(log_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_weight(response.data[0])

    def delete_weight_log(self, log_id: UUID) -> None:
        """Delete a weight log row."""
        self.client.table("weight_logs").delete().eq("id", str(log_id)).execute()

    def list_recent_weight_logs(self, user_id: UUID, limit: int) -> list[WeightLog]:
        """Return a user's weight logs, newest first."""
        response = (
            self.client.table("weight_logs")
            .select(_WEIGHT_COLUMNS)
            .eq("user_id", str(user_id))
            .order("logged_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_weight(row) for row in response.data or []]

    def list_weight_logs_until(self, user_id: UUID, end: datetime) -> list[WeightLog]:
        """Return a user's weight logs before the given time, oldest first."""
        response = (
            self.client.table("weight_logs")
            .select(_WEIGHT_COLUMNS)
            .eq("user_id", str(user_id))
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_weight(row) for row in response.data or []]

    def create_step_log(
        self, user_id: UUID, steps: int, logged_at: datetime
    ) -> StepLog:
        """Create a step log row and return it."""
        response = (
            self.client.table("step_logs")
            .insert(
                {
                    "user_id": str(user_id),
                    "steps": steps,
                    "logged_at": logged_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create step log")
        return _parse_steps(response.data[0])

    def list_recent_step_logs(self, user_id: UUID, limit: int) -> list[StepLog]:
        """Return a user's step logs, newest first."""
        response = (
            self.client.table("step_logs")
            .select(_STEP_COLUMNS)
            .eq("user_id", str(user_id))
            .order("logged_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_steps(row) for row in response.data or []]

    def list_step_logs_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[StepLog]:
        """Return a user's step logs within a time range."""
        response = (
            self.client.table("step_logs")
            .select(_STEP_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_steps(row) for row in response.data or []]

    def create_measurement(
        self,
        user_id: UUID,
        measured_at: datetime,
        sites: Mapping[str, float | None],
        notes: str | None,
    ) -> BodyMeasurement:
        """Create a body measurement row and return it."""
        response = (
            self.client.table("body_measurements")
            .insert(
                {
                    "user_id": str(user_id),
                    "measured_at": measured_at.isoformat(),
                    **{name: sites.get(name) for name in MEASUREMENT_SITES},
                    "notes": notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create body measurement")
        return _parse_measurement(response.data[0])

    def get_measurement(self, measurement_id: UUID) -> BodyMeasurement | None:
        """Return a body measurement by id."""
        response = (
            self.client.table("body_measurements")
            .select(_MEASUREMENT_COLUMNS)
            .eq("id", str(measurement_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_measurement(response.data[0])

    def delete_measurement(self, measurement_id: UUID) -> None:
        """Delete a body measurement row."""
        (
            self.client.table("body_measurements")
            .delete()
            .eq("id", str(measurement_id))
            .execute()
        )

    def list_recent_measurements(
        self, user_id: UUID, limit: int
    ) -> list[BodyMeasurement]:
        """Return a user's body measurements, newest first."""
        response = (
            self.client.table("body_measurements")
            .select(_MEASUREMENT_COLUMNS)
            .eq("user_id", str(user_id))
            .order("measured_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_measurement(row) for row in response.data or []]


def _parse_weight(row: dict[str, object]) -> WeightLog:
    notes = row.get("notes")
    return WeightLog(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        weight_kg=float(row.get("weight_kg") or 0.0),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        notes=notes if isinstance(notes, str) else None,
    )


def _parse_steps(row: dict[str, object]) -> StepLog:
    return StepLog(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        steps=int(row.get("steps") or 0),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
    )


def _parse_measurement(row: dict[str, object]) -> BodyMeasurement:
    notes = row.get("notes")
    sites: dict[str, float | None] = {}
    for name in MEASUREMENT_SITES:
        value = row.get(name)
        sites[name] = float(value) if isinstance(value, (int, float)) else None
    return BodyMeasurement(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        measured_at=datetime.fromisoformat(str(row["measured_at"])),
        sites=sites,
        notes=notes if isinstance(notes, str) else None,
    )
