"""Weight, step and body measurement logging."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from fitness_tracker.domain.progress import (
    MEASUREMENT_SITES,
    BodyMeasurement,
    StepLog,
    WeightLog,
)


class ProgressRepository(Protocol):
    """Persistence interface for weight, step and measurement logs."""

    def create_weight_log(
        self, user_id: UUID, weight_kg: float, logged_at: datetime, notes: str | None
    ) -> WeightLog:
        """Create a weight log row and return it."""

    def get_weight_log(self, log_id: UUID) -> WeightLog | None:
        """Return a weight log by id."""

    def delete_weight_log(self, log_id: UUID) -> None:
        """Delete a weight log row."""

    def list_recent_weight_logs(self, user_id: UUID, limit: int) -> list[WeightLog]:
        """Return a user's weight logs, newest first."""

    def list_weight_logs_until(self, user_id: UUID, end: datetime) -> list[WeightLog]:
        """Return a user's weight logs before the given time, oldest first."""

    def create_step_log(
        self, user_id: UUID, steps: int, logged_at: datetime
    ) -> StepLog:
        """Create a step log row and return it."""

    def list_recent_step_logs(self, user_id: UUID, limit: int) -> list[StepLog]:
        """Return a user's step logs, newest first."""

    def list_step_logs_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[StepLog]:
        """Return a user's step logs within a time range."""

    def create_measurement(
        self,
        user_id: UUID,
        measured_at: datetime,
        sites: Mapping[str, float | None],
        notes: str | None,
    ) -> BodyMeasurement:
        """Create a body measurement row and return it."""

    def get_measurement(self, measurement_id: UUID) -> BodyMeasurement | None:
        """Return a body measurement by id."""

    def delete_measurement(self, measurement_id: UUID) -> None:
        """Delete a body measurement row."""

    def list_recent_measurements(
        self, user_id: UUID, limit: int
    ) -> list[BodyMeasurement]:
        """Return a user's body measurements, newest first."""


@dataclass
class ProgressService:
    """Service for body weight, step and measurement tracking."""

    repository: ProgressRepository

    def log_weight(
        self,
        user_id: UUID,
        weight_kg: float,
        logged_at: datetime | None = None,
        notes: str | None = None,
    ) -> WeightLog:
        """Record a weigh-in."""
        if weight_kg <= 0:
            raise InvalidInputError("Weight must be positive")
        return self.repository.create_weight_log(
            user_id, weight_kg, logged_at or datetime.now(tz=UTC), notes
        )

    def list_weights(self, user_id: UUID, limit: int = 30) -> list[WeightLog]:
        """Return recent weigh-ins."""
        return self.repository.list_recent_weight_logs(user_id, limit)

    def delete_weight(self, user_id: UUID, log_id: UUID) -> None:
        """Delete one of the user's weigh-ins."""
        log = self.repository.get_weight_log(log_id)
        if log is None:
            raise NotFoundError("Weight log not found")
        if log.user_id != user_id:
            raise ForbiddenError("Weight log belongs to another user")
        self.repository.delete_weight_log(log_id)

    def log_steps(
        self, user_id: UUID, steps: int, logged_at: datetime | None = None
    ) -> StepLog:
        """Record a step count."""
        if steps < 0:
            raise InvalidInputError("Steps must not be negative")
        return self.repository.create_step_log(
            user_id, steps, logged_at or datetime.now(tz=UTC)
        )

    def list_steps(self, user_id: UUID, limit: int = 30) -> list[StepLog]:
        """Return recent step counts."""
        return self.repository.list_recent_step_logs(user_id, limit)

    def log_measurement(
        self,
        user_id: UUID,
        sites: Mapping[str, float | None],
        measured_at: datetime | None = None,
        notes: str | None = None,
    ) -> BodyMeasurement:
        """Record body circumferences; at least one site is required."""
        unknown = set(sites) - set(MEASUREMENT_SITES)
        if unknown:
            raise InvalidInputError(
                f"Unknown measurement sites: {', '.join(sorted(unknown))}"
            )
        measured = {name: value for name, value in sites.items() if value is not None}
        if not measured:
            raise InvalidInputError("Please provide at least one measurement")
        if any(value <= 0 for value in measured.values()):
            raise InvalidInputError("Measurements must be positive")
        return self.repository.create_measurement(
            user_id,
            measured_at or datetime.now(tz=UTC),
            {name: measured.get(name) for name in MEASUREMENT_SITES},
            notes or None,
        )

    def list_measurements(
        self, user_id: UUID, limit: int = 10
    ) -> list[BodyMeasurement]:
        """Return recent body measurements."""
        return self.repository.list_recent_measurements(user_id, limit)

    def delete_measurement(self, user_id: UUID, measurement_id: UUID) -> None:
        """Delete one of the user's body measurements."""
        measurement = self.repository.get_measurement(measurement_id)
        if measurement is None:
            raise NotFoundError("Measurement not found")
        if measurement.user_id != user_id:
            raise ForbiddenError("Measurement belongs to another user")
        self.repository.delete_measurement(measurement_id)
