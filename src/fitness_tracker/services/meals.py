"""Meal logging service."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from fitness_tracker.domain.errors import ForbiddenError, NotFoundError
from fitness_tracker.domain.nutrition import (
    FoodLineItem,
    MacroTotals,
    MealRecord,
    MealType,
)
from fitness_tracker.domain.stats import DailyTotals
from fitness_tracker.services.nutrition import compute_daily_totals, compute_meal_totals

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals and food entries."""

    def create_meal(
        self, user_id: UUID, meal_type: MealType, eaten_at: datetime
    ) -> MealRecord:
        """Create an empty meal row and return it."""

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal with its food entries."""

    def list_meals_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return a user's meals with food entries within a time range."""

    def create_food_entry(self, meal_id: UUID, item: FoodLineItem) -> FoodLineItem:
        """Create a food entry row and return it with its id."""

    def delete_food_entry(self, entry_id: UUID) -> None:
        """Delete a food entry row."""

    def update_meal_totals(self, meal_id: UUID, totals: MacroTotals) -> None:
        """Store recomputed totals on the meal row."""


@dataclass
class MealService:
    """Service for meals and their food entries."""

    repository: MealRepository
    timezone_name: str = "UTC"

    def create_meal(
        self, user_id: UUID, meal_type: MealType, eaten_at: datetime | None = None
    ) -> MealRecord:
        """Create an empty meal."""
        return self.repository.create_meal(
            user_id, MealType(meal_type), eaten_at or datetime.now(tz=UTC)
        )

    def list_meals_for_day(self, user_id: UUID, day: date) -> list[MealRecord]:
        """Return the user's meals on a calendar day."""
        return self.list_meals_for_range(user_id, day, day)

    def list_meals_for_range(
        self, user_id: UUID, start_day: date, end_day: date
    ) -> list[MealRecord]:
        """Return the user's meals between two calendar days, inclusive."""
        tz = ZoneInfo(self.timezone_name)
        start = datetime.combine(start_day, time.min, tzinfo=tz)
        end = datetime.combine(end_day + timedelta(days=1), time.min, tzinfo=tz)
        return self.repository.list_meals_between(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )

    def summarize_day(
        self, user_id: UUID, day: date
    ) -> tuple[list[MealRecord], DailyTotals]:
        """Return the day's meals and their recomputed totals."""
        meals = self.list_meals_for_day(user_id, day)
        daily = compute_daily_totals(meals, ZoneInfo(self.timezone_name))
        if daily:
            return meals, daily[0]
        return meals, DailyTotals(
            day=day, calories=0.0, protein=0.0, carbs=0.0, fats=0.0
        )

    def add_food_entry(
        self, user_id: UUID, meal_id: UUID, item: FoodLineItem
    ) -> tuple[MealRecord, FoodLineItem]:
        """Add a food entry and refresh the meal's stored totals."""
        self._owned_meal(user_id, meal_id)
        compute_meal_totals([item])
        created = self.repository.create_food_entry(meal_id, item)
        return self._reconcile(meal_id), created

    def remove_food_entry(
        self, user_id: UUID, meal_id: UUID, entry_id: UUID
    ) -> MealRecord:
        """Remove a food entry and refresh the meal's stored totals."""
        meal = self._owned_meal(user_id, meal_id)
        if all(item.id != entry_id for item in meal.items):
            raise NotFoundError("Food entry not found")
        self.repository.delete_food_entry(entry_id)
        return self._reconcile(meal_id)

    def _owned_meal(self, user_id: UUID, meal_id: UUID) -> MealRecord:
        meal = self.repository.get_meal(meal_id)
        if meal is None:
            raise NotFoundError("Meal not found")
        if meal.user_id != user_id:
            raise ForbiddenError("Meal belongs to another user")
        return meal

    def _reconcile(self, meal_id: UUID) -> MealRecord:
        meal = self.repository.get_meal(meal_id)
        if meal is None:
            raise NotFoundError("Meal not found")
        totals = compute_meal_totals(meal.items)
        if meal.stored_totals == totals:
            return meal
        _logger.info(
            "Reconciling meal totals",
            extra={"meal_id": str(meal_id), "calories": totals.calories},
        )
        self.repository.update_meal_totals(meal_id, totals)
        return replace(meal, stored_totals=totals)
