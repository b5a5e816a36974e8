"""Supabase repository for meals and food entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.nutrition import (
    FoodLineItem,
    MacroTotals,
    MealRecord,
    MealType,
)
from fitness_tracker.services.meals import MealRepository

_FOOD_COLUMNS = (
    "id, food_name, brand, serving_size, serving_unit, quantity, calories, "
    "protein, carbs, fats, fiber, sugar, sodium"
)
_MEAL_COLUMNS = (
    "id, user_id, meal_type, eaten_at, total_calories, total_protein, "
    f"total_carbs, total_fats, food_entries({_FOOD_COLUMNS})"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals."""

    client: Client

    def create_meal(
        self, user_id: UUID, meal_type: MealType, eaten_at: datetime
    ) -> MealRecord:
        """Create an empty meal row and return it."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "meal_type": MealType(meal_type).value,
                    "eaten_at": eaten_at.isoformat(),
                    "total_calories": 0.0,
                    "total_protein": 0.0,
                    "total_carbs": 0.0,
                    "total_fats": 0.0,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_meal(response.data[0])

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal with its food entries."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def list_meals_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return a user's meals with food entries within a time range."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("eaten_at", start.isoformat())
            .lt("eaten_at", end.isoformat())
            .order("eaten_at", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def create_food_entry(self, meal_id: UUID, item: FoodLineItem) -> FoodLineItem:
        """Create a food entry row and return it with its id."""
        response = (
            self.client.table("food_entries")
            .insert(
                {
                    "meal_id": str(meal_id),
                    "food_name": item.food_name,
                    "brand": item.brand,
                    "serving_size": item.serving_size,
                    "serving_unit": item.serving_unit,
                    "quantity": item.quantity,
                    "calories": item.calories,
                    "protein": item.protein,
                    "carbs": item.carbs,
                    "fats": item.fats,
                    "fiber": item.fiber,
                    "sugar": item.sugar,
                    "sodium": item.sodium,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry")
        return _parse_food(response.data[0])

    def delete_food_entry(self, entry_id: UUID) -> None:
        """Delete a food entry row."""
        self.client.table("food_entries").delete().eq("id", str(entry_id)).execute()

    def update_meal_totals(self, meal_id: UUID, totals: MacroTotals) -> None:
        """Store recomputed totals on the meal row."""
        self.client.table("meals").update(
            {
                "total_calories": totals.calories,
                "total_protein": totals.protein,
                "total_carbs": totals.carbs,
                "total_fats": totals.fats,
            }
        ).eq("id", str(meal_id)).execute()


def _parse_meal(row: dict[str, object]) -> MealRecord:
    entries = row.get("food_entries") or []
    return MealRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_type=MealType(row["meal_type"]),
        eaten_at=datetime.fromisoformat(str(row["eaten_at"])),
        items=[_parse_food(entry) for entry in entries if isinstance(entry, dict)],
        stored_totals=MacroTotals(
            calories=float(row.get("total_calories") or 0.0),
            protein=float(row.get("total_protein") or 0.0),
            carbs=float(row.get("total_carbs") or 0.0),
            fats=float(row.get("total_fats") or 0.0),
        ),
    )


def _parse_food(row: dict[str, object]) -> FoodLineItem:
    return FoodLineItem(
        id=UUID(str(row["id"])),
        food_name=str(row.get("food_name") or ""),
        brand=_optional_str(row.get("brand")),
        serving_size=_optional_str(row.get("serving_size")),
        serving_unit=_optional_str(row.get("serving_unit")),
        quantity=float(row.get("quantity") or 0.0),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fats=float(row.get("fats") or 0.0),
        fiber=_optional_float(row.get("fiber")),
        sugar=_optional_float(row.get("sugar")),
        sodium=_optional_float(row.get("sodium")),
    )


def _optional_str(value: object) -> str | None:
    return str(value) if value is not None else None


def _optional_float(value: object) -> float | None:
    return float(value) if isinstance(value, (int, float)) else None
