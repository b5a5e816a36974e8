"""Nutrition domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class MealType(str, Enum):
    """Meal slot within a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MacroTotals:
    """Calories and macronutrients for a meal or a day."""

    calories: float
    protein: float
    carbs: float
    fats: float


@dataclass(frozen=True)
class FoodLineItem:
    """Food entry within a meal, with macros per unit of quantity."""

    quantity: float
    calories: float
    protein: float
    carbs: float
    fats: float
    food_name: str = ""
    brand: str | None = None
    serving_size: str | None = None
    serving_unit: str | None = None
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    id: UUID | None = None


@dataclass(frozen=True)
class MealRecord:
    """Meal with its food entries."""

    id: UUID
    user_id: UUID
    meal_type: MealType
    eaten_at: datetime
    items: list[FoodLineItem] = field(default_factory=list)
    stored_totals: MacroTotals | None = None


@dataclass(frozen=True)
class FoodSummary:
    """Food search hit from FDC with macros per 100 g."""

    fdc_id: int
    description: str
    brand_owner: str | None
    data_type: str | None
    macros: MacroTotals
    serving_qty: float = 100.0
    serving_unit: str = "g"
