"""Nutrition rollups and USDA FDC food search."""

import asyncio
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from fitness_tracker.adapters.fdc_client import FdcClient
from fitness_tracker.domain.errors import InvalidInputError
from fitness_tracker.domain.nutrition import (
    FoodLineItem,
    FoodSummary,
    MacroTotals,
    MealRecord,
)
from fitness_tracker.domain.stats import DailyTotals, DatedRecord, NutritionAverages
from fitness_tracker.services.bucketing import aggregate_by_bucket, count_by_bucket

_NUTRIENT_IDS = {
    "calories": 1008,
    "protein": 1003,
    "fats": 1004,
    "carbs": 1005,
}

MACRO_FIELDS = ("calories", "protein", "carbs", "fats")

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


def compute_meal_totals(items: Iterable[FoodLineItem]) -> MacroTotals:
    """Sum quantity times per-unit macros across a meal's food entries."""
    calories = protein = carbs = fats = 0.0
    for item in items:
        _validate_item(item)
        calories += item.quantity * item.calories
        protein += item.quantity * item.protein
        carbs += item.quantity * item.carbs
        fats += item.quantity * item.fats
    return MacroTotals(calories=calories, protein=protein, carbs=carbs, fats=fats)


def compute_daily_totals(
    meals: Iterable[MealRecord], tz: ZoneInfo
) -> list[DailyTotals]:
    """Group meals by calendar day and sum their recomputed totals."""
    records = [
        DatedRecord(recorded_at=meal.eaten_at, values=_totals_as_values(meal))
        for meal in meals
    ]
    sums = aggregate_by_bucket(records, "day", tz, fields=MACRO_FIELDS)
    counts = count_by_bucket(records, "day", tz)
    return [
        DailyTotals(
            day=_parse_day(key),
            calories=values["calories"],
            protein=values["protein"],
            carbs=values["carbs"],
            fats=values["fats"],
            meal_count=counts[key],
        )
        for key, values in sums.items()
    ]


def average_daily_totals(days: Iterable[DailyTotals]) -> NutritionAverages:
    """Average totals over days that have at least one logged meal."""
    logged = [day for day in days if day.meal_count > 0]
    if not logged:
        return NutritionAverages(
            days_logged=0, calories=0.0, protein=0.0, carbs=0.0, fats=0.0
        )
    count = len(logged)
    return NutritionAverages(
        days_logged=count,
        calories=sum(day.calories for day in logged) / count,
        protein=sum(day.protein for day in logged) / count,
        carbs=sum(day.carbs for day in logged) / count,
        fats=sum(day.fats for day in logged) / count,
    )


@dataclass
class NutritionService:
    """Service for FDC food search."""

    fdc_client: FdcClient
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 10) -> list[FoodSummary]:
        """Search FDC foods and map nutrients to per-100g macros."""
        if not query.strip():
            raise InvalidInputError("Query parameter is required")
        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=limit),
            action="search",
        )
        foods = [
            FoodSummary(
                fdc_id=food["fdcId"],
                description=food.get("description") or "Unknown",
                brand_owner=food.get("brandOwner"),
                data_type=food.get("dataType"),
                macros=_extract_macros(food.get("foodNutrients", [])),
            )
            for food in payload.get("foods", [])[:limit]
        ]
        _logger.info("Nutrition search: query=%s results=%s", query, len(foods))
        return foods

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Nutrition %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _validate_item(item: FoodLineItem) -> None:
    if not _is_finite(item.quantity) or item.quantity <= 0:
        raise InvalidInputError(
            f"Food quantity must be positive, got {item.quantity!r}"
        )
    for name in MACRO_FIELDS:
        value = getattr(item, name)
        if not _is_finite(value) or value < 0:
            raise InvalidInputError(f"Food {name} must be non-negative, got {value!r}")


def _is_finite(value: float) -> bool:
    return isinstance(value, int | float) and math.isfinite(value)


def _totals_as_values(meal: MealRecord) -> dict[str, float]:
    totals = compute_meal_totals(meal.items)
    return {
        "calories": totals.calories,
        "protein": totals.protein,
        "carbs": totals.carbs,
        "fats": totals.fats,
    }


def _parse_day(key: str) -> date:
    return date.fromisoformat(key)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _extract_macros(food_nutrients: list[dict[str, object]]) -> MacroTotals:
    """Extract calories, protein, carbs and fats from FDC nutrients."""
    values: dict[str, float] = dict.fromkeys(MACRO_FIELDS, 0.0)
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("value", nutrient.get("amount"))
        if amount is None:
            continue
        for name, expected_id in _NUTRIENT_IDS.items():
            if nutrient_id == expected_id:
                values[name] = float(amount)
    return MacroTotals(
        calories=values["calories"],
        protein=values["protein"],
        carbs=values["carbs"],
        fats=values["fats"],
    )
