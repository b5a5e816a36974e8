"""Meal and food entry endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from fitness_tracker.api.dependencies import require_user, today_for
from fitness_tracker.api.schemas import (
    FoodEntryCreate,
    MealCreate,
    daily_totals_to_dict,
    food_entry_to_dict,
    meal_to_dict,
)

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/meals", tags=["meals"])


@router.get("")
async def list_meals(
    request: Request,
    user_id: UUID = Depends(require_user),
    day: date | None = Query(default=None, alias="date"),
) -> dict[str, object]:
    """Return the user's meals and totals for a day."""
    container: AppContainer = request.app.state.container
    resolved_day = day or today_for(container)
    meals, totals = container.meal_service.summarize_day(user_id, resolved_day)
    return {
        "date": resolved_day.isoformat(),
        "meals": [meal_to_dict(meal) for meal in meals],
        "totals": daily_totals_to_dict(totals),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_meal(
    body: MealCreate, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Create an empty meal."""
    container: AppContainer = request.app.state.container
    meal = container.meal_service.create_meal(user_id, body.meal_type, body.eaten_at)
    return {"meal": meal_to_dict(meal)}


@router.post("/{meal_id}/food", status_code=status.HTTP_201_CREATED)
async def add_food_entry(
    meal_id: UUID,
    body: FoodEntryCreate,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Add a food entry to one of the user's meals."""
    container: AppContainer = request.app.state.container
    meal, entry = container.meal_service.add_food_entry(
        user_id, meal_id, body.to_domain()
    )
    return {"food_entry": food_entry_to_dict(entry), "meal": meal_to_dict(meal)}


@router.delete("/{meal_id}/food/{entry_id}")
async def remove_food_entry(
    meal_id: UUID,
    entry_id: UUID,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Remove a food entry from one of the user's meals."""
    container: AppContainer = request.app.state.container
    meal = container.meal_service.remove_food_entry(user_id, meal_id, entry_id)
    return {"meal": meal_to_dict(meal)}
