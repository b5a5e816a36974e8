"""Food search and nutrition summary endpoints."""

from __future__ import annotations

import logging
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from fitness_tracker.api.dependencies import require_user
from fitness_tracker.api.schemas import (
    averages_to_dict,
    daily_totals_to_dict,
    food_summary_to_dict,
)

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/nutrition", tags=["nutrition"])

_logger = logging.getLogger(__name__)


@router.get("/search", dependencies=[Depends(require_user)])
async def search_foods(
    request: Request,
    query: str = Query(default=""),
    limit: int = Query(default=10, ge=1, le=50),
) -> dict[str, object]:
    """Search USDA FoodData Central."""
    container: AppContainer = request.app.state.container
    try:
        foods = await container.nutrition_service.search(query, limit=limit)
    except httpx.HTTPError as exc:
        _logger.exception("Food search failed", extra={"query": query})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to search foods"
        ) from exc
    return {"foods": [food_summary_to_dict(food) for food in foods]}


@router.get("/summary")
async def nutrition_summary(
    request: Request,
    start: date,
    end: date,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Return daily totals and averages over logged days."""
    container: AppContainer = request.app.state.container
    summary = container.stats_service.get_nutrition_summary(user_id, start, end)
    return {
        "daily": [daily_totals_to_dict(day) for day in summary.daily],
        "averages": averages_to_dict(summary.averages),
    }
