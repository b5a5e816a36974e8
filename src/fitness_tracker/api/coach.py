"""AI coach endpoints."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, status
from openai import OpenAIError

from fitness_tracker.api.dependencies import require_user, today_for
from fitness_tracker.api.schemas import ChatRequest, insights_report_to_dict
from fitness_tracker.domain.coach import (
    MealPlanRequest,
    NutritionInsightsRequest,
    WorkoutPlanRequest,
)

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/coach", tags=["coach"])

INSIGHTS_DEFAULT_DAYS = 7

_logger = logging.getLogger(__name__)


@router.post("/workout-plan")
async def workout_plan(
    body: WorkoutPlanRequest, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Generate a workout plan."""
    container: AppContainer = request.app.state.container
    try:
        plan = await container.coach_service.generate_workout_plan(body)
    except OpenAIError as exc:
        raise _upstream_error("workout plan", user_id) from exc
    return plan.model_dump()


@router.post("/meal-plan")
async def meal_plan(
    body: MealPlanRequest, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Generate a meal plan."""
    container: AppContainer = request.app.state.container
    try:
        plan = await container.coach_service.generate_meal_plan(body)
    except OpenAIError as exc:
        raise _upstream_error("meal plan", user_id) from exc
    return plan.model_dump()


@router.post("/meal-plan/insights")
async def meal_plan_insights(
    body: NutritionInsightsRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Analyse logged meals against the user's goals."""
    container: AppContainer = request.app.state.container
    end_day = body.end_date or today_for(container)
    start_day = body.start_date or end_day - timedelta(days=INSIGHTS_DEFAULT_DAYS - 1)
    try:
        report = await container.coach_service.generate_nutrition_insights(
            user_id, start_day, end_day
        )
    except OpenAIError as exc:
        raise _upstream_error("nutrition insights", user_id) from exc
    return insights_report_to_dict(report)


@router.post("/chat")
async def chat(
    body: ChatRequest, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Answer a coach chat message."""
    container: AppContainer = request.app.state.container
    try:
        reply = await container.coach_service.chat(user_id, body.message, body.history)
    except OpenAIError as exc:
        raise _upstream_error("chat reply", user_id) from exc
    return {"reply": reply.model_dump()}


def _upstream_error(label: str, user_id: UUID) -> HTTPException:
    _logger.exception(
        "Coach request failed: %s", label, extra={"user_id": str(user_id)}
    )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Failed to generate {label}",
    )
