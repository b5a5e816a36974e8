"""Dashboard and chart endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request

from fitness_tracker.api.dependencies import require_user
from fitness_tracker.api.schemas import charts_to_dict, dashboard_to_dict

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/dashboard")
async def dashboard(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return today's intake and this week's training."""
    container: AppContainer = request.app.state.container
    return dashboard_to_dict(container.stats_service.get_dashboard(user_id))


@router.get("/charts")
async def progress_charts(
    request: Request,
    user_id: UUID = Depends(require_user),
    days: int = Query(default=30),
) -> dict[str, object]:
    """Return weight, nutrition and workout series for the last N days."""
    container: AppContainer = request.app.state.container
    charts = container.stats_service.get_progress_charts(user_id, days)
    return charts_to_dict(charts)
