"""Shared request dependencies."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import Header, HTTPException, status

from fitness_tracker.services.bucketing import record_day

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer


async def require_user(x_user_id: str | None = Header(default=None)) -> UUID:
    """Return the authenticated user id passed by the upstream auth layer."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return UUID(x_user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc


def today_for(container: AppContainer) -> date:
    """Return the current calendar day in the reporting timezone."""
    tz = ZoneInfo(container.settings.report_timezone)
    return record_day(datetime.now(tz=UTC), tz)
