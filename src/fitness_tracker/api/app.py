"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from fitness_tracker.api.activities import router as activities_router
from fitness_tracker.api.challenges import router as challenges_router
from fitness_tracker.api.coach import router as coach_router
from fitness_tracker.api.meals import router as meals_router
from fitness_tracker.api.nutrition import router as nutrition_router
from fitness_tracker.api.progress import router as progress_router
from fitness_tracker.api.social import router as social_router
from fitness_tracker.api.stats import router as stats_router
from fitness_tracker.api.users import router as users_router
from fitness_tracker.api.workouts import router as workouts_router
from fitness_tracker.app_logging import configure_logging
from fitness_tracker.containers import AppContainer
from fitness_tracker.domain.errors import (
    CoachResponseError,
    ConflictError,
    FitnessTrackerError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)

_ERROR_STATUS: dict[type[FitnessTrackerError], int] = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    CoachResponseError: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Fitness Tracker", lifespan=lifespan)
    app.state.container = container

    for router in (
        meals_router,
        nutrition_router,
        workouts_router,
        activities_router,
        progress_router,
        stats_router,
        challenges_router,
        coach_router,
        social_router,
        users_router,
    ):
        app.include_router(router)

    @app.exception_handler(FitnessTrackerError)
    async def handle_domain_error(
        request: Request, exc: FitnessTrackerError
    ) -> JSONResponse:
        status_code = error_status(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning(
                "Request failed: %s",
                exc,
                extra={"path": request.url.path, "status_code": status_code},
            )
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def error_status(exc: FitnessTrackerError) -> int:
    """Return the HTTP status code for a domain error."""
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
