"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from fitness_tracker.adapters.fdc_client import HttpxFdcClient
from fitness_tracker.adapters.openai_coach_client import OpenAICoachClient
from fitness_tracker.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from fitness_tracker.adapters.supabase_challenge_repository import (
    SupabaseChallengeRepository,
)
from fitness_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from fitness_tracker.adapters.supabase_progress_repository import (
    SupabaseProgressRepository,
)
from fitness_tracker.adapters.supabase_social_repository import (
    SupabaseSocialRepository,
)
from fitness_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from fitness_tracker.adapters.supabase_workout_repository import (
    SupabaseWorkoutRepository,
)
from fitness_tracker.config import Settings
from fitness_tracker.services.activities import ActivityService
from fitness_tracker.services.challenges import ChallengeService
from fitness_tracker.services.coach import CoachService
from fitness_tracker.services.meals import MealService
from fitness_tracker.services.nutrition import NutritionService
from fitness_tracker.services.progress import ProgressService
from fitness_tracker.services.social import SocialService
from fitness_tracker.services.stats import StatsService
from fitness_tracker.services.users import UserService
from fitness_tracker.services.workouts import WorkoutService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    meal_service: MealService
    nutrition_service: NutritionService
    activity_service: ActivityService
    workout_service: WorkoutService
    progress_service: ProgressService
    challenge_service: ChallengeService
    social_service: SocialService
    stats_service: StatsService
    coach_service: CoachService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone_name = resolved_settings.report_timezone
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    activity_repository = SupabaseActivityRepository(supabase_client)
    workout_repository = SupabaseWorkoutRepository(supabase_client)
    progress_repository = SupabaseProgressRepository(supabase_client)
    challenge_repository = SupabaseChallengeRepository(supabase_client)
    social_repository = SupabaseSocialRepository(supabase_client)

    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    coach_client = OpenAICoachClient.create(resolved_settings.openai_api_key)

    user_service = UserService(user_repository)
    meal_service = MealService(meal_repository, timezone_name=timezone_name)
    stats_service = StatsService(
        meal_service=meal_service,
        workout_repository=workout_repository,
        activity_repository=activity_repository,
        progress_repository=progress_repository,
        user_service=user_service,
        timezone_name=timezone_name,
    )

    async def close_resources() -> None:
        await fdc_client.close()
        await coach_client.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        meal_service=meal_service,
        nutrition_service=NutritionService(fdc_client=fdc_client),
        activity_service=ActivityService(activity_repository),
        workout_service=WorkoutService(workout_repository),
        progress_service=ProgressService(progress_repository),
        challenge_service=ChallengeService(
            repository=challenge_repository,
            activity_repository=activity_repository,
            workout_repository=workout_repository,
            progress_repository=progress_repository,
            timezone_name=timezone_name,
        ),
        social_service=SocialService(
            repository=social_repository,
            user_repository=user_repository,
            activity_repository=activity_repository,
            workout_repository=workout_repository,
        ),
        stats_service=stats_service,
        coach_service=CoachService(
            client=coach_client,
            model=resolved_settings.openai_model,
            stats_service=stats_service,
        ),
        close_resources=close_resources,
    )
