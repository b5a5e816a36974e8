"""Shared test fixtures."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from uuid import UUID, uuid4

import pytest

from fitness_tracker.adapters.fdc_client import FdcClient
from fitness_tracker.config import Settings
from fitness_tracker.containers import AppContainer
from fitness_tracker.domain.activities import (
    ActivityMetrics,
    ActivityRecord,
    ActivityType,
    RouteData,
)
from fitness_tracker.domain.challenges import (
    ChallengeDefinition,
    ChallengeType,
    Participation,
)
from fitness_tracker.domain.models import (
    DEFAULT_CALORIE_GOAL,
    DEFAULT_PROTEIN_GOAL,
    UserGoals,
)
from fitness_tracker.domain.nutrition import (
    FoodLineItem,
    MacroTotals,
    MealRecord,
    MealType,
)
from fitness_tracker.domain.progress import (
    BodyMeasurement,
    Exercise,
    StepLog,
    WeightLog,
    WorkoutRecord,
)
from fitness_tracker.domain.social import Follow, UserProfileRow
from fitness_tracker.services.activities import ActivityRepository, ActivityService
from fitness_tracker.services.challenges import ChallengeRepository, ChallengeService
from fitness_tracker.services.coach import CoachClient, CoachService
from fitness_tracker.services.meals import MealRepository, MealService
from fitness_tracker.services.nutrition import NutritionService
from fitness_tracker.services.progress import ProgressRepository, ProgressService
from fitness_tracker.services.social import SocialRepository, SocialService
from fitness_tracker.services.stats import StatsService
from fitness_tracker.services.users import UserRepository, UserService
from fitness_tracker.services.workouts import WorkoutRepository, WorkoutService


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    goals: dict[UUID, UserGoals] = field(default_factory=dict)

    def get_goals(self, user_id: UUID) -> UserGoals | None:
        return self.goals.get(user_id)

    def update_settings(
        self, user_id: UUID, changes: Mapping[str, object]
    ) -> UserGoals | None:
        current = self.goals.get(user_id)
        if current is None:
            return None
        updated = replace(current, **changes)
        if updated.calorie_goal is None:
            updated = replace(updated, calorie_goal=DEFAULT_CALORIE_GOAL)
        if updated.protein_goal is None:
            updated = replace(updated, protein_goal=DEFAULT_PROTEIN_GOAL)
        self.goals[user_id] = updated
        return updated


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, MealRecord] = field(default_factory=dict)
    totals_updates: list[tuple[UUID, MacroTotals]] = field(default_factory=list)

    def create_meal(
        self, user_id: UUID, meal_type: MealType, eaten_at: datetime
    ) -> MealRecord:
        meal = MealRecord(
            id=uuid4(),
            user_id=user_id,
            meal_type=MealType(meal_type),
            eaten_at=eaten_at,
            stored_totals=MacroTotals(0.0, 0.0, 0.0, 0.0),
        )
        self.meals[meal.id] = meal
        return meal

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        return self.meals.get(meal_id)

    def list_meals_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        return sorted(
            (
                meal
                for meal in self.meals.values()
                if meal.user_id == user_id and start <= meal.eaten_at < end
            ),
            key=lambda meal: meal.eaten_at,
        )

    def create_food_entry(self, meal_id: UUID, item: FoodLineItem) -> FoodLineItem:
        created = replace(item, id=uuid4())
        meal = self.meals[meal_id]
        self.meals[meal_id] = replace(meal, items=[*meal.items, created])
        return created

    def delete_food_entry(self, entry_id: UUID) -> None:
        for meal_id, meal in self.meals.items():
            remaining = [item for item in meal.items if item.id != entry_id]
            if len(remaining) != len(meal.items):
                self.meals[meal_id] = replace(meal, items=remaining)
                return

    def update_meal_totals(self, meal_id: UUID, totals: MacroTotals) -> None:
        self.totals_updates.append((meal_id, totals))
        self.meals[meal_id] = replace(self.meals[meal_id], stored_totals=totals)


@dataclass
class InMemoryActivityRepository(ActivityRepository):
    """In-memory activity repository for tests."""

    activities: dict[UUID, ActivityRecord] = field(default_factory=dict)

    def create_activity(  # noqa: PLR0913
        self,
        user_id: UUID,
        activity_type: ActivityType,
        started_at: datetime,
        ended_at: datetime | None,
        metrics: ActivityMetrics,
        route: RouteData,
        name: str | None,
        is_public: bool,
    ) -> ActivityRecord:
        activity = ActivityRecord(
            id=uuid4(),
            user_id=user_id,
            activity_type=activity_type,
            started_at=started_at,
            ended_at=ended_at,
            metrics=metrics,
            route=route,
            name=name,
            is_public=is_public,
        )
        self.activities[activity.id] = activity
        return activity

    def get_activity(self, activity_id: UUID) -> ActivityRecord | None:
        return self.activities.get(activity_id)

    def list_activities(self, user_id: UUID, limit: int) -> list[ActivityRecord]:
        owned = [item for item in self.activities.values() if item.user_id == user_id]
        return sorted(owned, key=lambda item: item.started_at, reverse=True)[:limit]

    def list_activities_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[ActivityRecord]:
        return [
            item
            for item in self.activities.values()
            if item.user_id == user_id and start <= item.started_at < end
        ]

    def delete_activity(self, activity_id: UUID) -> None:
        self.activities.pop(activity_id, None)

    def list_public_activities_for_users(
        self, user_ids: Sequence[UUID], limit: int
    ) -> list[ActivityRecord]:
        shared = [
            item
            for item in self.activities.values()
            if item.user_id in user_ids and item.is_public
        ]
        return sorted(shared, key=lambda item: item.started_at, reverse=True)[:limit]


@dataclass
class InMemoryWorkoutRepository(WorkoutRepository):
    """In-memory workout repository for tests."""

    workouts: dict[UUID, WorkoutRecord] = field(default_factory=dict)
    exercises: dict[UUID, Exercise] = field(default_factory=dict)

    def create_workout(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        performed_at: datetime,
        duration_minutes: int | None,
        calories_burned: float | None,
        notes: str | None,
    ) -> WorkoutRecord:
        workout = WorkoutRecord(
            id=uuid4(),
            user_id=user_id,
            name=name,
            performed_at=performed_at,
            duration_minutes=duration_minutes,
            calories_burned=calories_burned,
            notes=notes,
        )
        self.workouts[workout.id] = workout
        return workout

    def get_workout(self, workout_id: UUID) -> WorkoutRecord | None:
        return self.workouts.get(workout_id)

    def delete_workout(self, workout_id: UUID) -> None:
        self.workouts.pop(workout_id, None)

    def list_recent_workouts(self, user_id: UUID, limit: int) -> list[WorkoutRecord]:
        owned = [item for item in self.workouts.values() if item.user_id == user_id]
        return sorted(owned, key=lambda item: item.performed_at, reverse=True)[:limit]

    def list_workouts_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WorkoutRecord]:
        return [
            item
            for item in self.workouts.values()
            if item.user_id == user_id and start <= item.performed_at < end
        ]

    def list_workouts_for_users(
        self, user_ids: Sequence[UUID], limit: int
    ) -> list[WorkoutRecord]:
        owned = [item for item in self.workouts.values() if item.user_id in user_ids]
        return sorted(owned, key=lambda item: item.performed_at, reverse=True)[:limit]

    def create_exercise(
        self, workout_id: UUID, exercise: Exercise, order_index: int
    ) -> Exercise:
        created = replace(
            exercise, id=uuid4(), workout_id=workout_id, order_index=order_index
        )
        self.exercises[created.id] = created
        return created

    def get_exercise(self, exercise_id: UUID) -> Exercise | None:
        return self.exercises.get(exercise_id)

    def delete_exercise(self, exercise_id: UUID) -> None:
        self.exercises.pop(exercise_id, None)

    def list_exercises(self, workout_id: UUID) -> list[Exercise]:
        return sorted(
            (item for item in self.exercises.values() if item.workout_id == workout_id),
            key=lambda item: item.order_index,
        )


@dataclass
class InMemoryProgressRepository(ProgressRepository):
    """In-memory weight and step repository for tests."""

    weights: dict[UUID, WeightLog] = field(default_factory=dict)
    steps: dict[UUID, StepLog] = field(default_factory=dict)
    measurements: dict[UUID, BodyMeasurement] = field(default_factory=dict)

    def create_weight_log(
        self, user_id: UUID, weight_kg: float, logged_at: datetime, notes: str | None
    ) -> WeightLog:
        log = WeightLog(
            id=uuid4(),
            user_id=user_id,
            weight_kg=weight_kg,
            logged_at=logged_at,
            notes=notes,
        )
        self.weights[log.id] = log
        return log

    def get_weight_log(self, log_id: UUID) -> WeightLog | None:
        return self.weights.get(log_id)

    def delete_weight_log(self, log_id: UUID) -> None:
        self.weights.pop(log_id, None)

    def list_recent_weight_logs(self, user_id: UUID, limit: int) -> list[WeightLog]:
        owned = [log for log in self.weights.values() if log.user_id == user_id]
        return sorted(owned, key=lambda log: log.logged_at, reverse=True)[:limit]

    def list_weight_logs_until(self, user_id: UUID, end: datetime) -> list[WeightLog]:
        owned = [
            log
            for log in self.weights.values()
            if log.user_id == user_id and log.logged_at < end
        ]
        return sorted(owned, key=lambda log: log.logged_at)

    def create_step_log(
        self, user_id: UUID, steps: int, logged_at: datetime
    ) -> StepLog:
        log = StepLog(id=uuid4(), user_id=user_id, steps=steps, logged_at=logged_at)
        self.steps[log.id] = log
        return log

    def list_recent_step_logs(self, user_id: UUID, limit: int) -> list[StepLog]:
        owned = [log for log in self.steps.values() if log.user_id == user_id]
        return sorted(owned, key=lambda log: log.logged_at, reverse=True)[:limit]

    def list_step_logs_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[StepLog]:
        return [
            log
            for log in self.steps.values()
            if log.user_id == user_id and start <= log.logged_at < end
        ]

    def create_measurement(
        self,
        user_id: UUID,
        measured_at: datetime,
        sites: Mapping[str, float | None],
        notes: str | None,
    ) -> BodyMeasurement:
        measurement = BodyMeasurement(
            id=uuid4(),
            user_id=user_id,
            measured_at=measured_at,
            sites=dict(sites),
            notes=notes,
        )
        self.measurements[measurement.id] = measurement
        return measurement

    def get_measurement(self, measurement_id: UUID) -> BodyMeasurement | None:
        return self.measurements.get(measurement_id)

    def delete_measurement(self, measurement_id: UUID) -> None:
        self.measurements.pop(measurement_id, None)

    def list_recent_measurements(
        self, user_id: UUID, limit: int
    ) -> list[BodyMeasurement]:
        owned = [
            item for item in self.measurements.values() if item.user_id == user_id
        ]
        return sorted(owned, key=lambda item: item.measured_at, reverse=True)[:limit]


@dataclass
class InMemoryChallengeRepository(ChallengeRepository):
    """In-memory challenge repository for tests."""

    challenges: dict[UUID, ChallengeDefinition] = field(default_factory=dict)
    participations: dict[tuple[UUID, UUID], Participation] = field(
        default_factory=dict
    )

    def create_challenge(  # noqa: PLR0913
        self,
        creator_id: UUID,
        name: str,
        description: str | None,
        challenge_type: ChallengeType,
        goal_value: float,
        start_date: date,
        end_date: date,
        is_public: bool,
    ) -> ChallengeDefinition:
        challenge = ChallengeDefinition(
            id=uuid4(),
            creator_id=creator_id,
            name=name,
            description=description,
            challenge_type=challenge_type,
            goal_value=goal_value,
            start_date=start_date,
            end_date=end_date,
            is_public=is_public,
        )
        self.challenges[challenge.id] = challenge
        return challenge

    def get_challenge(self, challenge_id: UUID) -> ChallengeDefinition | None:
        return self.challenges.get(challenge_id)

    def list_public_challenges(self, as_of: date) -> list[ChallengeDefinition]:
        return [
            item
            for item in self.challenges.values()
            if item.is_public and item.end_date >= as_of
        ]

    def list_user_challenges(self, user_id: UUID) -> list[ChallengeDefinition]:
        joined = {key[0] for key in self.participations if key[1] == user_id}
        return [
            item
            for item in self.challenges.values()
            if item.creator_id == user_id or item.id in joined
        ]

    def get_participation(
        self, challenge_id: UUID, user_id: UUID
    ) -> Participation | None:
        return self.participations.get((challenge_id, user_id))

    def create_participation(
        self, challenge_id: UUID, user_id: UUID, joined_at: datetime
    ) -> Participation:
        participation = Participation(
            user_id=user_id, challenge_id=challenge_id, joined_at=joined_at
        )
        self.participations[(challenge_id, user_id)] = participation
        return participation

    def delete_participation(self, challenge_id: UUID, user_id: UUID) -> None:
        self.participations.pop((challenge_id, user_id), None)

    def list_participations(self, challenge_id: UUID) -> list[Participation]:
        return [
            item
            for key, item in self.participations.items()
            if key[0] == challenge_id
        ]


@dataclass
class InMemorySocialRepository(SocialRepository):
    """In-memory follow and user directory for tests."""

    users: list[UserProfileRow] = field(default_factory=list)
    follows: dict[tuple[UUID, UUID], Follow] = field(default_factory=dict)

    def get_follow(self, follower_id: UUID, following_id: UUID) -> Follow | None:
        return self.follows.get((follower_id, following_id))

    def create_follow(
        self, follower_id: UUID, following_id: UUID, created_at: datetime
    ) -> Follow:
        follow = Follow(
            follower_id=follower_id, following_id=following_id, created_at=created_at
        )
        self.follows[(follower_id, following_id)] = follow
        return follow

    def delete_follow(self, follower_id: UUID, following_id: UUID) -> None:
        self.follows.pop((follower_id, following_id), None)

    def list_following_ids(self, follower_id: UUID) -> list[UUID]:
        return [key[1] for key in self.follows if key[0] == follower_id]

    def count_followers(self, user_id: UUID) -> int:
        return sum(1 for key in self.follows if key[1] == user_id)

    def count_following(self, user_id: UUID) -> int:
        return sum(1 for key in self.follows if key[0] == user_id)

    def search_users(
        self, query: str | None, exclude_user_id: UUID, limit: int
    ) -> list[UserProfileRow]:
        needle = (query or "").lower()
        return [
            row
            for row in self.users
            if row.user_id != exclude_user_id
            and (
                not needle
                or needle in (row.name or "").lower()
                or needle in (row.email or "").lower()
            )
        ][:limit]


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 171077,
                    "description": "Chicken, broilers or fryers, breast, meat only",
                    "brandOwner": None,
                    "dataType": "SR Legacy",
                    "foodNutrients": [
                        {"nutrientId": 1008, "value": 120},
                        {"nutrientId": 1003, "value": 22.5},
                        {"nutrientId": 1004, "value": 2.62},
                        {"nutrientId": 1005, "value": 0},
                    ],
                }
            ]
        }
    )
    queries: list[str] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        self.queries.append(query)
        return self.search_payload


@dataclass
class FakeCoachClient(CoachClient):
    """Fake coach client returning fixed payloads and recording prompts."""

    payload: dict[str, object] = field(default_factory=dict)
    reply: str = "Keep going!"
    prompts: list[str] = field(default_factory=list)
    conversations: list[list[dict[str, str]]] = field(default_factory=list)

    async def complete_json(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
    ) -> dict[str, object]:
        self.prompts.append(user_prompt)
        return self.payload

    async def chat(
        self,
        *,
        model: str,
        system_prompt: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        self.prompts.append(system_prompt)
        self.conversations.append(messages)
        return self.reply


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
        fdc_api_key="fdc-key",
        report_timezone="UTC",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def activity_repository() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
def workout_repository() -> InMemoryWorkoutRepository:
    return InMemoryWorkoutRepository()


@pytest.fixture
def progress_repository() -> InMemoryProgressRepository:
    return InMemoryProgressRepository()


@pytest.fixture
def challenge_repository() -> InMemoryChallengeRepository:
    return InMemoryChallengeRepository()


@pytest.fixture
def social_repository() -> InMemorySocialRepository:
    return InMemorySocialRepository()


@pytest.fixture
def coach_client() -> FakeCoachClient:
    return FakeCoachClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_repository: InMemoryUserRepository,
    meal_repository: InMemoryMealRepository,
    activity_repository: InMemoryActivityRepository,
    workout_repository: InMemoryWorkoutRepository,
    progress_repository: InMemoryProgressRepository,
    challenge_repository: InMemoryChallengeRepository,
    social_repository: InMemorySocialRepository,
    coach_client: FakeCoachClient,
) -> AppContainer:
    user_service = UserService(user_repository)
    meal_service = MealService(meal_repository, timezone_name=settings.report_timezone)
    stats_service = StatsService(
        meal_service=meal_service,
        workout_repository=workout_repository,
        activity_repository=activity_repository,
        progress_repository=progress_repository,
        user_service=user_service,
        timezone_name=settings.report_timezone,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=user_service,
        meal_service=meal_service,
        nutrition_service=NutritionService(fdc_client=FakeFdcClient()),
        activity_service=ActivityService(activity_repository),
        workout_service=WorkoutService(workout_repository),
        progress_service=ProgressService(progress_repository),
        challenge_service=ChallengeService(
            repository=challenge_repository,
            activity_repository=activity_repository,
            workout_repository=workout_repository,
            progress_repository=progress_repository,
            timezone_name=settings.report_timezone,
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
            model=settings.openai_model,
            stats_service=stats_service,
        ),
        close_resources=close_resources,
    )
