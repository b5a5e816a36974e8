"""Dashboard and chart statistics."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from fitness_tracker.domain.errors import InvalidInputError
from fitness_tracker.domain.models import UserGoals
from fitness_tracker.domain.progress import WeightLog
from fitness_tracker.domain.stats import DailyTotals, DatedRecord, NutritionAverages
from fitness_tracker.services.activities import ActivityRepository
from fitness_tracker.services.bucketing import count_by_bucket, record_day, week_start
from fitness_tracker.services.meals import MealService
from fitness_tracker.services.nutrition import (
    average_daily_totals,
    compute_daily_totals,
)
from fitness_tracker.services.progress import ProgressRepository
from fitness_tracker.services.users import UserService
from fitness_tracker.services.workouts import WorkoutRepository

MAX_CHART_DAYS = 365


@dataclass
class DashboardSummary:
    """Today's intake and this week's training."""

    today: DailyTotals
    week_workouts: int
    week_distance_km: float
    latest_weight: WeightLog | None
    goals: UserGoals


@dataclass
class ProgressCharts:
    """Time series for the progress charts."""

    weight: list[tuple[str, float]]
    nutrition: list[DailyTotals]
    workouts_per_week: dict[str, int]
    goals: UserGoals


@dataclass
class NutritionSummary:
    """Daily totals and averages over logged days."""

    daily: list[DailyTotals]
    averages: NutritionAverages


@dataclass
class StatsService:
    """Service for computing dashboard and chart statistics."""

    meal_service: MealService
    workout_repository: WorkoutRepository
    activity_repository: ActivityRepository
    progress_repository: ProgressRepository
    user_service: UserService
    timezone_name: str = "UTC"

    def get_dashboard(
        self, user_id: UUID, now: datetime | None = None
    ) -> DashboardSummary:
        """Return today's totals and week-to-date training."""
        tz = ZoneInfo(self.timezone_name)
        today = record_day(now or datetime.now(tz=UTC), tz)
        _, today_totals = self.meal_service.summarize_day(user_id, today)

        week_from = _start_of(week_start(today), tz)
        week_to = _start_of(today + timedelta(days=1), tz)
        workouts = self.workout_repository.list_workouts_between(
            user_id, week_from, week_to
        )
        activities = self.activity_repository.list_activities_between(
            user_id, week_from, week_to
        )
        weights = self.progress_repository.list_recent_weight_logs(user_id, 1)
        return DashboardSummary(
            today=today_totals,
            week_workouts=len(workouts),
            week_distance_km=sum(item.metrics.distance_km for item in activities),
            latest_weight=weights[0] if weights else None,
            goals=self.user_service.get_goals(user_id),
        )

    def get_progress_charts(
        self, user_id: UUID, days: int = 30, now: datetime | None = None
    ) -> ProgressCharts:
        """Return weight, nutrition and workout series for the last N days."""
        if days <= 0 or days > MAX_CHART_DAYS:
            raise InvalidInputError(f"Days must be between 1 and {MAX_CHART_DAYS}")
        tz = ZoneInfo(self.timezone_name)
        today = record_day(now or datetime.now(tz=UTC), tz)
        start_day = today - timedelta(days=days)
        start = _start_of(start_day, tz)
        end = _start_of(today + timedelta(days=1), tz)

        weights = [
            log
            for log in self.progress_repository.list_weight_logs_until(user_id, end)
            if log.logged_at >= start
        ]
        meals = self.meal_service.list_meals_for_range(user_id, start_day, today)
        workouts = self.workout_repository.list_workouts_between(user_id, start, end)
        return ProgressCharts(
            weight=[
                (record_day(log.logged_at, tz).isoformat(), log.weight_kg)
                for log in sorted(weights, key=lambda item: item.logged_at)
            ],
            nutrition=compute_daily_totals(meals, tz),
            workouts_per_week=count_by_bucket(
                [DatedRecord(recorded_at=item.performed_at) for item in workouts],
                "week",
                tz,
            ),
            goals=self.user_service.get_goals(user_id),
        )

    def get_nutrition_summary(
        self, user_id: UUID, start_day: date, end_day: date
    ) -> NutritionSummary:
        """Return daily totals and per-logged-day averages for a date range."""
        if end_day < start_day:
            raise InvalidInputError("End date must not be before start date")
        tz = ZoneInfo(self.timezone_name)
        meals = self.meal_service.list_meals_for_range(user_id, start_day, end_day)
        daily = compute_daily_totals(meals, tz)
        return NutritionSummary(daily=daily, averages=average_daily_totals(daily))


def _start_of(day: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz).astimezone(UTC)
