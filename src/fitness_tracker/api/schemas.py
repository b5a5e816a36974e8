"""Request bodies and JSON serializers for the HTTP API."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from fitness_tracker.domain.activities import (
    ActivityRecord,
    ActivityType,
    GpsFix,
    PauseInterval,
)
from fitness_tracker.domain.challenges import (
    ChallengeDefinition,
    ChallengeType,
    LeaderboardEntry,
    Participation,
)
from fitness_tracker.domain.coach import ChatMessage
from fitness_tracker.domain.models import UserGoals
from fitness_tracker.domain.nutrition import (
    FoodLineItem,
    FoodSummary,
    MacroTotals,
    MealRecord,
    MealType,
)
from fitness_tracker.domain.progress import (
    MEASUREMENT_SITES,
    BodyMeasurement,
    Exercise,
    ExerciseType,
    StepLog,
    WeightLog,
    WorkoutRecord,
)
from fitness_tracker.domain.social import FeedItem, UserSummary
from fitness_tracker.domain.stats import DailyTotals, NutritionAverages
from fitness_tracker.services.coach import NutritionInsightsReport
from fitness_tracker.services.nutrition import compute_meal_totals
from fitness_tracker.services.stats import DashboardSummary, ProgressCharts


class MealCreate(BaseModel):
    """Body for creating a meal."""

    meal_type: MealType
    eaten_at: datetime | None = None


class FoodEntryCreate(BaseModel):
    """Body for adding a food entry; macros are per unit of quantity."""

    food_name: str = Field(min_length=1)
    brand: str | None = None
    serving_size: str | None = None
    serving_unit: str | None = None
    quantity: float = Field(gt=0)
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fats: float = Field(ge=0)
    fiber: float | None = Field(default=None, ge=0)
    sugar: float | None = Field(default=None, ge=0)
    sodium: float | None = Field(default=None, ge=0)

    def to_domain(self) -> FoodLineItem:
        """Convert to a food line item."""
        return FoodLineItem(**self.model_dump())


class WorkoutCreate(BaseModel):
    """Body for logging a workout."""

    name: str = Field(min_length=1)
    performed_at: datetime | None = None
    duration_minutes: int | None = Field(default=None, ge=0)
    calories_burned: float | None = Field(default=None, ge=0)
    notes: str | None = None


class ExerciseCreate(BaseModel):
    """Body for adding an exercise to a workout."""

    exercise_name: str = Field(min_length=1)
    exercise_type: ExerciseType
    sets: int | None = Field(default=None, ge=0)
    reps: int | None = Field(default=None, ge=0)
    weight_kg: float | None = Field(default=None, ge=0)
    duration_minutes: float | None = Field(default=None, ge=0)
    distance_km: float | None = Field(default=None, ge=0)
    rest_seconds: int | None = Field(default=None, ge=0)
    notes: str | None = None

    def to_domain(self) -> Exercise:
        """Convert to an exercise."""
        return Exercise(**self.model_dump())


class GpsFixIn(BaseModel):
    """GPS fix captured by the client."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timestamp_ms: int
    altitude: float | None = None

    def to_domain(self) -> GpsFix:
        """Convert to a GPS fix."""
        return GpsFix(
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp_ms=self.timestamp_ms,
            altitude=self.altitude,
        )


class PauseIn(BaseModel):
    """Pause interval within a recording."""

    paused_at: datetime
    resumed_at: datetime


class ActivityCreate(BaseModel):
    """Body for saving a GPS recording."""

    activity_type: ActivityType
    name: str | None = None
    started_at: datetime
    stopped_at: datetime
    fixes: list[GpsFixIn]
    pauses: list[PauseIn] = Field(default_factory=list)
    is_public: bool = False

    def domain_fixes(self) -> list[GpsFix]:
        """Return the fixes as domain objects."""
        return [fix.to_domain() for fix in self.fixes]

    def domain_pauses(self) -> list[PauseInterval]:
        """Return the pauses as domain objects."""
        return [
            PauseInterval(paused_at=pause.paused_at, resumed_at=pause.resumed_at)
            for pause in self.pauses
        ]


class WeightCreate(BaseModel):
    """Body for logging a weigh-in."""

    weight_kg: float = Field(gt=0)
    logged_at: datetime | None = None
    notes: str | None = None


class StepsCreate(BaseModel):
    """Body for logging a step count."""

    steps: int = Field(ge=0)
    logged_at: datetime | None = None


class MeasurementCreate(BaseModel):
    """Body for logging body measurements in centimetres."""

    measured_at: datetime | None = None
    neck: float | None = None
    chest: float | None = None
    waist: float | None = None
    hips: float | None = None
    bicep_left: float | None = None
    bicep_right: float | None = None
    thigh_left: float | None = None
    thigh_right: float | None = None
    calf_left: float | None = None
    calf_right: float | None = None
    notes: str | None = None

    def sites(self) -> dict[str, float | None]:
        """Return the measurement sites keyed by name."""
        return {name: getattr(self, name) for name in MEASUREMENT_SITES}


class SettingsUpdate(BaseModel):
    """Body for updating profile settings; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1)
    date_of_birth: date | None = None
    gender: str | None = None
    height_cm: float | None = Field(default=None, gt=0)
    current_weight: float | None = Field(default=None, gt=0)
    goal_weight: float | None = Field(default=None, gt=0)
    activity_level: str | None = None
    calorie_goal: int | None = Field(default=None, gt=0)
    protein_goal: int | None = Field(default=None, gt=0)
    carb_goal: int | None = Field(default=None, gt=0)
    fat_goal: int | None = Field(default=None, gt=0)
    dietary_preference: str | None = None
    measurement_system: Literal["metric", "imperial"] | None = None


class FollowCreate(BaseModel):
    """Body for following a user."""

    user_id: UUID


class ChallengeCreate(BaseModel):
    """Body for creating a challenge."""

    name: str = Field(min_length=1)
    description: str | None = None
    challenge_type: ChallengeType
    goal_value: float
    start_date: date
    end_date: date
    is_public: bool = True


class ChatRequest(BaseModel):
    """Body for a coach chat message."""

    message: str = Field(min_length=1, max_length=4000)
    history: list[ChatMessage] = Field(default_factory=list)


def totals_to_dict(totals: MacroTotals) -> dict[str, object]:
    """Serialize meal totals."""
    return {
        "calories": round(totals.calories),
        "protein": round(totals.protein, 1),
        "carbs": round(totals.carbs, 1),
        "fats": round(totals.fats, 1),
    }


def food_entry_to_dict(item: FoodLineItem) -> dict[str, object]:
    """Serialize a food entry."""
    return {
        "id": str(item.id) if item.id else None,
        "food_name": item.food_name,
        "brand": item.brand,
        "serving_size": item.serving_size,
        "serving_unit": item.serving_unit,
        "quantity": item.quantity,
        "calories": item.calories,
        "protein": item.protein,
        "carbs": item.carbs,
        "fats": item.fats,
        "fiber": item.fiber,
        "sugar": item.sugar,
        "sodium": item.sodium,
    }


def meal_to_dict(meal: MealRecord) -> dict[str, object]:
    """Serialize a meal with totals recomputed from its entries."""
    return {
        "id": str(meal.id),
        "meal_type": meal.meal_type.value,
        "eaten_at": meal.eaten_at.isoformat(),
        "food_entries": [food_entry_to_dict(item) for item in meal.items],
        "totals": totals_to_dict(compute_meal_totals(meal.items)),
    }


def daily_totals_to_dict(day: DailyTotals) -> dict[str, object]:
    """Serialize daily totals."""
    return {
        "date": day.day.isoformat(),
        "calories": round(day.calories),
        "protein": round(day.protein, 1),
        "carbs": round(day.carbs, 1),
        "fats": round(day.fats, 1),
        "meal_count": day.meal_count,
    }


def averages_to_dict(averages: NutritionAverages) -> dict[str, object]:
    """Serialize nutrition averages."""
    return {
        "days_logged": averages.days_logged,
        "calories": round(averages.calories),
        "protein": round(averages.protein, 1),
        "carbs": round(averages.carbs, 1),
        "fats": round(averages.fats, 1),
    }


def food_summary_to_dict(food: FoodSummary) -> dict[str, object]:
    """Serialize an FDC search hit."""
    return {
        "fdc_id": food.fdc_id,
        "description": food.description,
        "brand_owner": food.brand_owner,
        "data_type": food.data_type,
        "serving_qty": food.serving_qty,
        "serving_unit": food.serving_unit,
        "calories": food.macros.calories,
        "protein": food.macros.protein,
        "carbs": food.macros.carbs,
        "fats": food.macros.fats,
    }


def activity_to_dict(activity: ActivityRecord) -> dict[str, object]:
    """Serialize an activity with display rounding."""
    metrics = activity.metrics
    pace = metrics.avg_pace_min_per_km
    return {
        "id": str(activity.id),
        "user_id": str(activity.user_id),
        "activity_type": activity.activity_type.value,
        "name": activity.name,
        "started_at": activity.started_at.isoformat(),
        "ended_at": activity.ended_at.isoformat() if activity.ended_at else None,
        "distance_km": round(metrics.distance_km, 2),
        "duration_seconds": metrics.duration_seconds,
        "avg_pace_min_per_km": round(pace, 2) if pace is not None else None,
        "elevation_gain_m": round(metrics.elevation_gain_m),
        "calories": round(metrics.estimated_calories),
        "route_data": {
            "type": activity.route.type,
            "coordinates": activity.route.coordinates,
        },
        "is_public": activity.is_public,
    }


def workout_to_dict(workout: WorkoutRecord) -> dict[str, object]:
    """Serialize a workout."""
    return {
        "id": str(workout.id),
        "name": workout.name,
        "performed_at": workout.performed_at.isoformat(),
        "duration_minutes": workout.duration_minutes,
        "calories_burned": (
            round(workout.calories_burned)
            if workout.calories_burned is not None
            else None
        ),
        "notes": workout.notes,
        "exercises": [exercise_to_dict(item) for item in workout.exercises],
    }


def exercise_to_dict(exercise: Exercise) -> dict[str, object]:
    """Serialize a workout exercise."""
    return {
        "id": str(exercise.id) if exercise.id else None,
        "exercise_name": exercise.exercise_name,
        "exercise_type": exercise.exercise_type.value,
        "sets": exercise.sets,
        "reps": exercise.reps,
        "weight_kg": exercise.weight_kg,
        "duration_minutes": exercise.duration_minutes,
        "distance_km": exercise.distance_km,
        "rest_seconds": exercise.rest_seconds,
        "notes": exercise.notes,
        "order_index": exercise.order_index,
    }


def weight_to_dict(log: WeightLog) -> dict[str, object]:
    """Serialize a weigh-in."""
    return {
        "id": str(log.id),
        "weight_kg": log.weight_kg,
        "logged_at": log.logged_at.isoformat(),
        "notes": log.notes,
    }


def steps_to_dict(log: StepLog) -> dict[str, object]:
    """Serialize a step count."""
    return {
        "id": str(log.id),
        "steps": log.steps,
        "logged_at": log.logged_at.isoformat(),
    }


def goals_to_dict(goals: UserGoals) -> dict[str, object]:
    """Serialize user goals."""
    return {
        "name": goals.name,
        "calorie_goal": goals.calorie_goal,
        "protein_goal": goals.protein_goal,
        "goal_weight": goals.goal_weight,
        "current_weight": goals.current_weight,
    }


def settings_to_dict(goals: UserGoals) -> dict[str, object]:
    """Serialize the full profile settings."""
    return {
        **goals_to_dict(goals),
        "carb_goal": goals.carb_goal,
        "fat_goal": goals.fat_goal,
        "height_cm": goals.height_cm,
        "date_of_birth": (
            goals.date_of_birth.isoformat() if goals.date_of_birth else None
        ),
        "gender": goals.gender,
        "activity_level": goals.activity_level,
        "dietary_preference": goals.dietary_preference,
        "measurement_system": goals.measurement_system,
    }


def measurement_to_dict(measurement: BodyMeasurement) -> dict[str, object]:
    """Serialize a body measurement."""
    return {
        "id": str(measurement.id),
        "measured_at": measurement.measured_at.isoformat(),
        **{name: measurement.sites.get(name) for name in MEASUREMENT_SITES},
        "notes": measurement.notes,
    }


def user_summary_to_dict(summary: UserSummary) -> dict[str, object]:
    """Serialize a user search result."""
    return {
        "id": str(summary.user_id),
        "name": summary.name,
        "email": summary.email,
        "follower_count": summary.follower_count,
        "following_count": summary.following_count,
        "is_following": summary.is_following,
    }


def feed_item_to_dict(item: FeedItem) -> dict[str, object]:
    """Serialize a feed entry."""
    data: dict[str, object] | None = None
    if item.activity is not None:
        data = activity_to_dict(item.activity)
    elif item.workout is not None:
        data = workout_to_dict(item.workout)
    return {
        "type": item.kind.value,
        "user_id": str(item.user_id),
        "date": item.occurred_at.isoformat(),
        "data": data,
    }


def insights_report_to_dict(report: NutritionInsightsReport) -> dict[str, object]:
    """Serialize nutrition insights with whole-number averages."""
    averages = report.averages
    return {
        "insights": report.insights.model_dump(),
        "stats": {
            "days_analyzed": averages.days_logged,
            "avg_daily_calories": round(averages.calories),
            "avg_daily_protein": round(averages.protein),
            "avg_daily_carbs": round(averages.carbs),
            "avg_daily_fats": round(averages.fats),
        },
        "period": {
            "start_date": report.start_date.isoformat(),
            "end_date": report.end_date.isoformat(),
        },
    }


def challenge_to_dict(challenge: ChallengeDefinition) -> dict[str, object]:
    """Serialize a challenge."""
    return {
        "id": str(challenge.id),
        "creator_id": str(challenge.creator_id) if challenge.creator_id else None,
        "name": challenge.name,
        "description": challenge.description,
        "challenge_type": challenge.challenge_type.value,
        "goal_value": challenge.goal_value,
        "start_date": challenge.start_date.isoformat(),
        "end_date": challenge.end_date.isoformat(),
        "is_public": challenge.is_public,
    }


def participation_to_dict(participation: Participation) -> dict[str, object]:
    """Serialize a challenge participation."""
    return {
        "challenge_id": str(participation.challenge_id),
        "user_id": str(participation.user_id),
        "joined_at": participation.joined_at.isoformat(),
    }


def leaderboard_entry_to_dict(entry: LeaderboardEntry) -> dict[str, object]:
    """Serialize a ranked leaderboard row."""
    return {
        "rank": entry.rank,
        "user_id": str(entry.user_id),
        "progress": round(entry.progress, 2),
        "progress_percentage": round(entry.progress_percentage, 1),
        "is_completed": entry.is_completed,
        "joined_at": entry.joined_at.isoformat(),
    }


def dashboard_to_dict(summary: DashboardSummary) -> dict[str, object]:
    """Serialize the dashboard summary."""
    return {
        "today": daily_totals_to_dict(summary.today),
        "week_workouts": summary.week_workouts,
        "week_distance_km": round(summary.week_distance_km, 2),
        "latest_weight": (
            weight_to_dict(summary.latest_weight) if summary.latest_weight else None
        ),
        "goals": goals_to_dict(summary.goals),
    }


def charts_to_dict(charts: ProgressCharts) -> dict[str, object]:
    """Serialize the progress chart series."""
    return {
        "weight": [{"date": day, "weight_kg": value} for day, value in charts.weight],
        "nutrition": [daily_totals_to_dict(day) for day in charts.nutrition],
        "workouts_per_week": [
            {"week_start": week, "count": count}
            for week, count in charts.workouts_per_week.items()
        ],
        "goals": goals_to_dict(charts.goals),
    }
