"""Models for AI coach requests and structured responses."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field


class WorkoutPlanRequest(BaseModel):
    """Parameters for a generated workout plan."""

    goal: str
    fitness_level: Literal["beginner", "intermediate", "advanced"]
    equipment: str
    duration_minutes: int = Field(gt=0, le=240)
    workout_type: str = "full_body"
    days_per_week: int = Field(default=3, ge=1, le=7)
    focus_areas: list[str] = Field(default_factory=list)


class TimedExercise(BaseModel):
    """Warm-up or cool-down movement."""

    name: str
    duration: str
    instructions: str = ""


class PlanPhase(BaseModel):
    """Warm-up or cool-down block."""

    duration: int = Field(ge=0)
    exercises: list[TimedExercise] = Field(default_factory=list)


class MainExercise(BaseModel):
    """Main workout exercise."""

    name: str
    target_muscles: list[str] = Field(default_factory=list)
    sets: int = Field(ge=1)
    reps: str
    rest_time: str = ""
    instructions: str = ""
    form_tips: list[str] = Field(default_factory=list)


class MainWorkout(BaseModel):
    """Main workout block."""

    exercises: list[MainExercise]


class WorkoutPlan(BaseModel):
    """Generated workout plan."""

    name: str
    description: str = ""
    total_duration: int = Field(gt=0)
    difficulty: str
    equipment: list[str] = Field(default_factory=list)
    warm_up: PlanPhase
    main_workout: MainWorkout
    cool_down: PlanPhase
    tips: list[str] = Field(default_factory=list)
    estimated_calories_burn: float = Field(default=0.0, ge=0.0)


class WorkoutPlanResponse(BaseModel):
    """Structured output for workout plan generation."""

    workout_plan: WorkoutPlan


class MealPlanRequest(BaseModel):
    """Parameters for a generated meal plan."""

    calorie_goal: float = Field(gt=0)
    protein_goal: float = Field(ge=0)
    carb_goal: float = Field(ge=0)
    fat_goal: float = Field(ge=0)
    dietary_preference: str = "omnivore"
    allergies: list[str] = Field(default_factory=list)
    days_count: int = Field(default=7, ge=1, le=14)


class PlannedFood(BaseModel):
    """Food within a planned meal."""

    item: str
    quantity: str
    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fats: float = Field(ge=0.0)


class PlannedMeal(BaseModel):
    """Meal within a planned day."""

    meal_type: str
    name: str
    description: str = ""
    foods: list[PlannedFood] = Field(default_factory=list)
    prep_time: str = ""
    instructions: str = ""


class PlannedDay(BaseModel):
    """Single day of a meal plan."""

    day: int = Field(ge=1)
    meals: list[PlannedMeal]


class MealPlanResponse(BaseModel):
    """Structured output for meal plan generation."""

    meal_plan: list[PlannedDay]
    weekly_tips: list[str] = Field(default_factory=list)


class ChatMessage(BaseModel):
    """Single coach conversation message."""

    role: Literal["user", "assistant"]
    content: str = Field(min_length=1, max_length=4000)


class NutritionInsightsRequest(BaseModel):
    """Date range to analyse; defaults to the last seven days."""

    start_date: date | None = None
    end_date: date | None = None


class MacroAdherence(BaseModel):
    """Percentage of each goal met on average."""

    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fats: float = Field(ge=0.0)


class InsightRecommendation(BaseModel):
    """Actionable nutrition recommendation."""

    category: str
    suggestion: str
    priority: Literal["high", "medium", "low"] = "medium"


class NutritionInsights(BaseModel):
    """Structured output for nutrition insights."""

    summary: str
    adherence: MacroAdherence
    strengths: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)
    recommendations: list[InsightRecommendation] = Field(default_factory=list)
    weekly_trend: Literal["improving", "stable", "declining"] = "stable"
    motivational_message: str = ""
