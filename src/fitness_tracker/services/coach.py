"""AI coach service for plans and chat."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol, TypeVar
from uuid import UUID
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ValidationError

from fitness_tracker.domain.coach import (
    ChatMessage,
    MealPlanRequest,
    MealPlanResponse,
    NutritionInsights,
    WorkoutPlanRequest,
    WorkoutPlanResponse,
)
from fitness_tracker.domain.errors import CoachResponseError, InvalidInputError
from fitness_tracker.domain.models import UserGoals
from fitness_tracker.domain.stats import DailyTotals, NutritionAverages
from fitness_tracker.services.bucketing import record_day
from fitness_tracker.services.nutrition import (
    average_daily_totals,
    compute_daily_totals,
)
from fitness_tracker.services.stats import DashboardSummary, StatsService

CHAT_HISTORY_LIMIT = 10

ModelT = TypeVar("ModelT", bound=BaseModel)

_logger = logging.getLogger(__name__)

WORKOUT_SYSTEM_PROMPT = (
    "You are a professional fitness trainer and workout program designer. "
    "Create effective, safe, and personalized workout plans that help users "
    "achieve their fitness goals. Always return valid JSON in the exact format "
    "specified."
)

MEAL_SYSTEM_PROMPT = (
    "You are a professional nutritionist and meal planning expert. "
    "Generate personalized meal plans that are realistic, delicious, and meet "
    "specific nutritional goals. Always return valid JSON in the exact format "
    "specified."
)

_WORKOUT_FORMAT = """{
  "workout_plan": {
    "name": "Workout plan name",
    "description": "Brief description of the workout",
    "total_duration": <minutes>,
    "difficulty": "<fitness level>",
    "equipment": ["equipment 1"],
    "warm_up": {"duration": 5, "exercises": [
      {"name": "Exercise", "duration": "2 min", "instructions": "How to perform"}
    ]},
    "main_workout": {"exercises": [
      {"name": "Exercise", "target_muscles": ["muscle"], "sets": 3,
       "reps": "10-12", "rest_time": "60 sec", "instructions": "Instructions",
       "form_tips": ["tip"]}
    ]},
    "cool_down": {"duration": 5, "exercises": [
      {"name": "Stretch", "duration": "30 sec", "instructions": "How to stretch"}
    ]},
    "tips": ["tip"],
    "estimated_calories_burn": 250
  }
}"""

INSIGHTS_SYSTEM_PROMPT = (
    "You are a professional nutritionist analyzing eating patterns. "
    "Provide actionable insights, identify patterns, and give personalized "
    "recommendations. Be encouraging and constructive. Always return valid JSON."
)

_MEAL_FORMAT = """{
  "meal_plan": [
    {"day": 1, "meals": [
      {"meal_type": "breakfast", "name": "Meal name",
       "description": "Brief description",
       "foods": [{"item": "Food", "quantity": "Amount", "calories": 0,
                  "protein": 0, "carbs": 0, "fats": 0}],
       "prep_time": "15 min", "instructions": "Simple cooking instructions"}
    ]}
  ],
  "weekly_tips": ["tip"]
}"""

_INSIGHTS_FORMAT = """{
  "summary": "Overall assessment in 2-3 sentences",
  "adherence": {"calories": 85, "protein": 92, "carbs": 78, "fats": 88},
  "strengths": ["Positive observation"],
  "areas_for_improvement": ["Improvement area"],
  "recommendations": [
    {"category": "Protein", "suggestion": "Specific actionable advice",
     "priority": "high"}
  ],
  "weekly_trend": "improving",
  "motivational_message": "Encouraging message"
}"""


class CoachClient(Protocol):
    """Interface for language-model completions."""

    async def complete_json(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
    ) -> dict[str, object]:
        """Return a JSON object produced by the model."""

    async def chat(
        self,
        *,
        model: str,
        system_prompt: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Return the model's reply to a conversation."""


@dataclass
class NutritionInsightsReport:
    """Model insights with the averages they were based on."""

    insights: NutritionInsights
    averages: NutritionAverages
    start_date: date
    end_date: date


@dataclass
class CoachService:
    """Service that builds coach prompts and validates model output."""

    client: CoachClient
    model: str
    stats_service: StatsService

    async def generate_workout_plan(
        self, request: WorkoutPlanRequest
    ) -> WorkoutPlanResponse:
        """Generate and validate a workout plan."""
        raw = await self.client.complete_json(
            model=self.model,
            system_prompt=WORKOUT_SYSTEM_PROMPT,
            user_prompt=build_workout_prompt(request),
            temperature=0.7,
        )
        return _validate(WorkoutPlanResponse, raw, "workout plan")

    async def generate_meal_plan(self, request: MealPlanRequest) -> MealPlanResponse:
        """Generate and validate a meal plan."""
        raw = await self.client.complete_json(
            model=self.model,
            system_prompt=MEAL_SYSTEM_PROMPT,
            user_prompt=build_meal_prompt(request),
            temperature=0.7,
        )
        return _validate(MealPlanResponse, raw, "meal plan")

    async def generate_nutrition_insights(
        self, user_id: UUID, start_day: date, end_day: date
    ) -> NutritionInsightsReport:
        """Analyse logged meals in a date range against the user's goals."""
        if end_day < start_day:
            raise InvalidInputError("End date must not be before start date")
        tz = ZoneInfo(self.stats_service.timezone_name)
        meals = self.stats_service.meal_service.list_meals_for_range(
            user_id, start_day, end_day
        )
        daily = compute_daily_totals(meals, tz)
        if not daily:
            raise InvalidInputError("No meal data found for the selected period")
        foods: dict[date, list[str]] = {}
        for meal in meals:
            names = foods.setdefault(record_day(meal.eaten_at, tz), [])
            names.extend(item.food_name for item in meal.items if item.food_name)
        goals = self.stats_service.user_service.get_goals(user_id)
        raw = await self.client.complete_json(
            model=self.model,
            system_prompt=INSIGHTS_SYSTEM_PROMPT,
            user_prompt=build_insights_prompt(daily, foods, goals),
            temperature=0.7,
        )
        return NutritionInsightsReport(
            insights=_validate(NutritionInsights, raw, "nutrition insights"),
            averages=average_daily_totals(daily),
            start_date=start_day,
            end_date=end_day,
        )

    async def chat(
        self, user_id: UUID, message: str, history: list[ChatMessage]
    ) -> ChatMessage:
        """Answer a chat message using the user's goals and recent activity."""
        summary = self.stats_service.get_dashboard(user_id)
        messages = [
            {"role": item.role, "content": item.content}
            for item in history[-CHAT_HISTORY_LIMIT:]
        ]
        messages.append({"role": "user", "content": message})
        reply = await self.client.chat(
            model=self.model,
            system_prompt=build_chat_system_prompt(summary),
            messages=messages,
            temperature=0.8,
            max_output_tokens=500,
        )
        if not reply.strip():
            raise CoachResponseError("Coach returned an empty reply")
        return ChatMessage(role="assistant", content=reply)


def build_workout_prompt(request: WorkoutPlanRequest) -> str:
    """Render the workout plan prompt."""
    lines = [
        "Create a detailed workout plan with the following requirements:",
        "",
        "WORKOUT PARAMETERS:",
        f"- Goal: {request.goal}",
        f"- Fitness Level: {request.fitness_level}",
        f"- Equipment Available: {request.equipment}",
        f"- Duration: {request.duration_minutes} minutes",
        f"- Workout Type: {request.workout_type}",
        f"- Days per Week: {request.days_per_week}",
    ]
    if request.focus_areas:
        lines.append(f"- Focus Areas: {', '.join(request.focus_areas)}")
    lines += [
        "",
        "REQUIREMENTS:",
        f"1. Workout should be exactly {request.duration_minutes} minutes "
        "including warm-up and cool-down",
        "2. Include warm-up (5 min) and cool-down (5 min)",
        "3. Exercises should match fitness level",
        "4. Use only available equipment",
        "5. Include sets, reps, rest times and form tips",
        "",
        "Return ONLY a JSON object in this exact format:",
        _WORKOUT_FORMAT,
    ]
    return "\n".join(lines)


def build_meal_prompt(request: MealPlanRequest) -> str:
    """Render the meal plan prompt."""
    lines = [
        f"Create a {request.days_count}-day meal plan with the following "
        "requirements:",
        "",
        "NUTRITIONAL GOALS (Daily):",
        f"- Calories: {request.calorie_goal:.0f} kcal",
        f"- Protein: {request.protein_goal:.0f}g",
        f"- Carbohydrates: {request.carb_goal:.0f}g",
        f"- Fat: {request.fat_goal:.0f}g",
        "",
        "DIETARY PREFERENCES:",
        f"- Diet type: {request.dietary_preference}",
    ]
    if request.allergies:
        lines.append(f"- Allergies/Restrictions: {', '.join(request.allergies)}")
    lines += [
        "",
        "REQUIREMENTS:",
        "1. Each day should have breakfast, lunch, dinner, and 2 snacks",
        "2. Include portion sizes and approximate macros per food",
        "3. Total daily macros should be within 10% of targets",
        "4. Vary meals across days",
        "",
        "Return ONLY a JSON object in this exact format:",
        _MEAL_FORMAT,
    ]
    return "\n".join(lines)


def build_insights_prompt(
    daily: list[DailyTotals], foods: dict[date, list[str]], goals: UserGoals
) -> str:
    """Render the nutrition insights prompt."""
    lines = ["Analyze this nutrition data and provide insights:", "", "DAILY DATA:"]
    for day in daily:
        eaten = ", ".join(foods.get(day.day, [])) or "no food names logged"
        lines.append(
            f"- {day.day.isoformat()}: {round(day.calories)} kcal, "
            f"{round(day.protein)}g protein, {round(day.carbs)}g carbs, "
            f"{round(day.fats)}g fats; foods: {eaten}"
        )
    lines += [
        "",
        "GOALS (Daily):",
        f"- Calories: {goals.calorie_goal:.0f} kcal",
        f"- Protein: {goals.protein_goal:.0f}g",
    ]
    if goals.carb_goal is not None:
        lines.append(f"- Carbohydrates: {goals.carb_goal:.0f}g")
    if goals.fat_goal is not None:
        lines.append(f"- Fat: {goals.fat_goal:.0f}g")
    profile = [
        f"- {label}: {value}"
        for label, value in (
            ("Current weight", goals.current_weight),
            ("Goal weight", goals.goal_weight),
            ("Activity level", goals.activity_level),
        )
        if value is not None
    ]
    if profile:
        lines += ["", "USER INFO:", *profile]
    lines += [
        "",
        "Analyze and provide:",
        "1. Overall adherence to goals as percentages",
        "2. Patterns (good and areas for improvement)",
        "3. Specific actionable recommendations",
        "4. Progress assessment",
        "",
        "Return ONLY a JSON object in this exact format:",
        _INSIGHTS_FORMAT,
    ]
    return "\n".join(lines)


def build_chat_system_prompt(summary: DashboardSummary) -> str:
    """Render the coach persona with the user's current stats."""
    goals = summary.goals
    profile = [
        f"- Daily calorie goal: {goals.calorie_goal:.0f} kcal",
        f"- Daily protein goal: {goals.protein_goal:.0f}g",
    ]
    if summary.latest_weight is not None:
        profile.append(f"- Current weight: {summary.latest_weight.weight_kg:g} kg")
    elif goals.current_weight is not None:
        profile.append(f"- Current weight: {goals.current_weight:g} kg")
    if goals.goal_weight is not None:
        profile.append(f"- Goal weight: {goals.goal_weight:g} kg")
    activity = [
        f"- Calories consumed: {round(summary.today.calories)} kcal",
        f"- Protein consumed: {round(summary.today.protein)}g",
        f"- Workouts this week: {summary.week_workouts}",
        f"- Distance this week: {summary.week_distance_km:.2f} km",
    ]
    name = goals.name or "the user"
    return "\n".join(
        [
            "You are a professional fitness coach and nutritionist assistant. "
            f"You're helping {name} achieve their fitness goals.",
            "",
            "USER'S PROFILE:",
            *profile,
            "",
            "TODAY'S ACTIVITY:",
            *activity,
            "",
            "Give specific, encouraging, actionable advice in 2-4 short "
            "paragraphs. Only use the stats above; ask when something is "
            "unknown. Never recommend extreme diets or unsafe practices.",
        ]
    )


def _validate(
    model_type: type[ModelT], raw: dict[str, object], label: str
) -> ModelT:
    try:
        return model_type.model_validate(raw)
    except ValidationError as exc:
        _logger.warning("Coach returned an invalid %s: %s", label, exc)
        raise CoachResponseError(f"Coach returned an invalid {label}") from exc
