# --- START OF FILE: src/wellcoach/interfaces/api/schemas.py ---
"""
Request and response models for the HTTP API.

JSON uses camelCase keys; snake_case is accepted on input as well.
"""
from __future__ import annotations
from typing import Annotated, Any, Dict, List, Optional
from datetime import datetime, timedelta

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from wellcoach.domain.entities import (
    FitnessLevel, MealType, Module, SubscriptionStatus, SubscriptionTier,
)
from wellcoach.domain.errors import ValidationError
from wellcoach.config import settings
from wellcoach.domain.value_objects import as_utc, utcnow


def not_in_future(value: datetime) -> datetime:
    if value > utcnow() + timedelta(seconds=settings.EVENT_CLOCK_SKEW_SECONDS):
        raise ValueError("must not be in the future")
    return value


UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]
# Client-supplied event time: backdating is allowed, future dates are not.
EventTime = Annotated[datetime, AfterValidator(as_utc), AfterValidator(not_in_future)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrmOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# --- Module events: input ---

class TrainingIn(CamelModel):
    workout_type: str = Field(min_length=1, max_length=100)
    duration: int = Field(ge=0)
    calories_burned: Optional[int] = Field(default=None, ge=0)
    exercises: Optional[List[Any]] = None
    notes: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    completed_at: Optional[EventTime] = None


class MacrosIn(CamelModel):
    protein: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    fat: float = Field(default=0, ge=0)
    fiber: float = Field(default=0, ge=0)


class NutritionIn(CamelModel):
    meal_type: MealType
    food_items: Optional[List[Any]] = None
    total_calories: int = Field(ge=0)
    macros: Optional[MacrosIn] = None
    logged_at: Optional[EventTime] = None


class MentalIn(CamelModel):
    session_type: str = Field(min_length=1, max_length=100)
    duration: Optional[int] = Field(default=None, ge=0)
    mood_before: int = Field(ge=1, le=10)
    mood_after: int = Field(ge=1, le=10)
    notes: Optional[str] = None
    completed_at: Optional[EventTime] = None


class ProductivityIn(CamelModel):
    session_type: str = Field(min_length=1, max_length=100)
    duration: int = Field(ge=0)
    tasks_completed: int = Field(ge=0)
    focus_score: int = Field(ge=1, le=10)
    productivity: Optional[Dict[str, Any]] = None
    completed_at: Optional[EventTime] = None


EVENT_INPUTS = {
    Module.TRAINING: TrainingIn,
    Module.NUTRITION: NutritionIn,
    Module.MENTAL: MentalIn,
    Module.PRODUCTIVITY: ProductivityIn,
}


def parse_event_payload(module: Module, payload: Any) -> Dict[str, Any]:
    """Validate a raw JSON body into model field values; raises ValidationError."""
    schema = EVENT_INPUTS[Module(module)]
    try:
        parsed = schema.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, message=f"Invalid {Module(module).value} entry")
    # Unset timestamps fall back to the column default (now).
    return parsed.model_dump(exclude_none=True)


# --- Module events: output ---

class TrainingOut(OrmOut):
    id: str
    user_id: str
    workout_type: str
    duration: int
    calories_burned: Optional[int] = None
    exercises: Optional[List[Any]] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    completed_at: UtcDateTime


class NutritionOut(OrmOut):
    id: str
    user_id: str
    meal_type: MealType
    food_items: Optional[List[Any]] = None
    total_calories: int
    macros: Optional[Dict[str, Any]] = None
    logged_at: UtcDateTime


class MentalOut(OrmOut):
    id: str
    user_id: str
    session_type: str
    duration: Optional[int] = None
    mood_before: int
    mood_after: int
    notes: Optional[str] = None
    completed_at: UtcDateTime


class ProductivityOut(OrmOut):
    id: str
    user_id: str
    session_type: str
    duration: int
    tasks_completed: int
    focus_score: int
    productivity: Optional[Dict[str, Any]] = None
    completed_at: UtcDateTime


EVENT_OUTPUTS = {
    Module.TRAINING: TrainingOut,
    Module.NUTRITION: NutritionOut,
    Module.MENTAL: MentalOut,
    Module.PRODUCTIVITY: ProductivityOut,
}


def event_out(module: Module, event: Any) -> Dict[str, Any]:
    return EVENT_OUTPUTS[Module(module)].model_validate(event).model_dump(by_alias=True, mode="json")


# --- Recommendations ---

class RecommendationOut(OrmOut):
    id: str
    user_id: str
    module: Module
    recommendation_type: str
    title: str
    description: str
    action_data: Dict[str, Any] = Field(default_factory=dict)
    priority: int
    is_read: bool = False
    is_completed: bool = False
    created_at: UtcDateTime
    expires_at: Optional[UtcDateTime] = None


class RecommendationUpdateIn(CamelModel):
    is_read: Optional[bool] = None
    is_completed: Optional[bool] = None


# --- Analytics / dashboard ---

class TrainingSummaryOut(OrmOut):
    weekly_goal: int
    completed: int
    calories_burned: int
    avg_duration: float


class NutritionSummaryOut(OrmOut):
    daily_calorie_goal: int
    consumed: int
    protein: float
    carbs: float
    fat: float
    fiber: float
    meals_logged: int


class MentalSummaryOut(OrmOut):
    weekly_meditation_goal: int
    completed: int
    avg_mood_before: float
    avg_mood_after: float


class ProductivitySummaryOut(OrmOut):
    weekly_focus_goal: int
    achieved: int
    tasks_completed: int
    avg_focus_score: float


class WeeklyAnalyticsOut(OrmOut):
    training: TrainingSummaryOut
    nutrition: NutritionSummaryOut
    mental: MentalSummaryOut
    productivity: ProductivitySummaryOut
    weekly_score: int
    streak_days: int


class DashboardOut(OrmOut):
    analytics: WeeklyAnalyticsOut
    recommendations: List[RecommendationOut] = Field(default_factory=list)


# --- Users / profile ---

class UserOut(OrmOut):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    subscription_tier: SubscriptionTier
    subscription_status: SubscriptionStatus
    created_at: UtcDateTime


class ProfileIn(CamelModel):
    # Enumerated fields are checked by ProfileService so the error shape matches.
    primary_goal: Optional[str] = None
    fitness_level: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    health_conditions: Optional[str] = None
    weekly_goals: Optional[Dict[str, Any]] = None
    preferences: Optional[Dict[str, Any]] = None


class ProfileOut(OrmOut):
    id: str
    user_id: str
    primary_goal: Optional[Module] = None
    fitness_level: Optional[FitnessLevel] = None
    dietary_restrictions: Optional[str] = None
    health_conditions: Optional[str] = None
    weekly_goals: Optional[Dict[str, Any]] = None
    preferences: Optional[Dict[str, Any]] = None
    updated_at: UtcDateTime
# --- END OF FILE ---
