# src/wellcoach/domain/entities.py
"""
Core business vocabulary: the four coaching modules, subscription states,
recommendation drafts produced by the rule engine and the derived analytics
objects returned by the aggregator.

Analytics objects are never persisted. They are rebuilt on every request.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List
from enum import Enum

# --- ENUMERATIONS ---

class Module(str, Enum):
    """The four coaching domains."""
    TRAINING = "training"
    NUTRITION = "nutrition"
    MENTAL = "mental"
    PRODUCTIVITY = "productivity"

class SubscriptionTier(str, Enum):
    FREE = "free"
    PREMIUM = "premium"
    PRO = "pro"

class SubscriptionStatus(str, Enum):
    """Billing state of a user, driven by billing processor webhooks."""
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"

class FitnessLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

# --- RECOMMENDATIONS ---

MIN_PRIORITY = 1
MAX_PRIORITY = 10

@dataclass(frozen=True)
class RecommendationDraft:
    """
    A coaching suggestion derived from one event, not yet stored.
    Priority only orders the inbox; it has no effect on expiry.
    """
    module: Module
    recommendation_type: str
    title: str
    description: str
    priority: int
    action_data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not MIN_PRIORITY <= self.priority <= MAX_PRIORITY:
            raise ValueError(
                f"Recommendation priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}, got {self.priority}"
            )

# --- ANALYTICS ---

@dataclass
class TrainingSummary:
    weekly_goal: int
    completed: int = 0
    calories_burned: int = 0
    avg_duration: float = 0.0

@dataclass
class NutritionSummary:
    daily_calorie_goal: int
    consumed: int = 0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    meals_logged: int = 0

@dataclass
class MentalSummary:
    weekly_meditation_goal: int
    completed: int = 0
    # Midpoint of the 1-10 mood scale when there is nothing to average.
    avg_mood_before: float = 5.0
    avg_mood_after: float = 5.0

@dataclass
class ProductivitySummary:
    weekly_focus_goal: int
    achieved: int = 0
    tasks_completed: int = 0
    avg_focus_score: float = 0.0

@dataclass
class WeeklyAnalytics:
    """Unified view of one user's week across all modules."""
    training: TrainingSummary
    nutrition: NutritionSummary
    mental: MentalSummary
    productivity: ProductivitySummary
    weekly_score: int = 0
    streak_days: int = 0

@dataclass
class Dashboard:
    analytics: WeeklyAnalytics
    # Open inbox items, highest priority first.
    recommendations: List[Any] = field(default_factory=list)
