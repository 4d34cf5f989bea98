from .entities import (
    Module,
    SubscriptionTier,
    SubscriptionStatus,
    FitnessLevel,
    MealType,
    RecommendationDraft,
    TrainingSummary,
    NutritionSummary,
    MentalSummary,
    ProductivitySummary,
    WeeklyAnalytics,
    Dashboard,
)
from .errors import (
    WellCoachError,
    ValidationError,
    NotFoundError,
    DependencyError,
    RecommendationGenerationError,
)

__all__ = [
    "Module",
    "SubscriptionTier",
    "SubscriptionStatus",
    "FitnessLevel",
    "MealType",
    "RecommendationDraft",
    "TrainingSummary",
    "NutritionSummary",
    "MentalSummary",
    "ProductivitySummary",
    "WeeklyAnalytics",
    "Dashboard",
    "WellCoachError",
    "ValidationError",
    "NotFoundError",
    "DependencyError",
    "RecommendationGenerationError",
]
