# src/wellcoach/infrastructure/db/models/__init__.py
"""
Makes the models package importable as a whole so Alembic and
`create_tables()` see every table on `Base.metadata`.
"""

from .base import Base, JSONType
from .auth import User, UserProfile
from .events import (
    TrainingSession,
    NutritionEntry,
    MentalSession,
    ProductivitySession,
    EVENT_MODELS,
)
from .recommendation import AiRecommendation

__all__ = [
    "Base",
    "JSONType",
    "User",
    "UserProfile",
    "TrainingSession",
    "NutritionEntry",
    "MentalSession",
    "ProductivitySession",
    "EVENT_MODELS",
    "AiRecommendation",
]
