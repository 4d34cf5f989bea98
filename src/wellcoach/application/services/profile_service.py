# src/wellcoach/application/services/profile_service.py

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from wellcoach.domain.entities import FitnessLevel, Module
from wellcoach.domain.errors import ValidationError
from wellcoach.infrastructure.db.models import UserProfile
from wellcoach.infrastructure.db.repository import ProfileRepository

log = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "primary_goal", "fitness_level", "dietary_restrictions",
    "health_conditions", "weekly_goals", "preferences",
)


class ProfileService:
    """Coaching goals and preferences, one profile per user."""

    def __init__(self, repo_class: type[ProfileRepository] = ProfileRepository):
        self.repo_class = repo_class

    def get(self, session: Session, user_id: str) -> Optional[UserProfile]:
        return self.repo_class(session).find_by_user(user_id)

    def upsert(self, session: Session, user_id: str, fields: Dict[str, Any]) -> UserProfile:
        clean = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
        errors = []
        if clean.get("primary_goal") is not None:
            try:
                clean["primary_goal"] = Module(clean["primary_goal"])
            except ValueError:
                errors.append({"field": "primary_goal", "message": "Unknown module", "type": "enum"})
        if clean.get("fitness_level") is not None:
            try:
                clean["fitness_level"] = FitnessLevel(clean["fitness_level"])
            except ValueError:
                errors.append({"field": "fitness_level", "message": "Unknown fitness level", "type": "enum"})
        if errors:
            raise ValidationError("Invalid profile data", errors=errors)
        profile = self.repo_class(session).upsert(user_id, **clean)
        log.info("Profile saved for user %s", user_id)
        return profile
