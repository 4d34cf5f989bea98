# src/wellcoach/infrastructure/db/repository.py
"""
Repositories over the ORM models. Each takes an open Session (Unit of Work)
and never commits; the caller's `session_scope()` owns the transaction.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wellcoach.domain.entities import Module, RecommendationDraft
from wellcoach.domain.errors import DependencyError
from wellcoach.domain.value_objects import as_utc, utcnow

from .models import (
    User, UserProfile, AiRecommendation, EVENT_MODELS,
)

logger = logging.getLogger(__name__)

# ==========================================================
# USER REPOSITORY
# ==========================================================
class UserRepository:
    """Repository for User entities."""
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def find_by_billing_customer_id(self, customer_id: str) -> Optional[User]:
        return self.session.execute(
            select(User).where(User.billing_customer_id == customer_id)
        ).scalar_one_or_none()

    def find_or_create(self, user_id: str, **claims) -> User:
        """Finds a user by identity-provider subject or creates it on first sight."""
        user = self.find_by_id(user_id)
        if user:
            return self._apply_claims(user, claims)

        logger.info("Creating new user for subject=%s", user_id)
        email = self._unclaimed_email(claims.get("email"), user_id)
        created = self._insert(user_id, claims, email)
        if created is not None:
            return created

        # A concurrent first request for the same subject won the insert.
        user = self.find_by_id(user_id)
        if user:
            return self._apply_claims(user, claims)
        if email is not None:
            logger.warning("Email for subject=%s was claimed concurrently; creating without it", user_id)
            created = self._insert(user_id, claims, None)
        if created is None:
            raise DependencyError(f"Could not create user {user_id}")
        return created

    def _insert(self, user_id: str, claims: Dict[str, Any], email: Optional[str]) -> Optional[User]:
        """Inserts inside a savepoint; returns None when a unique constraint rejects the row."""
        new_user = User(
            id=user_id,
            email=email,
            first_name=claims.get("first_name"),
            last_name=claims.get("last_name"),
            profile_image_url=claims.get("profile_image_url"),
        )
        try:
            with self.session.begin_nested():
                self.session.add(new_user)
        except IntegrityError as e:
            logger.info("Insert of user %s rejected: %s", user_id, e.orig)
            return None
        return new_user

    def _unclaimed_email(self, email: Optional[str], user_id: str) -> Optional[str]:
        if not email:
            return None
        owner = self.session.execute(select(User.id).where(User.email == email)).scalar_one_or_none()
        if owner is not None and owner != user_id:
            logger.warning("Email already linked to user %s; not assigning it to %s", owner, user_id)
            return None
        return email

    def _apply_claims(self, user: User, claims: Dict[str, Any]) -> User:
        updated = False
        for attr in ("email", "first_name", "last_name", "profile_image_url"):
            value = claims.get(attr)
            if attr == "email":
                value = self._unclaimed_email(value, user.id)
            if value and getattr(user, attr) != value:
                setattr(user, attr, value)
                updated = True
        if updated:
            self.session.flush()
        return user

    def update(self, user: User, **fields) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        self.session.flush()
        return user

# ==========================================================
# PROFILE REPOSITORY
# ==========================================================
class ProfileRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_user(self, user_id: str) -> Optional[UserProfile]:
        return self.session.execute(
            select(UserProfile).where(UserProfile.user_id == user_id)
        ).scalar_one_or_none()

    def upsert(self, user_id: str, **fields) -> UserProfile:
        profile = self.find_by_user(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id, **fields)
            self.session.add(profile)
        else:
            for key, value in fields.items():
                setattr(profile, key, value)
        self.session.flush()
        return profile

# ==========================================================
# EVENT REPOSITORY (append-only event store)
# ==========================================================
class EventRepository:
    """Query helpers shared by the four module event tables."""
    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def model_for(module: Any) -> type:
        return EVENT_MODELS[Module(module)]

    def add(self, module: Any, user_id: str, **fields) -> Any:
        model = self.model_for(module)
        event = model(user_id=user_id, **fields)
        self.session.add(event)
        self.session.flush()
        logger.debug("Stored %s event %s for user %s", model.MODULE.value, event.id, user_id)
        return event

    def list_for_user(self, module: Any, user_id: str) -> List[Any]:
        """All events of one module for a user, newest first."""
        model = self.model_for(module)
        stmt = (
            select(model)
            .where(model.user_id == user_id)
            .order_by(model.occurred_at.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def list_since(
        self, module: Any, user_id: str, since: datetime, until: Optional[datetime] = None
    ) -> List[Any]:
        """Events of one module in `[since, until)`; open-ended when `until` is None."""
        model = self.model_for(module)
        stmt = select(model).where(model.user_id == user_id, model.occurred_at >= since)
        if until is not None:
            stmt = stmt.where(model.occurred_at < until)
        return list(self.session.execute(stmt.order_by(model.occurred_at.asc())).scalars().all())

    def activity_dates(self, user_id: str, since: Optional[datetime] = None) -> Set[date]:
        """Distinct UTC calendar dates on which the user logged any event."""
        dates: Set[date] = set()
        for model in EVENT_MODELS.values():
            stmt = select(model.occurred_at).where(model.user_id == user_id)
            if since is not None:
                stmt = stmt.where(model.occurred_at >= since)
            for occurred_at in self.session.execute(stmt).scalars():
                if occurred_at is not None:
                    dates.add(as_utc(occurred_at).date())
        return dates

# ==========================================================
# RECOMMENDATION REPOSITORY (inbox)
# ==========================================================
class RecommendationRepository:
    """Repository for AiRecommendation rows. Every query is scoped to one user."""
    def __init__(self, session: Session):
        self.session = session

    def add_many(
        self,
        user_id: str,
        drafts: Iterable[RecommendationDraft],
        ttl_days: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> List[AiRecommendation]:
        """Stage the whole batch and flush once."""
        created_at = created_at or utcnow()
        expires_at = created_at + timedelta(days=ttl_days) if ttl_days else None
        rows = [
            AiRecommendation(
                user_id=user_id,
                module=draft.module,
                recommendation_type=draft.recommendation_type,
                title=draft.title,
                description=draft.description,
                action_data=dict(draft.action_data),
                priority=draft.priority,
                created_at=created_at,
                expires_at=expires_at,
            )
            for draft in drafts
        ]
        if not rows:
            return []
        self.session.add_all(rows)
        self.session.flush()
        logger.debug("Stored %d recommendations for user %s", len(rows), user_id)
        return rows

    def list_open_for_user(self, user_id: str, limit: Optional[int] = None) -> List[AiRecommendation]:
        """Open (not completed) items: priority desc, then newest first."""
        stmt = (
            select(AiRecommendation)
            .where(
                AiRecommendation.user_id == user_id,
                AiRecommendation.is_completed == False,
            )
            .order_by(AiRecommendation.priority.desc(), AiRecommendation.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def find_for_user(self, rec_id: str, user_id: str) -> Optional[AiRecommendation]:
        return self.session.execute(
            select(AiRecommendation).where(
                AiRecommendation.id == rec_id,
                AiRecommendation.user_id == user_id,
            )
        ).scalar_one_or_none()

    def update_flags(self, rec: AiRecommendation, updates: Dict[str, bool]) -> AiRecommendation:
        for key in ("is_read", "is_completed"):
            if updates.get(key) is not None:
                setattr(rec, key, bool(updates[key]))
        self.session.flush()
        return rec
