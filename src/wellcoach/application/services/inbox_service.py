# src/wellcoach/application/services/inbox_service.py

from __future__ import annotations
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from wellcoach.domain.errors import NotFoundError
from wellcoach.infrastructure.db.models import AiRecommendation
from wellcoach.infrastructure.db.repository import RecommendationRepository

log = logging.getLogger(__name__)


class InboxService:
    """
    Per-user recommendation inbox.
    All methods require an external SQLAlchemy Session (Unit of Work pattern).
    """

    def __init__(self, repo_class: type[RecommendationRepository] = RecommendationRepository):
        self.repo_class = repo_class

    def list(self, session: Session, user_id: str) -> List[AiRecommendation]:
        """Open recommendations, highest priority first, newest first within a priority."""
        return self.repo_class(session).list_open_for_user(user_id)

    def top(self, session: Session, user_id: str, limit: int) -> List[AiRecommendation]:
        return self.repo_class(session).list_open_for_user(user_id, limit=limit)

    def update(
        self,
        session: Session,
        rec_id: str,
        user_id: str,
        is_read: Optional[bool] = None,
        is_completed: Optional[bool] = None,
    ) -> AiRecommendation:
        """Partial flag update. Another user's id is indistinguishable from a missing one."""
        repo = self.repo_class(session)
        rec = repo.find_for_user(rec_id, user_id)
        if rec is None:
            log.info("Recommendation %s not found for user %s", rec_id, user_id)
            raise NotFoundError(f"Recommendation {rec_id} not found")
        return repo.update_flags(rec, {"is_read": is_read, "is_completed": is_completed})
